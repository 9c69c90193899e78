from __future__ import annotations

import logging
import time
import uuid
from typing import Optional

from fastapi import FastAPI, HTTPException, Query, Request
from fastapi.responses import JSONResponse

from til_api.config import Settings, load_settings
from til_api.dependencies import build_catalog
from til_api.domain.exceptions import DirectoryAccessError
from til_api.domain.schemas import (
    ArchiveOut,
    NoteDetailOut,
    NoteGetOut,
    NotePageOut,
    NoteSummaryOut,
    TagCountOut,
    TagNotesOut,
    TagsOut,
)
from til_api.logging_setup import setup_logging
from til_api.slug import slug_to_tag, tag_to_slug


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    app = FastAPI(title="TIL API", version="0.1.0")

    settings = settings or load_settings()
    setup_logging(settings.log_level)
    catalog = build_catalog(settings)

    logger = logging.getLogger("til.api")

    @app.middleware("http")
    async def request_id_and_logging(request: Request, call_next):
        request_id = request.headers.get("x-request-id") or str(uuid.uuid4())
        request.state.request_id = request_id
        start = time.perf_counter()

        try:
            response = await call_next(request)
        except Exception:
            dt_ms = (time.perf_counter() - start) * 1000.0
            logger.exception("request_error", extra={"rid": request_id, "path": request.url.path, "ms": dt_ms})
            return JSONResponse(
                status_code=500,
                content={"detail": "internal_error", "request_id": request_id},
                headers={"X-Request-ID": request_id},
            )

        dt_ms = (time.perf_counter() - start) * 1000.0
        if settings.api_debug_log:
            logger.info(
                "request",
                extra={
                    "rid": request_id,
                    "method": request.method,
                    "path": request.url.path,
                    "query": request.url.query,
                    "status": response.status_code,
                    "ms": dt_ms,
                },
            )
        else:
            logger.debug(
                "request",
                extra={
                    "rid": request_id,
                    "method": request.method,
                    "path": request.url.path,
                    "status": response.status_code,
                    "ms": dt_ms,
                },
            )
        response.headers["X-Request-ID"] = request_id
        return response

    @app.exception_handler(DirectoryAccessError)
    async def directory_unavailable(request: Request, exc: DirectoryAccessError):
        logger.error(
            "notes_directory_unavailable",
            extra={"rid": getattr(request.state, "request_id", None), "directory": exc.directory, "error": exc.reason},
        )
        return JSONResponse(status_code=503, content={"detail": "notes_directory_unavailable"})

    @app.get("/health")
    async def health():
        return {"ok": True}

    @app.get("/notes", response_model=NotePageOut)
    async def list_notes(page: int = Query(1, ge=1)):
        result = await catalog.page(page)
        return NotePageOut(
            items=[NoteDetailOut.from_note(n) for n in result.items],
            page=result.page_number,
            page_size=result.page_size,
            total_pages=result.total_pages,
            has_previous=result.has_previous,
            has_next=result.has_next,
        )

    @app.get("/archive", response_model=ArchiveOut)
    async def archive():
        notes = await catalog.archive()
        return ArchiveOut(items=[NoteSummaryOut.from_note(n) for n in notes], total=len(notes))

    @app.get("/notes/{note_id}", response_model=NoteGetOut)
    async def get_note(note_id: str):
        note, around = await catalog.note_with_neighbours(note_id)
        if note is None:
            raise HTTPException(status_code=404, detail="note_not_found")
        return NoteGetOut(
            note=NoteDetailOut.from_note(note),
            previous=NoteSummaryOut.from_note(around.previous) if around.previous else None,
            next=NoteSummaryOut.from_note(around.next) if around.next else None,
        )

    @app.get("/tags", response_model=TagsOut)
    async def list_tags():
        tags = await catalog.all_tags()
        return TagsOut(items=[TagCountOut(tag=t.tag, slug=tag_to_slug(t.tag), count=t.count) for t in tags])

    @app.get("/tags/{slug}", response_model=TagNotesOut)
    async def notes_for_tag(slug: str):
        tag = slug_to_tag(slug)
        notes = await catalog.notes_by_tag(tag)
        if not notes:
            raise HTTPException(status_code=404, detail="tag_not_found")
        return TagNotesOut(tag=tag, slug=tag_to_slug(tag), items=[NoteDetailOut.from_note(n) for n in notes])

    @app.post("/admin/cache/invalidate")
    async def invalidate_cache(request: Request):
        await catalog.invalidate()
        logger.info("cache_invalidate", extra={"rid": request.state.request_id})
        return {"ok": True}

    return app


app = create_app()
