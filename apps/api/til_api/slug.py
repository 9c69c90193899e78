"""Reversible mapping between tags and URL path segments.

Plain ASCII tags (letters, digits, ``-`` and ``_``) are used as-is so URLs stay
readable. Anything else is UTF-8 encoded, base64'd with the URL-safe alphabet
and unpadded, then prefixed with ``b64_``.
"""

from __future__ import annotations

import base64
import binascii
import logging
import re

logger = logging.getLogger("til.slug")

SLUG_PREFIX = "b64_"

_PLAIN_TAG_RE = re.compile(r"[a-zA-Z0-9_-]+")


class TagSlugCodec:
    def __init__(self) -> None:
        self.decode_failures = 0

    def tag_to_slug(self, tag: str) -> str:
        if _PLAIN_TAG_RE.fullmatch(tag):
            return tag
        encoded = base64.b64encode(tag.encode("utf-8")).decode("ascii")
        return SLUG_PREFIX + encoded.replace("+", "-").replace("/", "_").rstrip("=")

    def slug_to_tag(self, slug: str) -> str:
        if not slug.startswith(SLUG_PREFIX):
            return slug

        b64 = slug[len(SLUG_PREFIX) :].replace("-", "+").replace("_", "/")
        b64 += "=" * (-len(b64) % 4)
        try:
            return base64.b64decode(b64, validate=True).decode("utf-8")
        except (binascii.Error, UnicodeDecodeError) as e:
            # Navigation must keep working on a malformed slug.
            self.decode_failures += 1
            logger.warning("slug_decode_failed", extra={"slug": slug, "error": str(e)})
            return slug


default_codec = TagSlugCodec()


def tag_to_slug(tag: str) -> str:
    return default_codec.tag_to_slug(tag)


def slug_to_tag(slug: str) -> str:
    return default_codec.slug_to_tag(slug)
