from __future__ import annotations

from typing import Callable, Protocol, runtime_checkable

Clock = Callable[[], float]


@runtime_checkable
class BuildLock(Protocol):
    """Advisory lock shared by build workers that may rescan the notes directory.

    ``try_acquire`` never blocks: it returns ``False`` when another worker
    holds a fresh lock and raises ``LockUnavailableError`` when the lock state
    cannot be confirmed at all.
    """

    async def try_acquire(self) -> bool:
        ...

    async def release(self) -> None:
        ...

    async def is_held(self) -> bool:
        ...
