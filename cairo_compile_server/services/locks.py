"""Per-path locks so concurrent jobs on the same artifact run one at a time."""

import asyncio
from contextlib import asynccontextmanager
from pathlib import Path
from typing import AsyncIterator, Dict, Optional, Tuple, Union


class PathLocks:
    """Registry of asyncio locks keyed by resolved filesystem path.

    An entry lives only while some job holds or waits on it.
    """

    def __init__(self):
        self._locks: Dict[str, Tuple[asyncio.Lock, int]] = {}

    @asynccontextmanager
    async def hold(self, path: Union[str, Path]) -> AsyncIterator[None]:
        key = str(path)
        lock, users = self._locks.get(key, (None, 0))
        if lock is None:
            lock = asyncio.Lock()
        self._locks[key] = (lock, users + 1)
        try:
            async with lock:
                yield
        finally:
            lock, users = self._locks[key]
            if users <= 1:
                del self._locks[key]
            else:
                self._locks[key] = (lock, users - 1)

    def __len__(self) -> int:
        return len(self._locks)


# Global singleton
_locks: Optional[PathLocks] = None


def get_path_locks() -> PathLocks:
    """Get the process-wide path lock registry."""
    global _locks
    if _locks is None:
        _locks = PathLocks()
    return _locks
