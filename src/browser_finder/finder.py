"""Browser finder: fast well-known-path lookup backed by a cached full scan."""

import asyncio
import logging
from typing import Awaitable, Callable, Generic, Optional, Protocol, Sequence, TypeVar

from .models import Executable, Quality
from .system import can_access

logger = logging.getLogger(__name__)

T = TypeVar("T")


class BrowserVariant(Protocol):
    """Platform- and family-specific discovery strategy used by BrowserFinder."""

    def well_known_paths(self) -> Sequence[Executable]:
        """Common install locations, checked in order before any scan."""
        ...

    async def scan(self) -> list[Executable]:
        """Full discovery; returns executables ordered best first."""
        ...

    def preferred_path(self) -> Optional[str]:
        """User-configured install location, if any."""
        ...


class SingleFlight(Generic[T]):
    """
    Runs a coroutine function at most once and shares its result.

    Callers arriving while the first run is in progress await the same
    task. A successful result is kept for the lifetime of the object. A
    failed run is forgotten, so the next call starts a new one.
    """

    def __init__(self, func: Callable[[], Awaitable[T]]):
        self._func = func
        self._task: Optional[asyncio.Task] = None

    @property
    def done(self) -> bool:
        return self._task is not None and self._task.done()

    async def get(self) -> T:
        if self._task is None:
            self._task = asyncio.ensure_future(self._func())
            self._task.add_done_callback(self._forget_failure)
        # Shielded so a cancelled caller does not cancel the shared run
        return await asyncio.shield(self._task)

    def _forget_failure(self, task: asyncio.Task) -> None:
        if task is not self._task:
            return
        if task.cancelled() or task.exception() is not None:
            self._task = None


class BrowserFinder:
    """Finds installed executables of one browser family."""

    def __init__(
        self,
        variant: BrowserVariant,
        access: Callable[[str], Awaitable[bool]] = can_access,
    ):
        self.variant = variant
        self._access = access
        self._found_all: SingleFlight[list[Executable]] = SingleFlight(self._scan)

    async def find_where(
        self,
        predicate: Callable[[Executable], bool],
    ) -> Optional[Executable]:
        """
        Find the best executable satisfying predicate.

        Well-known paths are tried first, one at a time, so the common case
        needs no scan. Falls back to the ranked result of find_all().

        Returns:
            Matching Executable, or None if no installed browser matches

        Raises:
            CommandError: If the fallback scan fails
        """
        for candidate in self.variant.well_known_paths():
            if predicate(candidate) and await self._access(candidate.path):
                logger.debug(f"Found well-known path: {candidate.path}")
                return candidate

        for exe in await self.find_all():
            if predicate(exe):
                return exe
        return None

    async def find_by_quality(self, quality: Quality) -> Optional[Executable]:
        """Find the best executable of one release channel."""
        return await self.find_where(lambda exe: exe.quality is quality)

    async def find_all(self) -> list[Executable]:
        """
        Return all installed executables, best first.

        The scan runs once per finder; later and concurrent calls share it.
        If the scan fails the error propagates and the next call retries.

        Raises:
            CommandError: If the scan fails
        """
        return list(await self._found_all.get())

    async def _scan(self) -> list[Executable]:
        logger.info(f"Scanning for browsers ({type(self.variant).__name__})")
        try:
            found = await self.variant.scan()
        except Exception as e:
            logger.error(f"Browser scan failed: {e}")
            raise
        logger.info(f"Browser scan found {len(found)} executable(s)")
        return found
