# FILE: backend/bizpage/editor/slug.py
# PHOENIX PROTOCOL - SLUG AVAILABILITY
# 1. Sanitize on every keystroke; remote check only after 500ms of quiet.
# 2. A generation counter drops answers for input the user has already replaced.

import asyncio
import re
import structlog
from enum import Enum
from typing import Callable, List, Optional

from ..core.config import settings
from .client import BusinessApiClient
from .timers import AsyncioScheduler, Debouncer, Scheduler

logger = structlog.get_logger(__name__)

SLUG_MIN_LENGTH = 3

MSG_TOO_SHORT = "Slug must be at least 3 characters long"
MSG_TAKEN = "This slug is already taken"
MSG_CHECK_FAILED = "Error checking slug availability"

_INVALID_CHARS = re.compile(r"[^a-z0-9-]")
_DASH_RUNS = re.compile(r"-+")

def sanitize_slug(raw: str) -> str:
    slug = _INVALID_CHARS.sub("-", raw.lower())
    slug = _DASH_RUNS.sub("-", slug)
    return slug.strip("-")

class SlugCheckState(str, Enum):
    UNKNOWN = "unknown"
    CHECKING = "checking"
    AVAILABLE = "available"
    TAKEN = "taken"
    CHECK_FAILED = "check-failed"

class SlugValidator:
    def __init__(
        self,
        client: BusinessApiClient,
        scheduler: Optional[Scheduler] = None,
        debounce: Optional[float] = None,
    ):
        self.client = client
        self._debouncer = Debouncer(
            scheduler or AsyncioScheduler(),
            settings.SLUG_CHECK_DEBOUNCE_SECONDS if debounce is None else debounce,
        )
        self._generation = 0
        self._inflight: Optional[asyncio.Task] = None
        self._listeners: List[Callable[["SlugValidator"], None]] = []

        self.value = ""
        self.state = SlugCheckState.UNKNOWN
        self.message: Optional[str] = None

    @property
    def available(self) -> Optional[bool]:
        if self.state is SlugCheckState.AVAILABLE:
            return True
        if self.state is SlugCheckState.TAKEN:
            return False
        return None

    def subscribe(self, listener: Callable[["SlugValidator"], None]) -> None:
        self._listeners.append(listener)

    def on_input(self, raw: str) -> str:
        """Handles one keystroke and returns the sanitized slug to show in the input."""
        slug = sanitize_slug(raw)
        self.value = slug
        self._generation += 1
        self._debouncer.cancel()

        if len(slug) < SLUG_MIN_LENGTH:
            self._set(SlugCheckState.UNKNOWN, MSG_TOO_SHORT if slug else None)
            return slug

        generation = self._generation
        self._set(SlugCheckState.UNKNOWN, None)
        self._debouncer.schedule(lambda: self._start_check(generation, slug))
        return slug

    async def settle(self) -> None:
        """Waits for the in-flight availability check, if any."""
        while self._inflight is not None and not self._inflight.done():
            await asyncio.shield(self._inflight)

    def _start_check(self, generation: int, slug: str) -> None:
        if generation != self._generation:
            return
        self._set(SlugCheckState.CHECKING, None)
        self._inflight = asyncio.ensure_future(self._check(generation, slug))

    async def _check(self, generation: int, slug: str) -> None:
        try:
            available = await self.client.check_slug_availability(slug)
        except Exception as e:
            if generation == self._generation:
                logger.warning("editor.slug_check_failed", slug=slug, error=str(e), kind=type(e).__name__)
                self._set(SlugCheckState.CHECK_FAILED, MSG_CHECK_FAILED)
            return

        if generation != self._generation:
            logger.debug("editor.slug_check_stale", slug=slug)
            return
        if available:
            self._set(SlugCheckState.AVAILABLE, None)
        else:
            self._set(SlugCheckState.TAKEN, MSG_TAKEN)

    def _set(self, state: SlugCheckState, message: Optional[str]) -> None:
        self.state = state
        self.message = message
        for listener in self._listeners:
            listener(self)
