"""
CBC Exams Backend: Result Cache
=================================

What:  Process-wide, time-expiring key/value store for computed search and
       directory-listing responses.
How:   A dict of key → (payload, expires_at) guarded by a lock, plus a
       background asyncio task that periodically sweeps expired entries.
Who:   Created in the application lifespan (main.py), stored on
       `app.state.result_cache` and injected into routes through
       `get_result_cache`. Services receive it as an argument.
When:  Consulted before every search/directory computation; written after.

Semantics:
    get(key)            → payload if present and unexpired, else None
    set(key, payload)   → stores with the configured TTL; overwriting resets
                          the expiration; last writer wins
    purge_expired()     → removes every expired entry (the sweep)

    Entries are replaced as a whole tuple, so a reader sees either the old
    (payload, expires_at) pair or the new one, never a mix. An expired entry
    stays in the dict until the next sweep; `get` simply reports it absent.

    There is no negative caching and no invalidation when crawled resources
    change. Staleness up to the TTL is accepted.

Key Format:
    <namespace>:<name>=<value>&...&page=<n>&limit=<n>
    Names appear in a fixed order and values are URL-encoded, so identical
    parameter sets (including all-empty ones) map to the same key and a value
    containing '&' cannot collide with a different parameter set.
"""

import asyncio
import logging
import threading
import time
from contextlib import suppress
from typing import Any, Callable, Dict, Optional, Sequence, Tuple
from urllib.parse import urlencode

from starlette.requests import Request

from cbcexams.services.pagination import Page

logger = logging.getLogger(__name__)


class ResultCache:
    """
    In-memory TTL cache with a background expiry sweep.

    Thread Safety:
        All dict access happens under a `threading.Lock`, held only for a
        lookup or an assignment. The sweep snapshots entries under the lock,
        decides what expired without it, and deletes an entry only if it is
        still the same tuple it inspected. A `set` racing with the sweep is
        therefore never lost.
    """

    def __init__(
        self,
        ttl_seconds: float,
        sweep_interval_seconds: float,
        clock: Callable[[], float] = time.monotonic,
    ):
        """
        Args:
            ttl_seconds: Lifetime of every entry
            sweep_interval_seconds: Delay between background sweeps
            clock: Monotonic time source (replaceable in tests)
        """
        self.ttl_seconds = ttl_seconds
        self.sweep_interval_seconds = sweep_interval_seconds
        self._clock = clock
        self._entries: Dict[str, Tuple[Any, float]] = {}
        self._lock = threading.Lock()
        self._sweeper: Optional[asyncio.Task] = None

    # ── Key Derivation ────────────────────────────────────────────────────

    @staticmethod
    def make_key(
        namespace: str,
        params: Sequence[Tuple[str, str]],
        page: Page,
    ) -> str:
        """
        Build a deterministic key from ordered (name, value) pairs and the page.

        >>> ResultCache.make_key("resources", [("q1", "grade 9"), ("q2", "")], Page(1, 100))
        'resources:q1=grade+9&q2=&page=1&limit=100'
        """
        pairs = [(name, value or "") for name, value in params]
        pairs.append(("page", str(page.number)))
        pairs.append(("limit", str(page.limit)))
        return f"{namespace}:{urlencode(pairs)}"

    # ── Get / Set ─────────────────────────────────────────────────────────

    def get(self, key: str) -> Optional[Any]:
        with self._lock:
            entry = self._entries.get(key)
        if entry is None:
            return None
        payload, expires_at = entry
        if expires_at <= self._clock():
            return None
        return payload

    def set(self, key: str, payload: Any) -> None:
        entry = (payload, self._clock() + self.ttl_seconds)
        with self._lock:
            self._entries[key] = entry

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    # ── Expiry Sweep ──────────────────────────────────────────────────────

    def purge_expired(self) -> int:
        """
        Remove expired entries.

        Returns:
            Number of entries removed
        """
        now = self._clock()
        with self._lock:
            snapshot = list(self._entries.items())

        expired = [(key, entry) for key, entry in snapshot if entry[1] <= now]

        removed = 0
        with self._lock:
            for key, entry in expired:
                # Skip keys that were rewritten after the snapshot
                if self._entries.get(key) is entry:
                    del self._entries[key]
                    removed += 1
        return removed

    async def _sweep_loop(self) -> None:
        while True:
            await asyncio.sleep(self.sweep_interval_seconds)
            removed = self.purge_expired()
            if removed:
                logger.debug("Result cache sweep removed %d expired entries", removed)

    # ── Lifecycle ─────────────────────────────────────────────────────────

    def start(self) -> None:
        """Start the background sweep. Must be called from a running event loop."""
        if self._sweeper is None or self._sweeper.done():
            self._sweeper = asyncio.create_task(self._sweep_loop(), name="result-cache-sweeper")
            logger.info(
                "Result cache started (ttl=%ss, sweep every %ss)",
                self.ttl_seconds,
                self.sweep_interval_seconds,
            )

    async def stop(self) -> None:
        """Cancel the background sweep and drop all entries."""
        if self._sweeper is not None:
            self._sweeper.cancel()
            with suppress(asyncio.CancelledError):
                await self._sweeper
            self._sweeper = None
        self.clear()
        logger.info("Result cache stopped")

    @property
    def running(self) -> bool:
        return self._sweeper is not None and not self._sweeper.done()


# ── FastAPI Dependency ────────────────────────────────────────────────────
def get_result_cache(request: Request) -> Optional[ResultCache]:
    """
    Returns the cache created by the application lifespan.

    None when the lifespan did not run (e.g. the app is mounted without it);
    services then compute every response and store nothing.
    """
    return getattr(request.app.state, "result_cache", None)
