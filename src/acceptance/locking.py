"""
Per-load serialisation of quote evaluations.

Evaluating one quote reads and rewrites every pending quote on the same load,
so two concurrent evaluations for one load could both declare a winner.
SerializedAcceptanceService holds a mutex per load_id around each evaluation;
evaluations for different loads still run in parallel.
"""

import threading
from contextlib import contextmanager
from dataclasses import dataclass, field
from typing import Iterator, Optional

from src.acceptance.engine import AcceptanceResult, QuoteAcceptanceEngine
from src.core.logging import get_logger

log = get_logger(__name__)


@dataclass
class _LoadLock:
    lock: threading.Lock = field(default_factory=threading.Lock)
    holders: int = 0  # threads holding or waiting on the lock


class LoadSerializer:
    """
    Keyed mutex registry: one lock per load id.

    Entries are reference counted and dropped when their last holder leaves,
    so the registry only holds loads that are being evaluated.
    """

    def __init__(self) -> None:
        self._guard = threading.Lock()
        self._locks: dict[str, _LoadLock] = {}

    def _acquire_entry(self, load_id: str) -> _LoadLock:
        with self._guard:
            entry = self._locks.get(load_id)
            if entry is None:
                entry = self._locks[load_id] = _LoadLock()
            entry.holders += 1
            return entry

    def _release_entry(self, load_id: str, entry: _LoadLock) -> None:
        with self._guard:
            entry.holders -= 1
            if entry.holders == 0:
                del self._locks[load_id]

    @contextmanager
    def lock(self, load_id: str) -> Iterator[None]:
        """Hold the load's mutex for the duration of the block."""
        entry = self._acquire_entry(load_id)
        try:
            with entry.lock:
                yield
        finally:
            self._release_entry(load_id, entry)

    def active_loads(self) -> int:
        """Number of loads currently held or waited on."""
        with self._guard:
            return len(self._locks)


class SerializedAcceptanceService:
    """Wraps the engine so evaluations on one load never overlap."""

    def __init__(self, engine: QuoteAcceptanceEngine, serializer: Optional[LoadSerializer] = None) -> None:
        self.engine = engine
        self.serializer = serializer or LoadSerializer()

    def evaluate(self, quote_id: str) -> Optional[AcceptanceResult]:
        """Evaluate a quote while holding its load's lock."""
        quote = self.engine.repository.get_quote(quote_id)
        if quote is None:
            return None

        with self.serializer.lock(quote.load_id):
            log.debug("load_lock_acquired", load_id=quote.load_id, quote_id=quote_id)
            # Re-read inside the lock: another evaluation may have settled it
            return self.engine.evaluate(quote_id)
