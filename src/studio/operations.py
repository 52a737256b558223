"""
Operation tracking for the extraction and generation pipelines.

Three busy flags drive the UI:
    analyzing     image or URL extraction in flight
    fetching_url  URL extraction in flight
    loading       generation in flight

Each action can only be in flight once; a second trigger of the same action
is rejected, not queued. Unrelated actions may overlap unless the tracker is
exclusive, in which case any in-flight action blocks all others.
"""
import threading
from contextlib import contextmanager
from enum import Enum
from typing import Iterator, Optional

from tools.errors import OperationInProgressError


class OperationState(str, Enum):
    IDLE = "idle"
    ANALYZING_IMAGE = "analyzing-image"
    ANALYZING_URL = "analyzing-url"
    GENERATING = "generating"


class OperationTracker:
    """Compare-and-set busy flags, one per action."""

    def __init__(self, exclusive: bool = False):
        self.exclusive = exclusive
        self._active: set[OperationState] = set()
        self._lock = threading.Lock()

    # ─────────────────────────────────────────────────────────────
    # Transitions
    # ─────────────────────────────────────────────────────────────

    def begin(self, op: OperationState) -> None:
        """
        Mark op as in flight.

        Raises:
            OperationInProgressError: op already in flight, or (exclusive)
                anything in flight
        """
        if op is OperationState.IDLE:
            raise ValueError("IDLE is not an operation")

        with self._lock:
            blocked = bool(self._active) if self.exclusive else op in self._active
            if blocked:
                raise OperationInProgressError(op, sorted(self._active, key=lambda s: s.value))
            self._active.add(op)

    def end(self, op: OperationState) -> None:
        with self._lock:
            self._active.discard(op)

    @contextmanager
    def track(self, op: OperationState) -> Iterator[None]:
        """Hold op's busy flag for the duration of the block, cleared on any exit."""
        self.begin(op)
        try:
            yield
        finally:
            self.end(op)

    # ─────────────────────────────────────────────────────────────
    # Flags
    # ─────────────────────────────────────────────────────────────

    def is_active(self, op: OperationState) -> bool:
        return op in self._active

    @property
    def analyzing(self) -> bool:
        return self.is_active(OperationState.ANALYZING_IMAGE) or self.is_active(OperationState.ANALYZING_URL)

    @property
    def fetching_url(self) -> bool:
        return self.is_active(OperationState.ANALYZING_URL)

    @property
    def loading(self) -> bool:
        return self.is_active(OperationState.GENERATING)

    @property
    def state(self) -> OperationState:
        """Single summary state: Generating, then AnalyzingUrl, then AnalyzingImage."""
        for op in (OperationState.GENERATING, OperationState.ANALYZING_URL, OperationState.ANALYZING_IMAGE):
            if self.is_active(op):
                return op
        return OperationState.IDLE

    # ─────────────────────────────────────────────────────────────
    # UI affordances
    # ─────────────────────────────────────────────────────────────

    @property
    def can_generate(self) -> bool:
        return not (self.loading or self.analyzing)

    @property
    def can_reset(self) -> bool:
        return not (self.loading or self.analyzing)

    def can_fetch_url(self, url: Optional[str]) -> bool:
        return not self.fetching_url and bool((url or "").strip())

    def snapshot(self) -> dict:
        return {
            "analyzing": self.analyzing,
            "fetching_url": self.fetching_url,
            "loading": self.loading,
            "state": self.state.value,
        }
