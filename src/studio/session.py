"""
Session state for one user working in the script studio.

Holds the product context, the current script variations, the single error
message and the busy flags. Pipelines read and write it; the presentation
layer renders it.
"""
from dataclasses import dataclass, field, replace
from typing import Optional
import threading

from config import Config
from tools.image_input import ImagePayload
from tools.schemas import ScriptVariation
from .operations import OperationTracker
from .state import ProductContext


@dataclass
class StudioSession:
    """
    Everything the studio shows for one user.

    Fields are replaced whole, never mutated in place, so a late pipeline
    completion overwrites rather than corrupts.
    """
    context: ProductContext = field(default_factory=ProductContext)
    variations: tuple[ScriptVariation, ...] = ()
    error: Optional[str] = None
    image: Optional[ImagePayload] = None

    # Index of the last copied variation, -1 for "copy all"
    copied_id: Optional[int] = None

    operations: OperationTracker = field(
        default_factory=lambda: OperationTracker(exclusive=Config.EXCLUSIVE_OPERATIONS)
    )

    def update_context(self, **changes) -> ProductContext:
        """Apply direct edits from the form (product_name=..., tone_style=..., ...)."""
        self.context = replace(self.context, **changes)
        return self.context

    def reset(self) -> None:
        """
        Clear product fields, results, error, image and copied marker.

        Does not touch busy flags or cancel anything in flight.
        """
        self.context = self.context.cleared()
        self.variations = ()
        self.error = None
        self.image = None
        self.copied_id = None

    @property
    def can_generate(self) -> bool:
        return self.operations.can_generate

    @property
    def can_reset(self) -> bool:
        return self.operations.can_reset

    @property
    def can_fetch_url(self) -> bool:
        return self.operations.can_fetch_url(self.context.product_url)

    def get_summary(self) -> dict:
        """Get session summary for display."""
        return {
            "product_name": self.context.product_name,
            "product_url": self.context.product_url,
            "main_problem": self.context.main_problem,
            "key_benefit": self.context.key_benefit,
            "tone_style": self.context.tone_style.value,
            "duration": int(self.context.duration),
            "variations": len(self.variations),
            "error": self.error,
            "has_image": self.image is not None,
            **self.operations.snapshot(),
        }


# Global session instance
_current_session: Optional[StudioSession] = None
_session_lock = threading.Lock()


def get_session() -> StudioSession:
    """Get or create the current session."""
    global _current_session
    with _session_lock:
        if _current_session is None:
            _current_session = StudioSession()
        return _current_session


def reset_session() -> StudioSession:
    """Reset and return a fresh session."""
    global _current_session
    with _session_lock:
        _current_session = StudioSession()
        return _current_session


def end_session() -> None:
    """Clear the current session."""
    global _current_session
    with _session_lock:
        _current_session = None
