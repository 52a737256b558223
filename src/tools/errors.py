"""
Error taxonomy for the extraction and generation pipelines.

ValidationError, InvocationError and SchemaViolationError are caught by the
pipelines and turned into one user-facing message on the session.
OperationInProgressError is raised to the caller.
"""


class StudioError(Exception):
    """Base class for all studio errors."""


class ValidationError(StudioError):
    """A precondition was not met. Raised before any busy state is entered."""


class InvocationError(StudioError):
    """The model/network call itself failed."""


class SchemaViolationError(StudioError):
    """
    The model answered, but not with the requested shape.

    Carries the raw response text for diagnostics.
    """

    def __init__(self, message: str, raw_text: str = ""):
        super().__init__(message)
        self.raw_text = raw_text


class OperationInProgressError(StudioError):
    """The same action (or, in exclusive mode, any action) is already in flight."""

    def __init__(self, requested, active):
        self.requested = requested
        self.active = active
        names = ", ".join(op.value for op in active) or "none"
        super().__init__(f"Cannot start {requested.value}: already running ({names})")


class ClipboardError(StudioError):
    """A clipboard strategy could not write the text."""
