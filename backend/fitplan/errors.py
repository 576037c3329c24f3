"""Domain errors raised by the generation pipeline, persistence and live sessions.

Routers translate these into HTTP responses; nothing here knows about HTTP.
"""


class FitPlanError(Exception):
    """Base class for every error the service raises on purpose."""


class ServiceUnavailable(FitPlanError):
    """The generation service could not be reached or answered with a non-2xx status."""


class MalformedPlan(FitPlanError):
    """The generation service answered, but the text is not a usable plan."""

    def __init__(self, message: str, *, field: str | None = None):
        super().__init__(message)
        self.field = field


class StorageError(FitPlanError):
    """A read or write against the database failed."""


class NotFound(FitPlanError):
    """The requested record does not exist."""


class GenerationInProgress(FitPlanError):
    """A plan is already being generated for this user."""


class InvalidTransition(FitPlanError):
    """A session action was requested from a state that does not allow it."""
