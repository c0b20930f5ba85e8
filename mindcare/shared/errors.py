"""Error taxonomy shared by all MindCare services.

Each HTTP handler translates these at its boundary:
- ValidationError -> 400
- NotFoundError -> 404
- StoreUnavailableError -> 503 in the alert service, 500 in the risk service
- anything else -> 500 with an opaque message
"""


class MindCareError(Exception):
    """Base exception for MindCare domain errors."""
    pass


class ValidationError(MindCareError):
    """Missing or malformed required input."""
    pass


class InvalidTransitionError(ValidationError):
    """Alert status change not allowed by the triage transition table."""
    pass


class NotFoundError(MindCareError):
    """Referenced entity does not exist."""
    pass


class StoreUnavailableError(MindCareError):
    """Backing store is not initialized or not reachable."""
    pass


class InternalError(MindCareError):
    """Unanticipated failure; details are logged, never returned."""
    pass
