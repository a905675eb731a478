"""Error taxonomy for the gift exchange."""


class ExchangeError(Exception):
    """Base error carrying an HTTP status and a stable error code."""

    status_code = 500
    code = "internal"
    retryable = False

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class ValidationFailed(ExchangeError):
    """Malformed or out-of-range input."""

    status_code = 400
    code = "validation"


class NotFound(ExchangeError):
    """Referenced entity is missing or already consumed."""

    status_code = 404
    code = "not_found"


class Conflict(ExchangeError):
    """Lost an optimistic lock; re-run the operation from the read step."""

    status_code = 409
    code = "conflict"
    retryable = True


class ResourceExhausted(ExchangeError):
    """No eligible slot at any relaxation tier."""

    status_code = 503
    code = "resource_exhausted"
