# foodie_api/core/exceptions.py
"""
Domain errors raised by the service layer.

Every error knows the HTTP status and ``error_code`` it maps to, so routes and the
global error handler in ``create_app`` can answer with a uniform JSON body.
"""


class ServiceError(Exception):
    status_code = 500
    error_code = "INTERNAL_SERVER_ERROR"

    def __init__(self, message: str = "Unexpected server error."):
        super().__init__(message)
        self.message = message

    def to_dict(self) -> dict:
        return {"error_code": self.error_code, "message": self.message}


class InvalidRequestError(ServiceError, ValueError):
    """Missing or malformed input (400)."""
    status_code = 400
    error_code = "INVALID_REQUEST"


class ForbiddenError(ServiceError, PermissionError):
    """Authenticated, but not allowed to touch the resource (403)."""
    status_code = 403
    error_code = "FORBIDDEN"


class NotFoundError(ServiceError, LookupError):
    """Referenced user or post does not exist (404)."""
    status_code = 404
    error_code = "NOT_FOUND"


class UpstreamError(ServiceError):
    """The identity provider or the document store failed (500)."""
    status_code = 500
    error_code = "UPSTREAM_ERROR"


class IdentityProviderError(UpstreamError):
    error_code = "IDENTITY_PROVIDER_ERROR"

    def __init__(self, message: str, reason: str = None):
        super().__init__(message)
        # provider-side code, e.g. EMAIL_EXISTS or INVALID_PASSWORD
        self.reason = reason


class CompensationError(UpstreamError):
    """A compensating action for a half-finished operation failed as well."""
    error_code = "COMPENSATION_FAILED"
