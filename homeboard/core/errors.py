"""Typed business errors raised by homeboard services."""

from pydantic import BaseModel


class ErrorCode:
    """Error codes for specific error conditions."""

    ERR_NOT_FOUND = "ERR_NOT_FOUND"
    ERR_FORBIDDEN = "ERR_FORBIDDEN"
    ERR_BUSINESS_RULE = "ERR_BUSINESS_RULE"
    ERR_CONFLICT = "ERR_CONFLICT"
    ERR_UNKNOWN = "ERR_UNKNOWN"


class HomeboardError(Exception):
    """Base class for expected, caller-facing failures."""

    code: str = ErrorCode.ERR_UNKNOWN
    status_code: int = 500
    default_message: str = "An unexpected error occurred"

    def __init__(self, message: str | None = None, *, fields: dict[str, str] | None = None) -> None:
        self.message = message or self.default_message
        self.fields = fields
        super().__init__(self.message)


class NotFoundError(HomeboardError):
    """Referenced house, membership, task or category does not exist in scope."""

    code = ErrorCode.ERR_NOT_FOUND
    status_code = 404
    default_message = "Resource not found"


class ForbiddenError(HomeboardError):
    """Actor lacks the role or relationship required for the action."""

    code = ErrorCode.ERR_FORBIDDEN
    status_code = 403
    default_message = "You do not have permission to perform this action"


class BusinessRuleError(HomeboardError):
    """Input is well-formed but violates a domain invariant."""

    code = ErrorCode.ERR_BUSINESS_RULE
    status_code = 422
    default_message = "Cannot process request"


class ConflictError(HomeboardError):
    """A uniqueness rule rejected the mutation."""

    code = ErrorCode.ERR_CONFLICT
    status_code = 409
    default_message = "Resource already exists"


class ErrorResponse(BaseModel):
    """Structured error payload returned by the HTTP layer."""

    code: str
    message: str
    fields: dict[str, str] | None = None


def to_error_response(exception: Exception) -> tuple[int, ErrorResponse]:
    """Map an exception to an HTTP status code and error payload.

    Unknown exceptions collapse to a generic 500 so internal details never leak.
    """
    if isinstance(exception, HomeboardError):
        return exception.status_code, ErrorResponse(
            code=exception.code,
            message=exception.message,
            fields=exception.fields,
        )

    return 500, ErrorResponse(code=ErrorCode.ERR_UNKNOWN, message=HomeboardError.default_message)
