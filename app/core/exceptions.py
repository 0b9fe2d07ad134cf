# app/core/exceptions.py
# Domain error taxonomy raised by the service layer
#
#   NotFound        -- referenced entity does not exist                 → 404
#   Forbidden       -- caller lacks rights over the entity              → 403
#   InvalidState    -- operation not legal from the entity's state      → 409
#   Conflict        -- uniqueness violation (username, duplicate review) → 409
#   ValidationError -- business-rule input rejected                    → 422
#
# app/main.py registers a handler that renders these as
#   {"detail": "<message>", "error_code": "<code>"}
# so clients can tell "not allowed" from "not possible now" from "doesn't exist".


class DomainError(Exception):
    """Base class for all business-rule failures."""

    status_code: int = 400
    error_code: str = "domain_error"

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    def __repr__(self) -> str:
        return f"<{type(self).__name__} {self.message!r}>"


class NotFound(DomainError):
    status_code = 404
    error_code = "not_found"


class Forbidden(DomainError):
    status_code = 403
    error_code = "forbidden"


class InvalidState(DomainError):
    status_code = 409
    error_code = "invalid_state"


class Conflict(DomainError):
    status_code = 409
    error_code = "conflict"


class ValidationError(DomainError):
    status_code = 422
    error_code = "validation_error"
