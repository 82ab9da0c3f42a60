
class CirculateAPIError(Exception):
    status_code = 400
    code = "error"

class UnauthenticatedError(CirculateAPIError):
    status_code = 401
    code = "not_authenticated"

class InvalidCredentialsError(UnauthenticatedError):
    code = "invalid_credentials"

class ForbiddenError(CirculateAPIError):
    status_code = 403
    code = "forbidden"

class NotFoundError(CirculateAPIError):
    status_code = 404
    code = "not_found"

class BookNotFoundError(NotFoundError):
    code = "book_not_found"

class LoanNotFoundError(NotFoundError):
    code = "no_active_loan"

class ConflictError(CirculateAPIError):
    status_code = 409
    code = "conflict"

class BookUnavailableError(ConflictError):
    code = "unavailable"

class ExistingLoanError(ConflictError):
    code = "already_borrowed"

class MemberExistsError(ConflictError):
    code = "member_exists"

class ValidationError(CirculateAPIError):
    code = "invalid"

class TransientStoreError(CirculateAPIError):
    """The store did not answer in time; safe for the caller to retry."""
    status_code = 503
    code = "store_unavailable"
    retry_after = 1
