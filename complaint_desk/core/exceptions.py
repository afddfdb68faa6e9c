from fastapi import HTTPException
from complaint_desk.constants.error_codes import ErrorCode


class AppException(HTTPException):
    def __init__(
        self,
        status_code: int,
        message: str,
        error_code: ErrorCode,
        details: dict | None = None,
    ):
        super().__init__(status_code=status_code, detail=message)
        self.error_code = error_code
        self.details = details

    @property
    def message(self) -> str:
        return self.detail


class FormValidationError(AppException):
    """Raised locally when a complaint form is submitted with missing or invalid fields."""

    def __init__(self, fields: list[str], message: str = "Please fill in all required fields"):
        super().__init__(
            422,
            message,
            ErrorCode.VALIDATION_ERROR,
            details={"fields": fields},
        )
        self.fields = fields


class StoreError(AppException):
    """Any failure coming back from the complaints table."""

    def __init__(
        self,
        message: str,
        status_code: int = 500,
        error_code: ErrorCode = ErrorCode.STORE_ERROR,
        details: dict | None = None,
    ):
        super().__init__(status_code, message, error_code, details)


class ConflictError(AppException):
    """The record changed since the caller last read it."""

    def __init__(self, message: str = "Complaint was modified by another user", details: dict | None = None):
        super().__init__(409, message, ErrorCode.COMPLAINT_VERSION_CONFLICT, details)
