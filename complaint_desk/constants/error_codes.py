# complaint_desk/constants/error_codes.py

from enum import Enum


class ErrorCode(str, Enum):
    # Generic
    VALIDATION_ERROR = "VALIDATION_ERROR"
    NOT_FOUND = "NOT_FOUND"
    CONFLICT = "CONFLICT"
    UNAUTHORIZED = "UNAUTHORIZED"
    PERMISSION_DENIED = "PERMISSION_DENIED"
    INTERNAL_ERROR = "INTERNAL_ERROR"

    # Store
    STORE_ERROR = "STORE_ERROR"

    # Complaints
    COMPLAINT_NOT_FOUND = "COMPLAINT_NOT_FOUND"
    COMPLAINT_NUMBER_EXISTS = "COMPLAINT_NUMBER_EXISTS"
    COMPLAINT_VERSION_CONFLICT = "COMPLAINT_VERSION_CONFLICT"
    CONFIRMATION_REQUIRED = "CONFIRMATION_REQUIRED"
