"""Errors raised by the share services.

Every error is scoped to the single action that triggered it. They subclass
``APIException`` so routers can let them propagate and the registered
exception handler renders them as ``{"success": false, "error": ...}``.
"""
from ..exceptions import APIException


class ShareError(APIException):
    status_code = 500
    default_detail = "Request failed"

    def __init__(self, detail: str = None):
        super().__init__(status_code=type(self).status_code, detail=detail or self.default_detail)


class ValidationError(ShareError):
    status_code = 400
    default_detail = "Invalid request"


class FileTooLargeError(ValidationError):
    status_code = 413
    default_detail = "File too large"


class QuotaExceededError(ShareError):
    status_code = 413
    default_detail = "Storage limit exceeded. Please try again later."


class NotFoundError(ShareError):
    status_code = 404
    default_detail = "Invalid code or file not found"


class StorageError(ShareError):
    status_code = 500
    default_detail = "Failed to upload file"


class PersistenceError(ShareError):
    status_code = 500
    default_detail = "Failed to save upload"


class TextTooLargeError(ValidationError):
    status_code = 413
    default_detail = "Text too large"


class IdentityError(ShareError):
    status_code = 403
    default_detail = "This account cannot store uploads"
