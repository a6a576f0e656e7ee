"""Errors raised by the import, accounting and storage layers."""


class AppError(Exception):
    """
    Base error. ``code`` is the machine-readable tag returned to API clients,
    ``status_code`` the HTTP status the API answers with.
    """

    status_code = 400

    def __init__(self, message: str, code: str = "APP_ERROR"):
        self.message = message
        self.code = code
        super().__init__(message)

    def to_dict(self) -> dict[str, str]:
        return {"error": self.code, "message": self.message}


class ValidationError(AppError):
    """A trade row, uploaded file or request value is unusable."""

    def __init__(self, message: str):
        super().__init__(message, code="VALIDATION_ERROR")


class NotFoundError(AppError):
    """Nothing stored yet for the requested resource."""

    status_code = 404

    def __init__(self, resource: str, detail: str):
        super().__init__(f"{resource} not found: {detail}", code="NOT_FOUND")
