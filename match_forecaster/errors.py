from typing import Optional


class APIError(Exception):
    """Unified error class for the API-Football and Telegram clients."""

    def __init__(
        self,
        source: str,
        code: str,
        message: str,
        details: Optional[str] = None,
        status_code: Optional[int] = None,
    ):
        super().__init__(message)
        self.source = source
        self.code = code
        self.message = message
        self.details = details
        self.status_code = status_code

    def to_dict(self) -> dict:
        return {
            "source": self.source,
            "code": self.code,
            "message": self.message,
            **({"details": self.details} if self.details else {}),
            **({"status_code": self.status_code} if self.status_code else {}),
        }


class PayloadError(ValueError):
    """Raised when a client-supplied payload cannot be used."""

    def __init__(self, field: str, message: str):
        super().__init__(f"{field}: {message}")
        self.field = field
        self.message = message

    def to_dict(self) -> dict:
        return {"field": self.field, "message": self.message}
