from __future__ import annotations
from typing import Any, Optional, Dict

from .debug import dprint, djson


class PayjpSDKError(Exception):
    """Base exception for all PAY.JP SDK errors."""
    pass


class PayjpConfigError(PayjpSDKError):
    """Raised when configuration/credentials are invalid or missing."""
    pass


class PayjpValidationError(PayjpSDKError, ValueError):
    """
    Raised before any network call when a parameter fails a client-side check
    (e.g. list limit outside 1-100, plan billing_day outside 1-31).
    """

    def __init__(self, message: str, *, errors: Optional[list] = None):
        self.errors = list(errors or [message])
        super().__init__(message)


class PayjpTransportError(PayjpSDKError):
    """
    Network-level failure (connect error, timeout, broken connection) that
    persisted through every retry attempt.
    """

    def __init__(self, message: str, *, method: Optional[str] = None, url: Optional[str] = None, attempts: int = 1):
        self.method = method
        self.url = url
        self.attempts = attempts
        super().__init__(message)


class PayjpDecodeError(PayjpSDKError):
    """
    The server answered with something that is neither a resource of the
    expected kind nor an error envelope (invalid JSON, unexpected shape).
    """

    def __init__(self, message: str, *, status: Optional[int] = None, body: Any = None):
        self.status = status
        self.body = body
        super().__init__(message)

    @property
    def body_preview(self) -> str:
        b = self.body
        if isinstance(b, bytes):
            b = b.decode("utf-8", errors="replace")
        s = "" if b is None else str(b)
        return s if len(s) <= 240 else s[:237] + "..."


class PayjpAPIError(PayjpSDKError):
    """
    Structured error returned by the API inside an error envelope:

        {"error": {"code": ..., "message": ..., "param": ..., "status": ..., "type": ...}}

    Attributes
    ----------
    status : int
        Status carried inside the envelope (mirrors the HTTP status).
    type : str
        Error category, e.g. "client_error", "card_error", "server_error".
    code : str
        Machine readable code, e.g. "invalid_number", "over_capacity".
    message : str
        Human readable message.
    param : str
        Name of the offending parameter (may be empty).
    """

    def __init__(
        self,
        status: int,
        *,
        type: str = "",
        code: str = "",
        message: str = "",
        param: str = "",
        payload: Any = None,
    ):
        self.status = int(status)
        self.type = type or ""
        self.code = code or ""
        self.message = message or ""
        self.param = param or ""
        self.payload = payload

        dprint("PayjpAPIError", {"status": self.status, "type": self.type, "code": self.code})
        if payload is not None:
            djson("PayjpAPIError payload", payload)

        super().__init__(self._message())

    @classmethod
    def from_envelope(cls, envelope: Dict[str, Any]) -> "PayjpAPIError":
        err = envelope.get("error") or {}
        return cls(
            err.get("status") or 0,
            type=str(err.get("type") or ""),
            code=str(err.get("code") or ""),
            message=str(err.get("message") or ""),
            param=str(err.get("param") or ""),
            payload=envelope,
        )

    # ---------------- convenience properties ----------------

    @property
    def retryable(self) -> bool:
        """Return True for rate limiting and transient server statuses."""
        return self.status in (429, 500, 502, 503, 504)

    # ---------------- rendering & serialization ----------------

    def _message(self) -> str:
        base = f"{self.status}: Type: {self.type} Code: {self.code} Message: {self.message}"
        if self.param:
            return f"{base}, Param: {self.param}"
        return base

    def __str__(self) -> str:
        return self._message()

    def __repr__(self) -> str:
        return f"PayjpAPIError(status={self.status}, type={self.type!r}, code={self.code!r})"

    def to_dict(self) -> Dict[str, Any]:
        """Sanitized summary for logs/telemetry."""
        return {
            "status": self.status,
            "type": self.type,
            "code": self.code,
            "message": self.message,
            "param": self.param,
            "retryable": self.retryable,
        }


__all__ = [
    "PayjpSDKError",
    "PayjpConfigError",
    "PayjpValidationError",
    "PayjpTransportError",
    "PayjpDecodeError",
    "PayjpAPIError",
]
