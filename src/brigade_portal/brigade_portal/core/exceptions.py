from __future__ import annotations

from typing import Any, Optional


class DomainError(Exception):
    """Base exception for business rule violations."""


class ValidationError(DomainError):
    """Raised when input data is invalid or violates domain rules."""


class AuthError(DomainError):
    """Raised when a webhook request carries a missing or wrong secret."""


class UnsupportedRegion(DomainError):
    """Raised for a holiday region code the calendar has no data for."""

    def __init__(self, region: str):
        super().__init__(f"Unsupported holiday region: {region!r}")
        self.region = region


class NotMapped(DomainError):
    """Raised when an external member id has no active local member."""

    def __init__(self, external_id: Any):
        super().__init__(f"DLB member {external_id!r} is not linked to an active member")
        self.external_id = external_id


class DuplicateRecordError(DomainError):
    """Raised by storage when an insert hits the attendance natural-key constraint."""


class ExternalApiError(DomainError):
    """Error talking to the DLB API.

    Stores the HTTP status code (0 for transport errors) and the parsed
    response body for debugging.
    """

    def __init__(self, message: str, http_code: int = 0, response: Optional[dict] = None):
        super().__init__(message)
        self.http_code = int(http_code)
        self.response = response

    @property
    def api_error_code(self) -> Optional[str]:
        error = (self.response or {}).get("error")
        if isinstance(error, dict):
            return error.get("code")
        return None

    @property
    def is_auth_error(self) -> bool:
        return self.http_code == 401 or self.api_error_code == "INVALID_TOKEN"

    @property
    def is_not_found(self) -> bool:
        return self.http_code == 404 or self.api_error_code == "NOT_FOUND"

    @property
    def is_rate_limited(self) -> bool:
        return self.http_code == 429 or self.api_error_code == "RATE_LIMITED"

    @property
    def is_timeout(self) -> bool:
        return self.api_error_code == "TIMEOUT"

    @classmethod
    def from_response(cls, http_code: int, response: Optional[dict]) -> "ExternalApiError":
        error = (response or {}).get("error")
        if isinstance(error, dict):
            message = error.get("message") or "Unknown API error"
            code = error.get("code") or "UNKNOWN_ERROR"
        else:
            message = str(error) if error else "Unknown API error"
            code = "UNKNOWN_ERROR"
        return cls(f"DLB API error ({http_code} {code}): {message}", http_code, response)

    @classmethod
    def from_transport_error(cls, exc: Exception, *, timeout: bool = False) -> "ExternalApiError":
        code = "TIMEOUT" if timeout else "CONNECTION_ERROR"
        return cls(
            f"DLB API connection failed: {exc}",
            0,
            {"error": {"code": code, "message": str(exc)}},
        )
