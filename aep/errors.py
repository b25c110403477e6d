"""Exceptions raised by the AEP platform client."""

from typing import Optional


class AEPError(Exception):
    """Base class for AEP client failures."""


class AEPConfigError(AEPError):
    """Missing or invalid platform credentials."""


class AEPAuthError(AEPError):
    """The IMS token exchange failed."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


class AEPAPIError(AEPError):
    """Non-2xx response from the platform API."""

    def __init__(self, status_code: int, reason: str, body: str = ""):
        super().__init__(f"AEP API error: {status_code} {reason} - {body[:200]}")
        self.status_code = status_code
        self.reason = reason
        self.body = body
