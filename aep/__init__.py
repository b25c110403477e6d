"""Adobe Experience Platform API client."""

from .client import AEPClient
from .errors import AEPAPIError, AEPAuthError, AEPConfigError, AEPError
from .models import AEPConfig

__all__ = [
    "AEPClient",
    "AEPConfig",
    "AEPError",
    "AEPConfigError",
    "AEPAuthError",
    "AEPAPIError",
]
