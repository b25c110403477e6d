"""PII redaction applied to platform data before it reaches an LLM prompt.

Free text is scrubbed with an ordered list of named patterns; keyed records
additionally mask any value whose key names a personal or secret field.
"""

import json
import logging
import re
from typing import Any

from config import PRIVACY_CONFIG

logger = logging.getLogger(__name__)

# Applied in this order; later patterns see the already-redacted string.
PII_PATTERNS: dict[str, re.Pattern[str]] = {
    "email": re.compile(r"([a-zA-Z0-9._%+-]+@[a-zA-Z0-9.-]+\.[a-zA-Z]{2,})", re.IGNORECASE),
    "phone": re.compile(r"(\+?1?[-.\s]?\(?\d{3}\)?[-.\s]?\d{3}[-.\s]?\d{4})", re.ASCII),
    "ssn": re.compile(r"\b\d{3}[-\s]?\d{2}[-\s]?\d{4}\b", re.ASCII),
    "creditcard": re.compile(r"\b(?:\d{4}[-\s]?){3}\d{4}\b", re.ASCII),
    "ip": re.compile(r"\b(?:\d{1,3}\.){3}\d{1,3}\b", re.ASCII),
    "ecid": re.compile(r"\b\d{38}\b", re.ASCII),
    "uuid": re.compile(
        r"[0-9a-f]{8}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{12}", re.IGNORECASE
    ),
    "jwt": re.compile(r"eyJ[A-Za-z0-9_-]*\.eyJ[A-Za-z0-9_-]*\.[A-Za-z0-9_-]*"),
    "apikey": re.compile(
        r"(?:api[_-]?key|token|secret|password)['\":\s]*[=:]\s*['\"]?([a-zA-Z0-9_-]{20,})['\"]?",
        re.IGNORECASE,
    ),
    "bearertoken": re.compile(r"Bearer\s+[A-Za-z0-9_-]+", re.IGNORECASE),
}

# Matched case-insensitively as substrings of a key
SENSITIVE_FIELDS = (
    "email",
    "emailaddress",
    "personalemail",
    "workemail",
    "phone",
    "phonenumber",
    "mobilephone",
    "homephone",
    "ssn",
    "socialsecuritynumber",
    "password",
    "secret",
    "apikey",
    "token",
    "accesstoken",
    "creditcard",
    "cardnumber",
    "cvv",
    "address",
    "streetaddress",
    "firstname",
    "lastname",
    "fullname",
    "name",
    "birthdate",
    "dateofbirth",
    "dob",
    "nationalid",
    "passportnumber",
    "driverlicense",
    "ipaddress",
    "deviceid",
    "xid",
    "ecid",
    "mcid",
    "identityvalue",
)

REDACTED = "[REDACTED]"
REDACTED_ID = "[REDACTED_ID]"
TRUNCATED = "[TRUNCATED]"
STRINGIFY_ERROR = "[Error stringifying data]"


def redact_string(value: str) -> str:
    redacted = value
    for pattern_name, pattern in PII_PATTERNS.items():
        redacted = pattern.sub(f"[REDACTED_{pattern_name.upper()}]", redacted)
    return redacted


def is_sensitive_field(field_name: str) -> bool:
    lower = field_name.lower()
    return any(field in lower for field in SENSITIVE_FIELDS)


def _is_placeholder(value: str) -> bool:
    return value == TRUNCATED or (value.startswith("[REDACTED") and value.endswith("]"))


def _mask(value: Any) -> Any:
    """Mask the value of a sensitive field, keeping only a hint of strings."""
    if not isinstance(value, str):
        return REDACTED
    # Already masked by an earlier pass
    if _is_placeholder(value):
        return value
    if len(value) > 4:
        return f"{value[:2]}***{value[-2:]}"
    return REDACTED


def _is_long_number(value: int | float) -> bool:
    limit = PRIVACY_CONFIG["max_numeric_length"]
    if isinstance(value, float):
        return len(str(value)) > limit
    # Compared arithmetically; str() refuses very large ints
    if value < 0:
        return value <= -(10 ** (limit - 1))
    return value >= 10**limit


def redact_pii(data: Any, depth: int = 0) -> Any:
    """Return a redacted copy of `data` with the same shape.

    Lists are capped at `max_list_items` entries and anything at level
    `max_depth` or below collapses to "[TRUNCATED]". Values of unknown types pass
    through unchanged.
    """
    if depth >= PRIVACY_CONFIG["max_depth"]:
        return TRUNCATED
    if data is None or isinstance(data, bool):
        return data
    if isinstance(data, str):
        return redact_string(data)
    if isinstance(data, (int, float)):
        return REDACTED_ID if _is_long_number(data) else data
    if isinstance(data, (list, tuple)):
        return [redact_pii(item, depth + 1) for item in data[: PRIVACY_CONFIG["max_list_items"]]]
    if isinstance(data, dict):
        redacted = {}
        for key, value in data.items():
            if is_sensitive_field(str(key)):
                redacted[key] = _mask(value)
            else:
                redacted[key] = redact_pii(value, depth + 1)
        return redacted
    return data


def safe_stringify_for_llm(data: Any, max_length: int = PRIVACY_CONFIG["max_json_length"]) -> str:
    """Redact and serialize data for inclusion in a prompt. Never raises."""
    try:
        text = json.dumps(redact_pii(data), indent=2, ensure_ascii=False, default=str)
    except Exception as e:
        logger.warning(f"Could not serialize tool result for the model: {e}")
        return STRINGIFY_ERROR

    if len(text) > max_length:
        return text[:max_length] + "\n... [TRUNCATED]"
    return text


def contains_pii(text: str) -> bool:
    """Whether any PII pattern matches `text`."""
    return any(pattern.search(text) for pattern in PII_PATTERNS.values())
