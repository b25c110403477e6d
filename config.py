"""Project configuration and defaults."""

import os
from typing import Any

SERVICE_NAME = "aep-copilot"
SERVICE_VERSION = "0.1.0"

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()

# Timeout applied to httpx transports (AEP platform and Ollama)
HTTP_TIMEOUT_SECONDS = float(os.getenv("HTTP_TIMEOUT_SECONDS", "60"))

# LLM provider defaults
LLM_DEFAULTS: dict[str, Any] = {
    "temperature": float(os.getenv("LLM_TEMPERATURE", "0.7")),
    "max_tokens": int(os.getenv("LLM_MAX_TOKENS", "4096")),
    # Local Ollama server
    "ollama_base_url": os.getenv("OLLAMA_BASE_URL", "http://localhost:11434"),
    # OpenRouter is OpenAI-compatible
    "openrouter_base_url": os.getenv("OPENROUTER_BASE_URL", "https://openrouter.ai/api/v1"),
    "azure_api_version": os.getenv("AZURE_OPENAI_API_VERSION", "2024-02-15-preview"),
    # Gemini function calling lives on v1beta
    "gemini_api_version": os.getenv("GEMINI_API_VERSION", "v1beta"),
}

# PII redaction limits applied before anything reaches an LLM prompt
PRIVACY_CONFIG: dict[str, Any] = {
    "max_depth": int(os.getenv("PRIVACY_MAX_DEPTH", "10")),
    "max_list_items": int(os.getenv("PRIVACY_MAX_LIST_ITEMS", "20")),
    "max_json_length": int(os.getenv("PRIVACY_MAX_JSON_LENGTH", "3000")),
    # Numbers with more digits than this are treated as opaque identifiers
    "max_numeric_length": int(os.getenv("PRIVACY_MAX_NUMERIC_LENGTH", "15")),
}

# Adobe Experience Platform
AEP_CONFIG: dict[str, Any] = {
    "base_url": os.getenv("AEP_BASE_URL", "https://platform.adobe.io"),
    "ims_token_url": os.getenv("AEP_IMS_TOKEN_URL", "https://ims-na1.adobelogin.com/ims/token/v3"),
    "scope": os.getenv(
        "AEP_IMS_SCOPE",
        "openid,AdobeID,read_organizations,additional_info.projectedProductContext,"
        "additional_info.job_function,https://ns.adobe.com/s/ent_platform_apis,"
        "acp.foundation.catalog",
    ),
    # Access tokens are reused for 23 hours
    "token_ttl_seconds": int(os.getenv("AEP_TOKEN_TTL_SECONDS", str(23 * 60 * 60))),
    # Connection spec that identifies source (vs destination) connections
    "source_connection_spec_id": "8a9c3494-9708-43d7-ae3f-cda01e5030e1",
}

# Copilot agent behaviour
AGENT_CONFIG: dict[str, Any] = {
    # Skip the approval gate for mutating tools
    "auto_mode": os.getenv("COPILOT_AUTO_MODE", "false").lower() == "true",
}
