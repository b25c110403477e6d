"""AEP copilot agent and the privacy filter it applies to tool results."""

from agents.copilot_agent import CopilotAgent, process_message
from agents.privacy_filter import contains_pii, redact_pii, safe_stringify_for_llm
from agents.prompts import SYSTEM_PROMPT

__all__ = [
    "CopilotAgent",
    "process_message",
    "redact_pii",
    "safe_stringify_for_llm",
    "contains_pii",
    "SYSTEM_PROMPT",
]
