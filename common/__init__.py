"""Types shared by the copilot agent and the HTTP API."""

from .types import AgentResponse, ApprovedAction, CamelModel, PendingAction

__all__ = [
    "AgentResponse",
    "ApprovedAction",
    "CamelModel",
    "PendingAction",
]
