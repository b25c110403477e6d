"""Common types module."""

from .agent import AgentResponse, ApprovedAction, CamelModel, PendingAction

__all__ = [
    "AgentResponse",
    "ApprovedAction",
    "PendingAction",
    "CamelModel",
]
