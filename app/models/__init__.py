"""
Data Models for Bubble Agent
============================

Organized into three categories:
- schemas: Core domain models used across the application
- requests: API request validation models
- responses: API response models
"""

from app.models.schemas import (
    RouterAction,
    MemoryLayer,
    ALL_MEMORY_LAYERS,
    RoutingDecision,
    HistoryMessage,
    FileAttachment,
    Profile,
    MemoryEntry,
    MessageRecord,
    ResearchResult,
)

from app.models.requests import (
    ChatRequest,
)

from app.models.responses import (
    HealthResponse,
    ChatResponse,
    ErrorResponse,
)

__all__ = [
    # Schemas
    "RouterAction",
    "MemoryLayer",
    "ALL_MEMORY_LAYERS",
    "RoutingDecision",
    "HistoryMessage",
    "FileAttachment",
    "Profile",
    "MemoryEntry",
    "MessageRecord",
    "ResearchResult",
    # Requests
    "ChatRequest",
    # Responses
    "HealthResponse",
    "ChatResponse",
    "ErrorResponse",
]
