"""
Core Domain Schemas - Shared data models used across the application.
"""

import base64
import binascii
from typing import Optional, List, Dict, Any
from pydantic import BaseModel, ConfigDict, Field, field_validator
from enum import Enum


class RouterAction(str, Enum):
    """Invocation mode the agent runs the model in."""
    SEARCH = "SEARCH"
    DEEP_SEARCH = "DEEP_SEARCH"
    THINK = "THINK"
    IMAGE = "IMAGE"
    CANVAS = "CANVAS"
    PROJECT = "PROJECT"
    STUDY = "STUDY"
    SIMPLE = "SIMPLE"


class MemoryLayer(str, Enum):
    """Layers of the per-user memory store."""
    INNER_PERSONAL = "inner_personal"
    OUTER_PERSONAL = "outer_personal"
    INTERESTS = "interests"
    PREFERENCES = "preferences"
    CUSTOM = "custom"
    CODEBASE = "codebase"
    AESTHETIC = "aesthetic"
    PROJECT = "project"


ALL_MEMORY_LAYERS: List[MemoryLayer] = list(MemoryLayer)


class RoutingDecision(BaseModel):
    """Initial routing decision for a query."""
    action: RouterAction = RouterAction.SIMPLE
    parameters: Dict[str, Any] = Field(default_factory=dict)
    confidence: float = 1.0
    memory_layers: List[MemoryLayer] = Field(default_factory=lambda: list(ALL_MEMORY_LAYERS))
    quota_ok: bool = True
    reasoning: str = ""


class HistoryMessage(BaseModel):
    """A previous message in the conversation."""
    sender: str = Field(..., description="'user' or 'ai'")
    text: str = ""


class FileAttachment(BaseModel):
    """A file attached to the user's prompt, base64 encoded."""
    data: str
    mime_type: str
    name: Optional[str] = None

    @field_validator("data")
    @classmethod
    def validate_data(cls, v: str) -> str:
        """Accept plain base64 or a data URL; keep only the base64 payload."""
        if v.startswith("data:") and "," in v:
            v = v.split(",", 1)[1]
        v = v.strip()
        try:
            base64.b64decode(v, validate=True)
        except binascii.Error:
            raise ValueError("File data must be base64 encoded")
        return v


class Profile(BaseModel):
    """User profile fields the agent reads."""
    id: str
    preferred_image_model: Optional[str] = None


class MemoryEntry(BaseModel):
    """A single key/value fact stored in a memory layer."""
    layer: MemoryLayer
    key: str
    value: str


class MessageRecord(BaseModel):
    """
    An AI message ready for storage.

    Dumped with aliases so the optional fields keep the stored
    message shape (imageStatus, groundingMetadata, memoryToCreate).
    """
    model_config = ConfigDict(populate_by_name=True, use_enum_values=True)

    project_id: Optional[str] = None
    chat_id: Optional[str] = None
    sender: str = "ai"
    text: str = ""
    image_base64: Optional[str] = None
    image_status: Optional[str] = Field(default=None, alias="imageStatus")
    grounding_metadata: Optional[List[Dict[str, Any]]] = Field(
        default=None, alias="groundingMetadata"
    )
    memory_to_create: Optional[List[MemoryEntry]] = Field(
        default=None, alias="memoryToCreate"
    )

    def to_storage(self) -> Dict[str, Any]:
        """Serialize to the stored message shape."""
        return self.model_dump(by_alias=True, exclude_none=True, mode="json")


class ResearchResult(BaseModel):
    """Answer and source list produced by deep research."""
    answer: str
    sources: List[str] = Field(default_factory=list)
