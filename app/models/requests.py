"""
API Request Models - Pydantic models for request validation.
"""

from typing import Optional, List
from pydantic import BaseModel, Field, field_validator

from app.models.schemas import HistoryMessage, FileAttachment


class ChatRequest(BaseModel):
    """
    Request to send a message to the agent.

    Example:
        {
            "prompt": "Draw me a cat wearing a hat",
            "user_id": "7d1c...",
            "project_id": "p-1",
            "chat_id": "c-1",
            "history": [{"sender": "user", "text": "hi"}, {"sender": "ai", "text": "Hello!"}]
        }
    """
    prompt: str = Field(
        ...,
        min_length=1,
        max_length=20000,
        description="The user's message",
        examples=["What's the weather like in Lisbon today?"]
    )
    user_id: str = Field(
        ...,
        description="Authenticated user ID (memory and quotas are per user)"
    )
    project_id: Optional[str] = Field(
        default=None,
        description="Project the chat belongs to"
    )
    chat_id: Optional[str] = Field(
        default=None,
        description="Chat the message belongs to"
    )
    history: List[HistoryMessage] = Field(
        default_factory=list,
        description="Previous messages, oldest first"
    )
    files: List[FileAttachment] = Field(
        default_factory=list,
        description="Inline file attachments"
    )
    persist: bool = Field(
        default=True,
        description="Store the AI message and any new memories"
    )

    @field_validator("prompt")
    @classmethod
    def validate_prompt(cls, v: str) -> str:
        """Reject whitespace-only prompts."""
        if not v.strip():
            raise ValueError("Prompt must not be blank")
        return v
