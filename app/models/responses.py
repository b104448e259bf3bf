"""
API Response Models - Pydantic models for API responses.
"""

from typing import Optional, List, Dict, Any
from pydantic import BaseModel, Field
from datetime import datetime


class HealthResponse(BaseModel):
    """Health check response."""
    status: str = "healthy"
    version: str
    environment: str
    timestamp: datetime = Field(default_factory=datetime.utcnow)


class ChatResponse(BaseModel):
    """
    Response from the agent.

    Example:
        {
            "success": true,
            "messages": [{"project_id": "p-1", "chat_id": "c-1", "sender": "ai", "text": "..."}],
            "duration_seconds": 2.4
        }
    """
    success: bool
    messages: List[Dict[str, Any]] = Field(default_factory=list)
    duration_seconds: Optional[float] = None
    error: Optional[str] = None


class ErrorResponse(BaseModel):
    """
    Standard error response.

    Example:
        {
            "success": false,
            "error": "Rate limit exceeded. Please try again later.",
            "error_code": "RATE_LIMIT_EXCEEDED"
        }
    """
    success: bool = False
    error: str
    error_code: Optional[str] = None
    details: Optional[Dict[str, Any]] = None
    timestamp: datetime = Field(default_factory=datetime.utcnow)
