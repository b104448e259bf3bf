"""
Services Layer for Bubble Agent
===============================

Services handle the external integrations:

- GeminiClient: Streaming/single-shot generation and image generation
- MemoryService: Layered per-user memory (Supabase)
- DatabaseService: Profiles, usage counters, message storage (Supabase)
- ResearchService: Multi-query grounded research
- ImageService: Image model selection

DEPENDENCY FLOW:
----------------
    GeminiClient ──┬──► ResearchService
                   └──► ImageService

    Supabase ──────┬──► MemoryService
                   └──► DatabaseService
"""

from app.services.gemini_client import GeminiClient
from app.services.memory_service import MemoryService
from app.services.database_service import DatabaseService
from app.services.research_service import ResearchService
from app.services.image_service import ImageService

__all__ = [
    "GeminiClient",
    "MemoryService",
    "DatabaseService",
    "ResearchService",
    "ImageService",
]
