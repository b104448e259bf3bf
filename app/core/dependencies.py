"""
Dependencies - Dependency injection for services and components.

Provides singleton instances of services. The Supabase client is async
to create, so it and everything built on it come from async providers.
"""

import asyncio
import logging
from typing import Any, Optional

from supabase import acreate_client

from app.core.config import get_settings
from app.agents.orchestrator import AutonomousAgent
from app.agents.router import SemanticRouter
from app.services.gemini_client import GeminiClient
from app.services.memory_service import MemoryService
from app.services.database_service import DatabaseService
from app.services.research_service import ResearchService
from app.services.image_service import ImageService

logger = logging.getLogger(__name__)


# Singleton instances
_gemini_client = None
_supabase_client = None
_supabase_checked = False
_supabase_lock = asyncio.Lock()
_memory_service = None
_database_service = None
_research_service = None
_image_service = None
_router = None
_agent = None


def get_gemini_client() -> GeminiClient:
    """Get Gemini client instance."""
    global _gemini_client
    if _gemini_client is None:
        settings = get_settings()
        _gemini_client = GeminiClient(api_key=settings.gemini_api_key)
    return _gemini_client


async def get_supabase_client() -> Optional[Any]:
    """Get Supabase async client, or None when Supabase is not configured."""
    global _supabase_client, _supabase_checked
    if _supabase_checked:
        return _supabase_client
    async with _supabase_lock:
        if not _supabase_checked:
            settings = get_settings()
            if settings.supabase_configured:
                _supabase_client = await acreate_client(settings.supabase_url, settings.supabase_key)
                logger.info("Connected Supabase client")
            else:
                logger.warning("Supabase not configured; memory and persistence are disabled")
            _supabase_checked = True
    return _supabase_client


async def get_memory_service() -> MemoryService:
    """Get memory service instance."""
    global _memory_service
    if _memory_service is None:
        settings = get_settings()
        _memory_service = MemoryService(
            client=await get_supabase_client(),
            table=settings.memories_table
        )
    return _memory_service


async def get_database_service() -> DatabaseService:
    """Get database service instance."""
    global _database_service
    if _database_service is None:
        settings = get_settings()
        _database_service = DatabaseService(
            client=await get_supabase_client(),
            messages_table=settings.messages_table,
            profiles_table=settings.profiles_table,
            thinking_count_rpc=settings.thinking_count_rpc
        )
    return _database_service


def get_research_service() -> ResearchService:
    """Get research service instance."""
    global _research_service
    if _research_service is None:
        settings = get_settings()
        _research_service = ResearchService(
            gemini=get_gemini_client(),
            model=settings.research_model,
            max_queries=settings.research_max_queries
        )
    return _research_service


def get_image_service() -> ImageService:
    """Get image service instance."""
    global _image_service
    if _image_service is None:
        settings = get_settings()
        _image_service = ImageService(
            gemini=get_gemini_client(),
            default_model=settings.image_model
        )
    return _image_service


def get_router() -> SemanticRouter:
    """Get router instance."""
    global _router
    if _router is None:
        _router = SemanticRouter()
    return _router


async def get_agent() -> AutonomousAgent:
    """Get the autonomous agent, wired to every service."""
    global _agent
    if _agent is None:
        _agent = AutonomousAgent(
            gemini=get_gemini_client(),
            memory_service=await get_memory_service(),
            database_service=await get_database_service(),
            research_service=get_research_service(),
            image_service=get_image_service(),
            settings=get_settings(),
            router=get_router()
        )
    return _agent
