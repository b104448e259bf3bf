"""
Chat Endpoints - Send a message to the agent.

- POST /chat          run the agent and return the final message
- POST /chat/stream   same, streamed as Server-Sent Events:
                        data: {"type": "chunk", "text": "..."}
                        ...
                        data: {"type": "result", "messages": [...]}
"""

import asyncio
import json
import logging
from datetime import datetime
from typing import Any, AsyncIterator, Dict, List, Optional

from fastapi import APIRouter, Depends
from fastapi.responses import StreamingResponse

from app.agents.base import AgentExecutionResult, AgentInput
from app.agents.orchestrator import AutonomousAgent
from app.api.middleware.error_handler import PersistenceError
from app.core.dependencies import get_agent, get_database_service, get_memory_service
from app.models.requests import ChatRequest
from app.models.responses import ChatResponse, ErrorResponse
from app.models.schemas import Profile
from app.services.database_service import DatabaseService
from app.services.memory_service import MemoryService

logger = logging.getLogger(__name__)


router = APIRouter(prefix="/chat", tags=["Chat"])


async def _load_profile(database: DatabaseService, user_id: str) -> Optional[Profile]:
    """Load the profile; a missing profile only disables preferences."""
    try:
        return await database.get_profile(user_id)
    except PersistenceError as e:
        logger.warning(f"Profile unavailable for {user_id}: {e.message}")
        return None


def _build_input(request: ChatRequest, profile: Optional[Profile]) -> AgentInput:
    return AgentInput(
        prompt=request.prompt,
        user_id=request.user_id,
        project_id=request.project_id,
        chat_id=request.chat_id,
        history=request.history,
        files=request.files,
        profile=profile,
    )


async def _persist(
    request: ChatRequest,
    result: AgentExecutionResult,
    database: DatabaseService,
    memory: MemoryService
) -> Optional[str]:
    """
    Store the messages and any memories they ask to create.

    Returns:
        An error message if storing failed, else None
    """
    if not request.persist:
        return None
    try:
        await database.save_messages(result.messages)
        for record in result.messages:
            if record.memory_to_create:
                await memory.save(request.user_id, record.memory_to_create)
    except PersistenceError as e:
        logger.error(f"Persisting chat turn failed: {e.message}")
        return e.message
    return None


def _messages(result: AgentExecutionResult) -> List[Dict[str, Any]]:
    return [record.to_storage() for record in result.messages]


def _sse(event: Dict[str, Any]) -> str:
    return f"data: {json.dumps(event)}\n\n"


@router.post(
    "",
    response_model=ChatResponse,
    summary="Chat",
    description="Send a message to the agent and get its reply",
    responses={
        200: {"description": "Agent replied (errors are reported in the message text)"},
        422: {"model": ErrorResponse, "description": "Invalid request"}
    }
)
async def chat(
    request: ChatRequest,
    agent: AutonomousAgent = Depends(get_agent),
    database: DatabaseService = Depends(get_database_service),
    memory: MemoryService = Depends(get_memory_service)
) -> ChatResponse:
    """
    Run one chat turn.

    The agent may switch modes mid-reply (search, image, thinking, ...);
    the returned message is the final, tag-free result.
    """
    start_time = datetime.utcnow()

    profile = await _load_profile(database, request.user_id)
    result = await agent.run(_build_input(request, profile))
    error = await _persist(request, result, database, memory)

    duration = (datetime.utcnow() - start_time).total_seconds()

    return ChatResponse(
        success=True,
        messages=_messages(result),
        duration_seconds=duration,
        error=error
    )


@router.post(
    "/stream",
    summary="Chat (streaming)",
    description="Send a message and receive the reply as Server-Sent Events"
)
async def chat_stream(
    request: ChatRequest,
    agent: AutonomousAgent = Depends(get_agent),
    database: DatabaseService = Depends(get_database_service),
    memory: MemoryService = Depends(get_memory_service)
) -> StreamingResponse:
    """Stream chunks as the model produces them, then the final message."""
    profile = await _load_profile(database, request.user_id)
    agent_input = _build_input(request, profile)

    async def event_stream() -> AsyncIterator[str]:
        queue: asyncio.Queue = asyncio.Queue()
        finished = object()
        agent_input.on_stream_chunk = queue.put_nowait

        async def run() -> AgentExecutionResult:
            try:
                return await agent.run(agent_input)
            finally:
                queue.put_nowait(finished)

        task = asyncio.create_task(run())
        try:
            while True:
                item = await queue.get()
                if item is finished:
                    break
                yield _sse({"type": "chunk", "text": item})

            result = await task
            error = await _persist(request, result, database, memory)
            event = {"type": "result", "messages": _messages(result)}
            if error:
                event["error"] = error
            yield _sse(event)
        finally:
            if not task.done():
                task.cancel()

    return StreamingResponse(event_stream(), media_type="text/event-stream")
