"""
Autonomous Agent - Coordinates routing, memory and mode hand-offs.

RESPONSIBILITY:
The agent is the single entry point for a chat turn. It prepares the
prompt context, runs the current mode, and follows tag hand-offs from
SIMPLE mode into the other modes, for a bounded number of hops.

COMPLETE FLOW:
==============
1. User prompt (+ history, files, profile)
        │
        ▼
2. ROUTER → starting action (SIMPLE) and memory layers
        │
        ▼
3. CONTEXT → memory for every layer, current date & time
        │
        ▼
4. HOP LOOP (at most max_hops)
   ┌──────────────────────────────────────────────┐
   │  run mode for the current action             │
   │  SIMPLE saw <TAG>content</TAG>?              │
   │    yes → strip tag, switch action, continue  │
   │    no  → done                                │
   └──────────────────────────────────────────────┘
        │
        ▼
5. MessageRecord (text, image, citations, memory to create)
"""

import logging
from typing import Any, Dict, Optional

from app.agents.base import (
    AgentContext,
    AgentExecutionResult,
    AgentInput,
    BaseMode,
)
from app.agents.errors import get_user_friendly_error
from app.agents.instructions import datetime_context
from app.agents.modes import (
    CanvasMode,
    DeepSearchMode,
    ImageMode,
    ProjectMode,
    SearchMode,
    SimpleMode,
    StudyMode,
    ThinkMode,
)
from app.agents.router import SemanticRouter
from app.agents.tags import strip_tag
from app.models.schemas import MessageRecord, RouterAction

logger = logging.getLogger(__name__)


class AutonomousAgent:
    """
    Runs one chat turn across the invocation modes.

    The agent manages:
    - Mode registration
    - Context preparation (memory, date/time)
    - The bounded hop loop
    - Error handling (a failed run still yields a message)
    """

    def __init__(
        self,
        gemini: Any,
        memory_service: Any,
        database_service: Any,
        research_service: Any,
        image_service: Any,
        settings: Any,
        router: Optional[SemanticRouter] = None,
    ):
        """
        Initialize the agent with all dependencies.

        Args:
            gemini: GeminiClient for the streaming modes
            memory_service: MemoryService for the [MEMORY] context
            database_service: DatabaseService for usage counters
            research_service: ResearchService for deep research
            image_service: ImageService for image generation
            settings: Settings with model identifiers and limits
            router: Optional router (defaults to SemanticRouter)
        """
        self.memory = memory_service
        self.router = router or SemanticRouter()
        self.max_hops = settings.max_hops

        self.modes: Dict[RouterAction, BaseMode] = {
            RouterAction.SIMPLE: SimpleMode(
                gemini, settings.chat_model, settings.memory_topic_threshold
            ),
            RouterAction.SEARCH: SearchMode(gemini, settings.search_model),
            RouterAction.DEEP_SEARCH: DeepSearchMode(research_service),
            RouterAction.THINK: ThinkMode(gemini, settings.thinking_model, database_service),
            RouterAction.IMAGE: ImageMode(image_service),
            RouterAction.CANVAS: CanvasMode(gemini, settings.canvas_model),
            RouterAction.PROJECT: ProjectMode(gemini, settings.project_model),
            RouterAction.STUDY: StudyMode(gemini, settings.study_model),
        }

    async def run(self, agent_input: AgentInput) -> AgentExecutionResult:
        """
        Main entry point - answer one user prompt.

        Never raises: failures become a single error message.
        """
        context = AgentContext.from_input(agent_input)

        try:
            await self._prepare(context)
            await self._run_hops(context)
            return AgentExecutionResult(messages=[context.to_record()])

        except Exception as e:
            logger.exception(f"Error in autonomous agent run: {e}")
            return AgentExecutionResult(messages=[self._build_error_record(context, e)])

    async def _prepare(self, context: AgentContext) -> None:
        """Route the prompt and gather memory and date/time context."""
        context.routing = await self.router.route(
            context.prompt,
            context.user_id,
            file_count=len(context.files),
        )
        context.memory_context = await self.memory.get_context(
            context.user_id,
            context.routing.memory_layers,
        )
        context.datetime_context = datetime_context()

    async def _run_hops(self, context: AgentContext) -> None:
        """Run modes until one finishes or the hop budget is spent."""
        action = context.routing.action
        prompt = context.prompt

        for hop in range(1, self.max_hops + 1):
            logger.info(f"[Autonomous hop {hop}] Action: {action.value}")
            context.log(f"Hop {hop}: {action.value}")

            mode = self.modes.get(action, self.modes[RouterAction.SIMPLE])
            result = await mode.execute(context, prompt)

            tag = result.handoff
            if tag is None:
                return

            context.response_text = strip_tag(context.response_text, tag)
            if tag.action == RouterAction.IMAGE:
                context.routing.parameters = {"prompt": tag.prompt}
            action = tag.action
            prompt = tag.prompt

        context.log(f"Hop budget of {self.max_hops} spent")

    def _build_error_record(self, context: AgentContext, error: Exception) -> MessageRecord:
        """Build the message returned when a run fails."""
        return MessageRecord(
            project_id=context.project_id,
            chat_id=context.chat_id,
            sender="ai",
            text=f"An error occurred: {get_user_friendly_error(error)}",
        )
