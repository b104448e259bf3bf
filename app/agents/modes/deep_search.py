"""
Deep Search Mode - Multi-step research via the ResearchService.
"""

from typing import Any

from app.agents.base import AgentContext, BaseMode, ModeResult
from app.models.schemas import RouterAction


class DeepSearchMode(BaseMode):
    """Runs deep research and appends the answer with its sources."""

    action = RouterAction.DEEP_SEARCH

    def __init__(self, research_service: Any):
        self.research = research_service

    async def execute(self, context: AgentContext, prompt: str) -> ModeResult:
        context.emit("\n\n🔬 Deep Researching...")

        result = await self.research.deep_research(
            prompt,
            lambda message: context.emit(f"\n*{message}*"),
        )

        research_text = f"{result.answer}\n\n**Sources:**\n" + "\n".join(result.sources)
        context.response_text += "\n\n" + research_text
        context.emit(research_text)
        return ModeResult()
