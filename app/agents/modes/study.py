"""
Study Mode - Structured study plan generation.
"""

from app.agents.base import AgentContext, ModeResult, StreamingMode
from app.models.schemas import RouterAction


STUDY_PROMPT = (
    "Create a structured study plan for: {topic}. "
    "Include learning objectives and key concepts."
)


class StudyMode(StreamingMode):
    action = RouterAction.STUDY

    async def execute(self, context: AgentContext, prompt: str) -> ModeResult:
        context.emit("\n\n📚 Creating study plan...")
        await self._stream_into(context, STUDY_PROMPT.format(topic=prompt))
        return ModeResult()
