"""
Canvas Mode - Single-file code generation.
"""

from app.agents.base import AgentContext, ModeResult, StreamingMode
from app.agents.instructions import CANVAS_SYSTEM_INSTRUCTION
from app.models.schemas import RouterAction


CANVAS_PROMPT = """Create a single-file solution for: {request}.
If it's a web page, provide full HTML/CSS/JS in one file.
If it's a script, provide the full code.
Do not use markdown backticks for the main code block in the final output if possible, or ensure it's clean."""


class CanvasMode(StreamingMode):
    """Streams a complete single-file program or page."""

    action = RouterAction.CANVAS

    async def execute(self, context: AgentContext, prompt: str) -> ModeResult:
        context.emit("\n\n📝 Opening Canvas...")
        await self._stream_into(
            context,
            CANVAS_PROMPT.format(request=prompt),
            system_instruction=CANVAS_SYSTEM_INSTRUCTION,
        )
        return ModeResult()
