"""
Search Mode - A single reply grounded with Google Search.

Citations arrive as grounding chunks on the streamed response and are
attached to the message as groundingMetadata.
"""

from app.agents.base import AgentContext, ModeResult, StreamingMode
from app.agents.instructions import AUTONOMOUS_INSTRUCTION
from app.models.schemas import RouterAction


SEARCH_GUIDANCE = (
    "Provide a helpful, friendly answer to the user's query using Google Search. "
    "Maintain your persona (Bubble). Cite sources."
)


class SearchMode(StreamingMode):
    """Answers with the Google Search tool enabled."""

    action = RouterAction.SEARCH

    async def execute(self, context: AgentContext, prompt: str) -> ModeResult:
        context.emit("\n\n🔍 Searching the web...")

        system_prompt = (
            f"{AUTONOMOUS_INSTRUCTION}\n\n{context.datetime_context}\n\n{SEARCH_GUIDANCE}"
        )
        await self._stream_into(
            context,
            f"User Query: {prompt}",
            collect_grounding=True,
            system_instruction=system_prompt,
            google_search=True,
            text_only=True,
        )
        return ModeResult()
