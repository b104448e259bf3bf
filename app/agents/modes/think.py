"""
Think Mode - Extended reasoning with the thinking model.

The thinking model gets no system instruction; persona, date, memory
and task are folded into the final user turn instead.
"""

import json
from typing import Any

from app.agents.base import AgentContext, ModeResult, StreamingMode
from app.agents.instructions import AUTONOMOUS_INSTRUCTION
from app.models.schemas import RouterAction
from app.services.gemini_client import history_to_contents


class ThinkMode(StreamingMode):
    """Counts the use against the user's quota, then streams the reasoning."""

    action = RouterAction.THINK

    def __init__(self, gemini: Any, model: str, database: Any):
        super().__init__(gemini, model)
        self.database = database

    async def execute(self, context: AgentContext, prompt: str) -> ModeResult:
        context.emit("\n\n🧠 Thinking...")
        await self.database.increment_thinking_count(context.user_id)

        context_block = (
            f"\n{AUTONOMOUS_INSTRUCTION}\n\n"
            f"{context.datetime_context}\n\n"
            f"[MEMORY]\n{json.dumps(context.memory_context)}\n\n"
            f"[TASK]\n{prompt}\n"
        )
        contents = history_to_contents(context.history)
        contents.append({"role": "user", "parts": [{"text": context_block}]})

        await self._stream_into(context, contents)
        return ModeResult()
