"""
Simple Mode - Plain conversation, and the only mode that can hand off.

FLOW:
1. Build the system instruction: persona + [MEMORY] + date/time
2. Stream the reply over the conversation history and the new user turn
   (attached files go inline before the prompt text)
3. Scan this hop's text for a mode tag; if one is found, hand off
4. Otherwise remember the topic when the reply was substantial
"""

import json
from typing import Any

from app.agents.base import AgentContext, ModeResult, StreamingMode
from app.agents.instructions import AUTONOMOUS_INSTRUCTION
from app.agents.tags import detect_tag
from app.models.schemas import MemoryEntry, MemoryLayer, RouterAction
from app.services.gemini_client import history_to_contents, user_turn


class SimpleMode(StreamingMode):
    """Streams a conversational reply and watches it for mode tags."""

    action = RouterAction.SIMPLE

    def __init__(self, gemini: Any, model: str, memory_topic_threshold: int = 50):
        super().__init__(gemini, model)
        self.memory_topic_threshold = memory_topic_threshold

    async def execute(self, context: AgentContext, prompt: str) -> ModeResult:
        system_prompt = (
            f"{AUTONOMOUS_INSTRUCTION}\n\n"
            f"[MEMORY]\n{json.dumps(context.memory_context)}\n\n"
            f"{context.datetime_context}"
        )
        contents = history_to_contents(context.history)
        contents.append(user_turn(prompt, context.files))

        generated = await self._stream_into(
            context,
            contents,
            collect_grounding=True,
            system_instruction=system_prompt,
        )

        tag = detect_tag(generated, context.prompt)
        if tag is not None:
            context.log(f"Simple: detected {tag.action.value} tag")
            return ModeResult(handoff=tag)

        if len(generated) > self.memory_topic_threshold:
            context.memory_to_create = [
                MemoryEntry(
                    layer=MemoryLayer.OUTER_PERSONAL,
                    key="last_topic",
                    value=context.prompt,
                )
            ]

        return ModeResult()
