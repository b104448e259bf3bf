"""
Image Mode - Generates an image and attaches it to the message.

Text streamed before the tag (e.g. "Sure, here's a cat!") is kept as
the message text; the image rides along as image_base64.
"""

import json
import logging
from typing import Any

from app.agents.base import AgentContext, BaseMode, ModeResult
from app.models.schemas import RouterAction

logger = logging.getLogger(__name__)


class ImageMode(BaseMode):
    """Generates one image with the user's preferred model."""

    action = RouterAction.IMAGE

    def __init__(self, image_service: Any):
        self.images = image_service

    async def execute(self, context: AgentContext, prompt: str) -> ModeResult:
        # Lets the UI show a loader before the image arrives
        context.emit(json.dumps({
            "type": "image_generation_start",
            "text": context.response_text,
        }))

        image_prompt = context.routing.parameters.get("prompt") or prompt
        preferred_model = context.profile.preferred_image_model if context.profile else None

        try:
            image = await self.images.generate(image_prompt, preferred_model)
        except Exception as e:
            logger.warning(f"Image generation failed: {e}")
            context.add_error(f"Image generation failed: {e}")
            context.append(f"\n\n(Image generation failed: {str(e) or 'Unknown error'})")
            return ModeResult()

        context.image_base64 = image.image_base64
        context.image_status = "complete"
        return ModeResult()
