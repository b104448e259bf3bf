"""
Image Service - Picks the image model and delegates generation to Gemini.
"""

import logging
from typing import Optional

from app.api.middleware.error_handler import ImageGenerationError
from app.services.gemini_client import GeminiClient, GeneratedImage

logger = logging.getLogger(__name__)


class ImageService:
    """Generates images with the user's preferred model or the default one."""

    def __init__(self, gemini: GeminiClient, default_model: str):
        self.gemini = gemini
        self.default_model = default_model

    async def generate(
        self,
        prompt: str,
        preferred_model: Optional[str] = None
    ) -> GeneratedImage:
        """
        Generate a single image.

        Raises:
            ImageGenerationError: if the prompt is empty or no image comes back
        """
        if not prompt or not prompt.strip():
            raise ImageGenerationError("Image prompt is empty")

        model = preferred_model or self.default_model
        image = await self.gemini.generate_image(prompt.strip(), model)
        logger.info(f"Generated image ({image.mime_type}) with {model}")
        return image
