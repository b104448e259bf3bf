"""
Gemini Client - Async access to the hosted Gemini models.

RESPONSIBILITY:
Wraps the google-genai SDK so the agent modes only deal with plain text
chunks, grounding citations and base64 images:
- stream(): streamed generation, optionally grounded with Google Search
- generate(): single-shot generation (JSON mode for structured output)
- generate_image(): Imagen or Gemini image generation

Contents are passed in the SDK's dict form:
    [{"role": "user", "parts": [{"text": "..."}]}]
or as a plain string for single-turn prompts.
"""

import base64
import logging
from dataclasses import dataclass, field
from typing import Any, AsyncIterator, Dict, List, Optional, Union

from google import genai
from google.genai import types

from app.api.middleware.error_handler import (
    ConfigurationError,
    GenerationError,
    ImageGenerationError,
)

logger = logging.getLogger(__name__)


Contents = Union[str, List[Dict[str, Any]]]


@dataclass
class StreamChunk:
    """One streamed piece of model output."""
    text: str = ""
    grounding_chunks: List[Dict[str, Any]] = field(default_factory=list)


@dataclass
class GenerationResult:
    """Result of a non-streaming generation."""
    text: str = ""
    grounding_chunks: List[Dict[str, Any]] = field(default_factory=list)


@dataclass
class GeneratedImage:
    """A generated image, base64 encoded."""
    image_base64: str
    mime_type: str = "image/png"


def history_to_contents(history: List[Any]) -> List[Dict[str, Any]]:
    """
    Convert chat history into Gemini contents.

    User messages keep the "user" role, everything else becomes "model".
    Messages with blank text are dropped.
    """
    contents = []
    for message in history:
        text = message.text or ""
        if not text.strip():
            continue
        role = "user" if message.sender == "user" else "model"
        contents.append({"role": role, "parts": [{"text": text}]})
    return contents


def user_turn(prompt: str, files: Optional[List[Any]] = None) -> Dict[str, Any]:
    """Build the user turn: inline file parts first, then the prompt text."""
    parts: List[Dict[str, Any]] = []
    for attachment in files or []:
        parts.append({
            "inline_data": {
                "data": base64.b64decode(attachment.data),
                "mime_type": attachment.mime_type,
            }
        })
    parts.append({"text": prompt})
    return {"role": "user", "parts": parts}


def extract_grounding_chunks(response: Any) -> List[Dict[str, Any]]:
    """Pull grounding chunks (citations) from the first candidate, if any."""
    candidates = getattr(response, "candidates", None) or []
    if not candidates:
        return []
    metadata = getattr(candidates[0], "grounding_metadata", None)
    if metadata is None or not metadata.grounding_chunks:
        return []
    return [
        chunk.model_dump(mode="json", exclude_none=True)
        for chunk in metadata.grounding_chunks
    ]


class GeminiClient:
    """
    Async Gemini client.

    The underlying SDK client is created on first use so the application
    can start (and report readiness) without an API key.
    """

    def __init__(self, api_key: str):
        self.api_key = api_key
        self._client: Optional[genai.Client] = None

    @property
    def client(self) -> genai.Client:
        """Lazily create the SDK client."""
        if self._client is None:
            if not self.api_key:
                raise ConfigurationError("GEMINI_API_KEY")
            self._client = genai.Client(api_key=self.api_key)
        return self._client

    def _build_config(
        self,
        system_instruction: Optional[str] = None,
        google_search: bool = False,
        text_only: bool = False,
        response_mime_type: Optional[str] = None,
    ) -> Optional[types.GenerateContentConfig]:
        """Build a request config, or None when nothing is set."""
        options: Dict[str, Any] = {}
        if system_instruction:
            options["system_instruction"] = system_instruction
        if google_search:
            options["tools"] = [types.Tool(google_search=types.GoogleSearch())]
        if text_only:
            options["response_modalities"] = ["TEXT"]
        if response_mime_type:
            options["response_mime_type"] = response_mime_type
        if not options:
            return None
        return types.GenerateContentConfig(**options)

    async def stream(
        self,
        model: str,
        contents: Contents,
        system_instruction: Optional[str] = None,
        google_search: bool = False,
        text_only: bool = False,
    ) -> AsyncIterator[StreamChunk]:
        """
        Stream a generation.

        Yields:
            StreamChunk with the new text and any grounding chunks
            that arrived with it
        """
        config = self._build_config(
            system_instruction=system_instruction,
            google_search=google_search,
            text_only=text_only,
        )
        logger.debug(f"Streaming from {model} (google_search={google_search})")

        response = await self.client.aio.models.generate_content_stream(
            model=model,
            contents=contents,
            config=config,
        )
        async for chunk in response:
            yield StreamChunk(
                text=chunk.text or "",
                grounding_chunks=extract_grounding_chunks(chunk),
            )

    async def generate(
        self,
        model: str,
        contents: Contents,
        system_instruction: Optional[str] = None,
        google_search: bool = False,
        response_mime_type: Optional[str] = None,
    ) -> GenerationResult:
        """Run a single non-streaming generation."""
        config = self._build_config(
            system_instruction=system_instruction,
            google_search=google_search,
            response_mime_type=response_mime_type,
        )
        logger.debug(f"Generating with {model} (mime={response_mime_type})")

        response = await self.client.aio.models.generate_content(
            model=model,
            contents=contents,
            config=config,
        )
        text = response.text
        if text is None:
            raise GenerationError("Model returned no text", model=model)

        return GenerationResult(
            text=text,
            grounding_chunks=extract_grounding_chunks(response),
        )

    async def generate_image(self, prompt: str, model: str) -> GeneratedImage:
        """
        Generate one image.

        Imagen models go through generate_images; Gemini image models
        return the picture as an inline part of a normal generation.
        """
        logger.info(f"Generating image with {model}")

        if model.startswith("imagen"):
            response = await self.client.aio.models.generate_images(
                model=model,
                prompt=prompt,
                config=types.GenerateImagesConfig(number_of_images=1),
            )
            generated = response.generated_images or []
            if not generated or not generated[0].image or not generated[0].image.image_bytes:
                raise ImageGenerationError("No image was returned", model=model)
            image = generated[0].image
            return GeneratedImage(
                image_base64=base64.b64encode(image.image_bytes).decode("ascii"),
                mime_type=image.mime_type or "image/png",
            )

        response = await self.client.aio.models.generate_content(
            model=model,
            contents=prompt,
            config=types.GenerateContentConfig(response_modalities=["TEXT", "IMAGE"]),
        )
        for candidate in response.candidates or []:
            if candidate.content is None:
                continue
            for part in candidate.content.parts or []:
                if part.inline_data is not None and part.inline_data.data:
                    return GeneratedImage(
                        image_base64=base64.b64encode(part.inline_data.data).decode("ascii"),
                        mime_type=part.inline_data.mime_type or "image/png",
                    )
        raise ImageGenerationError("No image was returned", model=model)
