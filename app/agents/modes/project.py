"""
Project Mode - Designs a multi-file project structure as JSON.
"""

from app.agents.base import AgentContext, ModeResult, StreamingMode
from app.models.schemas import RouterAction


PROJECT_PROMPT = (
    "Build a complete file structure for a project: {request}. "
    "Return a JSON object with filenames and brief content descriptions."
)


class ProjectMode(StreamingMode):
    """One JSON-mode call, wrapped in a short message for the user."""

    action = RouterAction.PROJECT

    async def execute(self, context: AgentContext, prompt: str) -> ModeResult:
        context.emit("\n\n📦 Building project structure...")

        result = await self.gemini.generate(
            self.model,
            PROJECT_PROMPT.format(request=prompt),
            response_mime_type="application/json",
        )

        context.append(
            "\nI've designed the project structure based on your request.\n\n"
            f"{result.text}\n\n"
            "(Switch to Co-Creator mode to fully hydrate and edit these files.)"
        )
        return ModeResult()
