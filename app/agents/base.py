"""
Base classes for the agent architecture.

Every invocation mode inherits from BaseMode so the orchestrator can
run them interchangeably and hand off between them.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Optional
import logging

from app.models.schemas import (
    FileAttachment,
    HistoryMessage,
    MemoryEntry,
    MessageRecord,
    Profile,
    RouterAction,
    RoutingDecision,
)

logger = logging.getLogger(__name__)


StreamCallback = Callable[[str], None]


@dataclass
class AgentInput:
    """Everything the caller provides for one agent run."""
    prompt: str
    user_id: str
    project_id: Optional[str] = None
    chat_id: Optional[str] = None
    history: List[HistoryMessage] = field(default_factory=list)
    files: List[FileAttachment] = field(default_factory=list)
    profile: Optional[Profile] = None
    on_stream_chunk: Optional[StreamCallback] = None


@dataclass
class AgentExecutionResult:
    """Messages produced by one agent run."""
    messages: List[MessageRecord] = field(default_factory=list)


@dataclass
class AgentContext:
    """
    Shared state passed between modes during a run.

    The response text accumulates across hops: text streamed by SIMPLE
    before a tag stays in front of whatever the next mode produces.
    """
    # Input
    prompt: str
    user_id: str
    project_id: Optional[str] = None
    chat_id: Optional[str] = None
    history: List[HistoryMessage] = field(default_factory=list)
    files: List[FileAttachment] = field(default_factory=list)
    profile: Optional[Profile] = None
    on_stream_chunk: Optional[StreamCallback] = None

    # Prompt context
    routing: RoutingDecision = field(default_factory=RoutingDecision)
    memory_context: Dict[str, Dict[str, str]] = field(default_factory=dict)
    datetime_context: str = ""

    # Accumulated output
    response_text: str = ""
    grounding_metadata: List[Dict[str, Any]] = field(default_factory=list)
    image_base64: Optional[str] = None
    image_status: Optional[str] = None
    memory_to_create: Optional[List[MemoryEntry]] = None

    # Metadata
    errors: list = field(default_factory=list)
    execution_log: list = field(default_factory=list)

    @classmethod
    def from_input(cls, agent_input: AgentInput) -> "AgentContext":
        return cls(
            prompt=agent_input.prompt,
            user_id=agent_input.user_id,
            project_id=agent_input.project_id,
            chat_id=agent_input.chat_id,
            history=list(agent_input.history),
            files=list(agent_input.files),
            profile=agent_input.profile,
            on_stream_chunk=agent_input.on_stream_chunk,
        )

    def log(self, message: str) -> None:
        """Add entry to execution log."""
        self.execution_log.append(message)
        logger.debug(message)

    def add_error(self, error: str) -> None:
        """Record an error that occurred during execution."""
        self.errors.append(error)

    def emit(self, chunk: str) -> None:
        """Send a chunk to the caller's stream, if it is listening."""
        if self.on_stream_chunk is not None and chunk:
            self.on_stream_chunk(chunk)

    def append(self, text: str) -> None:
        """Append text to the response and stream it."""
        self.response_text += text
        self.emit(text)

    def to_record(self) -> MessageRecord:
        """Shape the accumulated output into a storable message."""
        return MessageRecord(
            project_id=self.project_id,
            chat_id=self.chat_id,
            sender="ai",
            text=self.response_text,
            image_base64=self.image_base64,
            image_status=self.image_status,
            grounding_metadata=self.grounding_metadata or None,
            memory_to_create=self.memory_to_create,
        )


@dataclass
class TagMatch:
    """A mode tag found in generated text."""
    action: RouterAction
    prompt: str
    raw: str


@dataclass
class ModeResult:
    """
    Result returned by a mode.

    A mode either finishes the run (handoff is None) or asks the
    orchestrator to continue in another mode.
    """
    handoff: Optional[TagMatch] = None


class BaseMode(ABC):
    """
    Base class for all invocation modes.

    Modes call Gemini (or a service built on it), append their output to
    the context and stream it to the caller.
    """

    action: RouterAction = RouterAction.SIMPLE

    @abstractmethod
    async def execute(self, context: AgentContext, prompt: str) -> ModeResult:
        """
        Run the mode.

        Args:
            context: Shared agent context
            prompt: Prompt for this hop (the user's prompt, or a tag's content)

        Returns:
            ModeResult, with a handoff when another mode should run next
        """
        pass


class StreamingMode(BaseMode):
    """A mode that streams one Gemini generation into the response."""

    def __init__(self, gemini: Any, model: str):
        """
        Args:
            gemini: GeminiClient (or anything with the same stream() signature)
            model: Model identifier for this mode
        """
        self.gemini = gemini
        self.model = model

    async def _stream_into(
        self,
        context: AgentContext,
        contents: Any,
        collect_grounding: bool = False,
        **options
    ) -> str:
        """
        Stream a generation into the context.

        Returns:
            The text generated by this call alone
        """
        generated = ""
        async for chunk in self.gemini.stream(self.model, contents, **options):
            if chunk.text:
                generated += chunk.text
                context.append(chunk.text)
            if collect_grounding and chunk.grounding_chunks:
                context.grounding_metadata.extend(chunk.grounding_chunks)
        return generated
