"""
Agent Architecture for Bubble Agent
===================================

FLOW OVERVIEW:
--------------
1. User sends a prompt
2. SemanticRouter starts the turn in SIMPLE mode and picks memory layers
3. SimpleMode streams a reply from the chat model
4. If the reply contains a mode tag (<SEARCH>, <DEEP>, <THINK>, <IMAGE>,
   <CANVAS>, <PROJECT>, <STUDY>), the tag is stripped and the agent
   re-invokes the model in that mode with the tag's content
5. The final text, image and citations become one MessageRecord

USAGE:
------
    from app.agents import AutonomousAgent, AgentInput

    agent = AutonomousAgent(gemini, memory, database, research, images, settings)
    result = await agent.run(AgentInput(prompt="Draw a fox", user_id="u-1"))

    print(result.messages[0].text)
"""

from app.agents.base import (
    AgentContext,
    AgentExecutionResult,
    AgentInput,
    BaseMode,
    ModeResult,
    StreamingMode,
    TagMatch,
)
from app.agents.router import SemanticRouter
from app.agents.tags import detect_tag, strip_tag
from app.agents.orchestrator import AutonomousAgent

__all__ = [
    # Base classes
    "AgentContext",
    "AgentExecutionResult",
    "AgentInput",
    "BaseMode",
    "ModeResult",
    "StreamingMode",
    "TagMatch",
    # Routing
    "SemanticRouter",
    "detect_tag",
    "strip_tag",
    # Agent
    "AutonomousAgent",
]
