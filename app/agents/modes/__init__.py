"""
Invocation modes for the autonomous agent.

One mode per RouterAction:
- SimpleMode: Conversation; may hand off via a tag
- SearchMode: Google Search grounded answer
- DeepSearchMode: Multi-step research
- ThinkMode: Thinking model
- ImageMode: Image generation
- CanvasMode: Single-file code
- ProjectMode: Project file structure
- StudyMode: Study plan
"""

from app.agents.modes.simple import SimpleMode
from app.agents.modes.search import SearchMode
from app.agents.modes.deep_search import DeepSearchMode
from app.agents.modes.think import ThinkMode
from app.agents.modes.image import ImageMode
from app.agents.modes.canvas import CanvasMode
from app.agents.modes.project import ProjectMode
from app.agents.modes.study import StudyMode

__all__ = [
    "SimpleMode",
    "SearchMode",
    "DeepSearchMode",
    "ThinkMode",
    "ImageMode",
    "CanvasMode",
    "ProjectMode",
    "StudyMode",
]
