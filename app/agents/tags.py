"""
Tag Detection - Finds mode tags the model emits in its own output.

The chat model is told it may write tags such as <SEARCH>query</SEARCH>
or <IMAGE>a red fox</IMAGE>. After a SIMPLE hop the generated text is
scanned, and the first tag found (in priority order) switches the agent
into that mode with the tag's content as the new prompt.

Patterns match within a single line and are non-greedy.
"""

import re
from typing import Optional

from app.agents.base import TagMatch
from app.models.schemas import RouterAction


# (action, pattern) in priority order; the first pattern that matches wins
TAG_PATTERNS = [
    (RouterAction.DEEP_SEARCH, re.compile(r"<DEEP>(.*?)</DEEP>")),
    (RouterAction.DEEP_SEARCH, re.compile(r"<SEARCH>deep\s+(.*?)</SEARCH>", re.IGNORECASE)),
    (RouterAction.SEARCH, re.compile(r"<SEARCH>(.*?)</SEARCH>")),
    (RouterAction.THINK, re.compile(r"<THINK>(.*?)</THINK>")),
    (RouterAction.THINK, re.compile(r"<THINK>")),
    (RouterAction.IMAGE, re.compile(r"<IMAGE>(.*?)</IMAGE>")),
    (RouterAction.PROJECT, re.compile(r"<PROJECT>(.*?)</PROJECT>")),
    (RouterAction.CANVAS, re.compile(r"<CANVAS>(.*?)</CANVAS>")),
    (RouterAction.STUDY, re.compile(r"<STUDY>(.*?)</STUDY>")),
]


def detect_tag(text: str, original_prompt: str) -> Optional[TagMatch]:
    """
    Find the highest-priority tag in generated text.

    Args:
        text: Text generated in the current hop
        original_prompt: The user's prompt, used by a THINK tag with no content

    Returns:
        TagMatch, or None when the text contains no tag
    """
    for action, pattern in TAG_PATTERNS:
        match = pattern.search(text)
        if not match:
            continue

        content = match.group(1) if match.groups() else None
        if action == RouterAction.THINK:
            prompt = content.strip() if content and content.strip() else original_prompt
        else:
            prompt = content or ""

        return TagMatch(action=action, prompt=prompt, raw=match.group(0))

    return None


def strip_tag(text: str, tag: TagMatch) -> str:
    """Remove the first occurrence of the tag from the response text."""
    return text.replace(tag.raw, "", 1)
