"""
Bubble Agent
============

A conversational agent that answers through Gemini and switches the model
into a different mode (web search, deep research, thinking, image, canvas,
project structure, study plan) when the model asks for it with an inline tag.

Components:
- agents: Router, tag detection, autonomous agent and its modes
- services: Gemini client, memory, database, research and image services
- api: FastAPI endpoints
- models: Pydantic data models
- core: Configuration and dependencies
"""

__version__ = "1.0.0"
