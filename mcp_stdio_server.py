#!/usr/bin/env python3
"""
MCP Server (stdio) - Chat with Bubble from any MCP client.

Exposes the autonomous agent as a single MCP tool over the standard
stdio transport, so desktop assistants and IDEs can hand a prompt to
Bubble and get the final message back (including mode hand-offs such
as web search or image generation).

Add to an MCP client config:
    {
      "mcpServers": {
        "bubble": {
          "command": "bubble-mcp"
        }
      }
    }

Tool: chat_with_bubble
  - Runs one chat turn for a user (memory is loaded per user)
  - Returns the stored message record as JSON
"""

import asyncio
import logging
import sys
from datetime import datetime
from typing import Any

from mcp.server import Server
from mcp.server.stdio import stdio_server
from mcp.types import TextContent, Tool
from pydantic import BaseModel, Field, ValidationError

from app.agents.base import AgentInput
from app.api.middleware.error_handler import PersistenceError
from app.core.config import get_settings
from app.core.dependencies import get_agent, get_database_service

# Configure logging to stderr (stdout is for MCP protocol)
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    stream=sys.stderr,
)
logger = logging.getLogger("bubble_mcp")


TOOL_NAME = "chat_with_bubble"


# =============================================================================
# INPUT/OUTPUT SCHEMAS
# =============================================================================


class ChatInput(BaseModel):
    prompt: str = Field(..., description="Message for Bubble", min_length=1)
    user_id: str = Field(..., description="User whose memory and quota apply", min_length=1)
    project_id: str | None = Field(None, description="Project the chat belongs to")
    chat_id: str | None = Field(None, description="Chat the message belongs to")


class ChatOutput(BaseModel):
    success: bool = Field(..., description="Whether the turn completed")
    messages: list[dict[str, Any]] = Field(default_factory=list)
    error: str | None = Field(None, description="Error message if the input was invalid")
    duration_seconds: float | None = None


# =============================================================================
# MCP SERVER IMPLEMENTATION
# =============================================================================


def create_mcp_server() -> Server:
    """Create and configure the MCP server."""
    server = Server("bubble")

    @server.list_tools()
    async def list_tools() -> list[Tool]:
        return [
            Tool(
                name=TOOL_NAME,
                description="""Send a message to Bubble, a Gemini-powered companion with memory.

Bubble answers directly, or switches itself into a tool mode when needed:
web search, deep research, extended thinking, image generation, single-file
code (canvas), project structure or study plan.

Returns: JSON with the final message record (text, and where relevant
imageStatus/image_base64 and groundingMetadata citations).""",
                inputSchema={
                    "type": "object",
                    "properties": {
                        "prompt": {
                            "type": "string",
                            "description": "Message for Bubble"
                        },
                        "user_id": {
                            "type": "string",
                            "description": "User whose memory and quota apply"
                        },
                        "project_id": {
                            "type": "string",
                            "description": "Project the chat belongs to"
                        },
                        "chat_id": {
                            "type": "string",
                            "description": "Chat the message belongs to"
                        }
                    },
                    "required": ["prompt", "user_id"]
                }
            )
        ]

    @server.call_tool()
    async def call_tool(name: str, arguments: dict[str, Any]) -> list[TextContent]:
        if name != TOOL_NAME:
            raise ValueError(f"Unknown tool: {name}")
        return await handle_chat(arguments)

    return server


async def handle_chat(arguments: dict[str, Any]) -> list[TextContent]:
    """Handle the chat_with_bubble tool call."""
    start_time = datetime.utcnow()

    try:
        input_data = ChatInput(**arguments)
    except ValidationError as e:
        output = ChatOutput(success=False, error=f"Invalid input: {e.errors()}")
        return [TextContent(type="text", text=output.model_dump_json(indent=2))]

    logger.info(f"Chat turn for user {input_data.user_id}: {input_data.prompt[:100]}")

    agent = await get_agent()
    database = await get_database_service()
    try:
        profile = await database.get_profile(input_data.user_id)
    except PersistenceError as e:
        logger.warning(f"Profile unavailable: {e.message}")
        profile = None

    result = await agent.run(AgentInput(
        prompt=input_data.prompt,
        user_id=input_data.user_id,
        project_id=input_data.project_id,
        chat_id=input_data.chat_id,
        profile=profile,
    ))

    duration = (datetime.utcnow() - start_time).total_seconds()
    output = ChatOutput(
        success=True,
        messages=[record.to_storage() for record in result.messages],
        duration_seconds=round(duration, 2),
    )
    logger.info(f"Chat turn finished in {duration:.2f}s")

    return [TextContent(type="text", text=output.model_dump_json(indent=2))]


# =============================================================================
# MAIN ENTRY POINT
# =============================================================================


async def main():
    """Main async entry point for the MCP server."""
    settings = get_settings()

    logger.info(f"Starting {settings.app_name} MCP Server v{settings.app_version}")
    logger.info(f"Chat model: {settings.chat_model}")

    server = create_mcp_server()

    logger.info("MCP Server ready, waiting for connections...")

    async with stdio_server() as (read_stream, write_stream):
        await server.run(
            read_stream,
            write_stream,
            server.create_initialization_options()
        )


def run():
    """Synchronous entry point for console script."""
    asyncio.run(main())


if __name__ == "__main__":
    run()
