"""
Semantic Router - Initial routing decision for a query.

Every query starts in SIMPLE mode: the chat model itself decides when a
tool is needed by emitting a tag (see app.agents.tags). The router still
decides which memory layers to load, and it loads all of them so names
and preferences are always available.
"""

import logging

from app.models.schemas import ALL_MEMORY_LAYERS, RouterAction, RoutingDecision

logger = logging.getLogger(__name__)


class SemanticRouter:
    """Produces the starting RoutingDecision for an agent run."""

    async def route(
        self,
        query: str,
        user_id: str,
        file_count: int = 0
    ) -> RoutingDecision:
        """
        Route a query.

        Args:
            query: The user's prompt
            user_id: User the query belongs to
            file_count: Number of attached files

        Returns:
            A SIMPLE decision that loads every memory layer
        """
        logger.debug(f"Routing query for user {user_id} ({file_count} files)")
        return RoutingDecision(
            action=RouterAction.SIMPLE,
            parameters={},
            confidence=1.0,
            memory_layers=list(ALL_MEMORY_LAYERS),
            quota_ok=True,
            reasoning="Defaulting to conversation. Tags will trigger specific actions.",
        )
