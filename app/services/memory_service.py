"""
Memory Service - Layered per-user memory stored in Supabase.

RESPONSIBILITY:
Reads and writes the key/value facts the agent remembers about a user.
Facts are grouped into layers (inner_personal, preferences, codebase, ...)
and injected into prompts as a JSON blob under a [MEMORY] heading.

Table layout ("memories"):
    user_id | layer | key | value      unique on (user_id, layer, key)
"""

import logging
from typing import Any, Dict, Iterable, List, Optional

from app.api.middleware.error_handler import PersistenceError
from app.models.schemas import MemoryEntry, MemoryLayer

logger = logging.getLogger(__name__)


def _layer_value(layer: Any) -> str:
    return layer.value if isinstance(layer, MemoryLayer) else str(layer)


class MemoryService:
    """
    Supabase-backed memory store.

    Reads degrade to an empty context: a chat must still work when the
    memory backend is missing or failing. Writes raise PersistenceError.
    """

    def __init__(self, client: Optional[Any], table: str = "memories"):
        """
        Args:
            client: supabase AsyncClient, or None when Supabase is not configured
            table: Name of the memories table
        """
        self.client = client
        self.table = table

    async def get_context(
        self,
        user_id: str,
        layers: Iterable[Any]
    ) -> Dict[str, Dict[str, str]]:
        """
        Fetch memory grouped by layer.

        Returns:
            {"preferences": {"tone": "casual"}, "inner_personal": {"name": "Ada"}}
        """
        layer_names = [_layer_value(layer) for layer in layers]
        if self.client is None or not layer_names:
            return {}

        try:
            response = await (
                self.client.table(self.table)
                .select("layer,key,value")
                .eq("user_id", user_id)
                .in_("layer", layer_names)
                .execute()
            )
        except Exception as e:
            logger.warning(f"Memory fetch failed for user {user_id}: {e}")
            return {}

        context: Dict[str, Dict[str, str]] = {}
        for row in response.data or []:
            context.setdefault(row["layer"], {})[row["key"]] = row["value"]
        return context

    async def save(self, user_id: str, entries: List[MemoryEntry]) -> int:
        """
        Upsert memory entries for a user.

        Returns:
            Number of entries written (0 when Supabase is not configured)
        """
        if not entries:
            return 0
        if self.client is None:
            logger.debug("Supabase not configured, skipping memory save")
            return 0

        rows = [
            {
                "user_id": user_id,
                "layer": _layer_value(entry.layer),
                "key": entry.key,
                "value": entry.value,
            }
            for entry in entries
        ]
        try:
            await (
                self.client.table(self.table)
                .upsert(rows, on_conflict="user_id,layer,key")
                .execute()
            )
        except Exception as e:
            raise PersistenceError(f"Failed to save memory: {e}", table=self.table) from e

        logger.info(f"Saved {len(rows)} memory entries for user {user_id}")
        return len(rows)
