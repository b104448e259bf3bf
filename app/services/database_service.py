"""
Database Service - Profiles, usage counters and message storage in Supabase.
"""

import logging
from typing import Any, List, Optional

from app.api.middleware.error_handler import PersistenceError
from app.models.schemas import MessageRecord, Profile

logger = logging.getLogger(__name__)


class DatabaseService:
    """
    Thin persistence layer over a supabase AsyncClient.

    Every operation is a no-op when Supabase is not configured.
    """

    def __init__(
        self,
        client: Optional[Any],
        messages_table: str = "messages",
        profiles_table: str = "profiles",
        thinking_count_rpc: str = "increment_thinking_count",
    ):
        self.client = client
        self.messages_table = messages_table
        self.profiles_table = profiles_table
        self.thinking_count_rpc = thinking_count_rpc

    async def increment_thinking_count(self, user_id: str) -> None:
        """Count one use of the thinking model against the user's quota."""
        if self.client is None:
            logger.debug("Supabase not configured, skipping thinking count")
            return
        try:
            await self.client.rpc(self.thinking_count_rpc, {"p_user_id": user_id}).execute()
        except Exception as e:
            raise PersistenceError(f"Failed to increment thinking count: {e}") from e

    async def get_profile(self, user_id: str) -> Optional[Profile]:
        """Load the user's profile, or None if there is none."""
        if self.client is None:
            return None
        try:
            response = await (
                self.client.table(self.profiles_table)
                .select("id,preferred_image_model")
                .eq("id", user_id)
                .limit(1)
                .execute()
            )
        except Exception as e:
            raise PersistenceError(f"Failed to load profile: {e}", table=self.profiles_table) from e

        if not response.data:
            return None
        return Profile(**response.data[0])

    async def save_messages(self, records: List[MessageRecord]) -> int:
        """
        Insert AI messages.

        memoryToCreate is not a message column; memories go through
        MemoryService.
        """
        if not records:
            return 0
        if self.client is None:
            logger.debug("Supabase not configured, skipping message save")
            return 0

        rows = []
        for record in records:
            row = record.to_storage()
            row.pop("memoryToCreate", None)
            rows.append(row)

        try:
            await self.client.table(self.messages_table).insert(rows).execute()
        except Exception as e:
            raise PersistenceError(f"Failed to save messages: {e}", table=self.messages_table) from e

        return len(rows)
