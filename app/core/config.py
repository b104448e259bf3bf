"""
Application Configuration - Environment settings and constants.

Loads configuration from environment variables with sensible defaults.
Uses Pydantic Settings for validation and type safety.

Only the Gemini API key is required to chat. Supabase is optional: without
it the agent runs with an empty memory and nothing is persisted.
"""

from typing import List
from pydantic_settings import BaseSettings
from functools import lru_cache


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    Usage:
        from app.core.config import get_settings
        settings = get_settings()
    """

    # Application
    app_name: str = "Bubble Agent"
    app_version: str = "1.0.0"
    debug: bool = False
    environment: str = "development"
    log_level: str = "INFO"

    # HTTP Server Configuration
    server_host: str = "0.0.0.0"
    server_port: int = 8000
    api_prefix: str = "/api/v1"
    allowed_origins: List[str] = ["*"]

    # Gemini Configuration
    gemini_api_key: str = ""
    chat_model: str = "gemini-2.0-flash-exp"
    search_model: str = "gemini-2.0-flash-exp"
    study_model: str = "gemini-2.0-flash-exp"
    thinking_model: str = "gemini-2.0-flash-thinking-exp-1219"
    canvas_model: str = "gemini-2.5-flash-exp"
    project_model: str = "gemini-2.5-flash-exp"
    research_model: str = "gemini-2.0-flash-exp"
    image_model: str = "imagen-3.0-generate-002"

    # Supabase Configuration
    supabase_url: str = ""
    supabase_key: str = ""
    memories_table: str = "memories"
    messages_table: str = "messages"
    profiles_table: str = "profiles"
    thinking_count_rpc: str = "increment_thinking_count"

    # Agent Configuration
    max_hops: int = 2  # SIMPLE plus one tag-triggered mode
    memory_topic_threshold: int = 50
    research_max_queries: int = 3

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        case_sensitive = False

    @property
    def supabase_configured(self) -> bool:
        return bool(self.supabase_url and self.supabase_key)


@lru_cache()
def get_settings() -> Settings:
    """
    Get cached settings instance.

    Uses lru_cache to ensure settings are only loaded once.
    """
    return Settings()


# Convenience access
settings = get_settings()
