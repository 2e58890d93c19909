"""
Application configuration using pydantic-settings.
Loads environment variables from .env file.

Nested config groups (OrchestratorConfig, FilesConfig, MigrationConfig) are
env-overridable via the double-underscore delimiter, e.g.:
    ORCHESTRATOR__MAX_FUNCTION_CALLS=3
    FILES__MAX_UPLOAD_BYTES=5242880
    MIGRATION__SQLITE_PATH=/data/encore.db
"""

from functools import lru_cache

from pydantic import BaseModel, Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class OrchestratorConfig(BaseModel):
    """Chat orchestration loop parameters."""

    model: str = "gpt-4o"
    temperature: float = 0.7
    max_tokens: int = 2000
    # Ceiling on function-call round trips per chat request
    max_function_calls: int = Field(default=5, ge=0)
    # Only the most recent prior turns are forwarded to the model
    max_history_turns: int = Field(default=40, ge=1)


class FilesConfig(BaseModel):
    """Chat attachment upload limits."""

    upload_dir: str = "uploads/chat"
    max_upload_bytes: int = 10 * 1024 * 1024


class MigrationConfig(BaseModel):
    """SQLite to PostgreSQL migration settings."""

    sqlite_path: str = "data/encore.db"
    batch_size: int = 500


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        env_nested_delimiter="__",
    )

    # API Keys
    openai_api_key: str

    # Supabase (PostgreSQL store for properties, rooms, inventory, labor rules)
    supabase_url: str = ""
    supabase_service_role_key: str = ""

    # LangSmith / Observability
    langsmith_api_key: str = ""
    langsmith_project: str = "eventav"
    langchain_tracing_v2: bool = False  # Explicit opt-in

    # App Settings
    debug: bool = False
    cors_origins: list[str] = ["http://localhost:3000"]

    # Nested config groups (env-overridable via SECTION__KEY format)
    orchestrator: OrchestratorConfig = Field(default_factory=OrchestratorConfig)
    files: FilesConfig = Field(default_factory=FilesConfig)
    migration: MigrationConfig = Field(default_factory=MigrationConfig)


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
