"""Runtime configuration.

Settings are read from the environment (and an optional ``.env`` file).
Names are case-insensitive, so ``MAX_DAILY_INTERVIEWS`` populates
``max_daily_interviews``.
"""

from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict

# Sessions expire 24 hours after creation; not configurable.
SESSION_TTL_SECONDS = 24 * 60 * 60


class Settings(BaseSettings):
    # ---------- Language model ---------------------------------------- #
    ai_provider: str = "openai"
    openai_api_key: str = ""
    openai_base_url: str | None = None
    ai_interview_model: str = "gpt-4o-mini"
    ai_generation_model: str = "gpt-4o"
    provider_timeout_seconds: float = 30.0

    # ---------- Interview limits -------------------------------------- #
    max_daily_interviews: int = 3
    max_messages_per_session: int = 8

    # ---------- Storage ----------------------------------------------- #
    session_store: str = "memory"
    sqlite_path: str = "./friendlines.db"

    # ---------- HTTP -------------------------------------------------- #
    allowed_origins: str = "http://localhost:8081,http://localhost:19006"

    # ---------- Logging ----------------------------------------------- #
    log_level: str = "INFO"
    log_format: str = "console"

    model_config = SettingsConfigDict(env_file=".env", case_sensitive=False, extra="ignore")


@lru_cache
def get_settings() -> Settings:
    return Settings()
