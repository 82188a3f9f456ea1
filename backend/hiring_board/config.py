"""Board configuration, loaded from HIRING_BOARD_* env vars or .env."""

from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    # Recruiting backend
    api_url: str = "http://localhost:5000/api"
    api_token: str = ""
    request_timeout: int = 10

    # Board behaviour
    refresh_interval: float = 30.0  # seconds between background reloads, 0 disables
    bulk_concurrency: int = 4
    lock_terminal_stages: bool = False  # refuse drags out of hired/rejected
    drag_note: str = "Status updated via Kanban board"
    company_name: str = "Our Company"

    log_level: str = "INFO"

    model_config = SettingsConfigDict(
        env_prefix="HIRING_BOARD_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )


@lru_cache()
def get_settings() -> Settings:
    return Settings()
