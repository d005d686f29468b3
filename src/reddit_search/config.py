"""Configuration loaded from environment variables."""
from pathlib import Path

from pydantic import Field, computed_field
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_STORAGE_PATH = Path.home() / ".local" / "share" / "reddit-search" / "storage.json"


class Settings(BaseSettings):
    """Search front-end configuration loaded from environment variables.

    Attributes:
        host: Bind address for the HTTP adapter.
        port: Port number for the HTTP adapter.
        debug: Enable debug logging and API documentation.
        cors_origins_raw: Raw comma-separated CORS origins string.
        shutdown_timeout: Seconds uvicorn waits for graceful shutdown.
        reddit_base_url: Base URL of the remote service.
        result_limit: Default number of results requested per page.
        user_agent: User-Agent header sent to the remote API.
        request_timeout: Seconds before a remote request times out.
        storage_path: Location of the local key-value storage file.
        max_sessions: Maximum number of live search sessions.
        session_idle_timeout: Seconds before an unused session expires.
        json_logs: Render log lines as JSON instead of console text.
    """

    model_config = SettingsConfigDict(
        env_prefix="REDDIT_SEARCH_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    host: str = "127.0.0.1"
    port: int = 8000
    debug: bool = False
    cors_origins_raw: str = ""
    shutdown_timeout: float = 30.0
    json_logs: bool = True

    reddit_base_url: str = "https://www.reddit.com"
    result_limit: int = Field(default=10, ge=1, le=100)
    user_agent: str = "reddit-search/0.1"
    request_timeout: float = 20.0

    storage_path: Path = DEFAULT_STORAGE_PATH
    max_sessions: int = 100
    session_idle_timeout: float = Field(default=1800.0, gt=0)

    @computed_field
    @property
    def cors_origins(self) -> list[str]:
        """Parse CORS origins from comma-separated string.

        Returns:
            List of allowed origin URLs.
        """
        return [
            origin.strip()
            for origin in self.cors_origins_raw.split(",")
            if origin.strip()
        ]
