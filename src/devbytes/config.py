"""Configuration management for devbytes."""

from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings with environment variable overrides.

    All settings can be overridden via environment variables
    prefixed with DEVBYTES_ (e.g. DEVBYTES_DATA_DIR, DEVBYTES_PLAYLIST_URL).
    """

    model_config = {"env_prefix": "DEVBYTES_"}

    # Storage
    data_dir: Path = Field(
        default_factory=lambda: Path.home() / ".devbytes",
        description="Root directory for the offline cache",
    )

    # Network
    playlist_url: str = "https://android-kotlin-fun-mars-server.appspot.com/devbytes"
    request_timeout: float = 30.0  # seconds

    # Background refresh
    refresh_interval: float = 24 * 60 * 60  # seconds between successful refreshes
    refresh_max_retries: int = 3
    retry_base_delay: float = 1.0  # seconds, doubled on each retry

    # Server
    host: str = "127.0.0.1"
    port: int = 9094

    @property
    def db_path(self) -> Path:
        """SQLite database path."""
        return self.data_dir / "videos.db"

    def ensure_dirs(self) -> None:
        """Create the data directory if it doesn't exist."""
        self.data_dir.mkdir(parents=True, exist_ok=True)


# Module-level singleton — import this throughout the app
settings = Settings()
