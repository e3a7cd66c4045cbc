"""
Application configuration via pydantic-settings.

Loads values from .env file with sensible defaults for local development.
Use ``get_settings()`` to obtain the cached singleton instance.
"""

from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Speak Ika settings loaded from environment / .env file.

    All settings can be overridden via environment variables or a `.env` file.
    Field names map directly to env var names (case-insensitive).

    Attributes:
        database_url: Async SQLAlchemy connection string.
        database_auth_token: Token for hosted libSQL databases (Turso).
        transcription_provider: Workbench transcriber ("mock", "http", "whisper").
        speech_transcriber: Provider behind ``POST /api/transcribe`` ("mock", "http", "whisper").
        mock_transcription_delay: Seconds the mock transcriber waits before answering.
        app_host: Bind address used by the ``speakika-api`` entry point.
        app_port: Port used by the ``speakika-api`` entry point.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",  # Silently ignore unrecognized env vars
    )

    # --- Storage ---
    database_url: str = "sqlite+aiosqlite:///data/speakika.db"
    database_auth_token: str = ""  # Only sent when non-empty
    create_tables_on_startup: bool = True

    # --- Transcription ---
    # "mock" returns canned sentence pairs, "http" calls a speech endpoint,
    # "whisper" runs faster-whisper locally
    transcription_provider: str = "mock"
    speech_transcriber: str = "whisper"  # Backs POST /api/transcribe
    mock_transcription_delay: float = 1.5
    speech_api_url: str = "http://localhost:8000"
    speech_api_timeout: float = 30.0
    whisper_model: str = "base"  # Model size: tiny, base, small, medium, large-v3
    whisper_device: str = "cpu"
    whisper_compute_type: str = "int8"
    source_language_code: str = "ika"

    # --- Audio workbench ---
    playable_dir: str = ""  # Empty = system temp directory

    # --- Application ---
    app_host: str = "0.0.0.0"  # Bind address for the FastAPI server
    app_port: int = 8000
    log_level: str = "INFO"  # Python logging level
    cors_origins: list[str] = [
        "http://localhost:8501",  # Streamlit
        "http://localhost:3000",  # Dev frontend
    ]


@lru_cache
def get_settings() -> Settings:
    """Return a cached Settings singleton.

    Uses ``functools.lru_cache`` so the .env file is read only once.
    Subsequent calls return the same ``Settings`` instance.

    Returns:
        Settings: The application-wide configuration object.
    """
    return Settings()
