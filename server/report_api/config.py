from pydantic_settings import BaseSettings, SettingsConfigDict
from pathlib import Path

BASE_DIR = Path(__file__).resolve().parents[2]  # project root


class Settings(BaseSettings):
    # Logging
    LOG_LEVEL: str = "INFO"  # INFO | DEBUG | WARNING | ERROR
    DEBUG: bool = False  # when True, forces DEBUG level
    LOG_FILE: str = ""  # empty = console only (serverless FS is read-only)

    # Upstream (OpenAI Responses API)
    OPENAI_API_KEY: str | None = None
    OPENAI_MODEL: str = "gpt-4.1-mini"
    OPENAI_BASE_URL: str | None = None

    # Reports
    DEFAULT_MODE: str = "tendencias_lilly_mx"

    # Output token budgets per mode; tune empirically
    MAX_TOKENS_TENDENCIAS_LILLY_MX: int = 2600
    MAX_TOKENS_CONDUCTA_LILLY_MX: int = 2200
    MAX_TOKENS_TENDENCIAS: int = 650
    DEFAULT_MAX_TOKENS: int = 1100  # used when a mode budget is 0

    model_config = SettingsConfigDict(
        env_file=str(BASE_DIR / "server" / ".env"),
        env_file_encoding="utf-8",
        extra="ignore",
    )


settings = Settings()
