import os
from pathlib import Path

from dotenv import load_dotenv
from pydantic import AliasChoices, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_API_URL = "http://localhost:8001/api"
DEFAULT_SHARE_MESSAGE = "I would like to discuss my order. Thank you!"

# Project root (parent of bibocom/) - used so .env is found regardless of cwd
_PROJECT_ROOT = Path(__file__).resolve().parent.parent

# Explicitly load .env into os.environ so it works in tests and subprocesses
load_dotenv(_PROJECT_ROOT / ".env")


class Settings(BaseSettings):
    app_name: str = "bibocom-client"
    environment: str = Field(
        default="development",
        validation_alias=AliasChoices("environment", "ENV", "ENVIRONMENT"),
    )
    api_url: str = Field(
        default=DEFAULT_API_URL,
        validation_alias=AliasChoices("api_url", "API_URL", "VITE_API_URL"),
    )
    log_level: str = Field(default="INFO", json_schema_extra={"env": "LOG_LEVEL"})
    request_timeout_seconds: float = Field(
        default=30, gt=0, json_schema_extra={"env": "REQUEST_TIMEOUT_SECONDS"}
    )
    session_file: str = Field(
        default=os.path.join("~", ".bibocom", "session.json"),
        json_schema_extra={"env": "SESSION_FILE"},
    )

    # Badge / conversation polling
    poll_interval_seconds: float = Field(
        default=30, ge=1, json_schema_extra={"env": "POLL_INTERVAL_SECONDS"}
    )

    # Messaging
    media_max_bytes: int = Field(
        default=10 * 1024 * 1024, gt=0, json_schema_extra={"env": "MEDIA_MAX_BYTES"}
    )

    # Cart
    share_message: str = Field(
        default=DEFAULT_SHARE_MESSAGE, json_schema_extra={"env": "SHARE_MESSAGE"}
    )

    model_config = SettingsConfigDict(
        env_file=str(_PROJECT_ROOT / ".env"),
        env_file_encoding="utf-8",
        extra="allow",  # Allow extra environment variables
    )

    @field_validator("api_url")
    @classmethod
    def strip_trailing_slash(cls, value: str) -> str:
        """Paths are joined with a leading slash, so the base never ends with one."""
        return value.rstrip("/")

    @property
    def is_production(self) -> bool:
        """Check if the current environment is production."""
        return self.environment.lower() == "production"

    @property
    def is_test(self) -> bool:
        """Check if the current environment is test."""
        return self.environment.lower() == "test"

    @property
    def session_path(self) -> Path:
        """Return the session file as an absolute path (``~`` expanded)."""
        return Path(self.session_file).expanduser()


def get_settings() -> Settings:
    """Get application settings from the environment."""
    return Settings()
