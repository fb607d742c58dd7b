"""Application settings loaded from environment variables."""

import os

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


def _env_file() -> str | None:
    if os.getenv("PYTEST_CURRENT_TEST"):
        return None
    return ".env"


class Settings(BaseSettings):
    """Bridge configuration. All values come from environment variables."""

    # Memphora API
    memphora_api_key: str = Field(default="")
    memphora_api_url: str = Field(default="https://api.memphora.ai/api/v1")
    memphora_timeout_seconds: float = Field(default=20.0)

    # Identity
    default_user_id: str = Field(default="zapier_user")
    integration_source: str = Field(default="zapier")

    # Retrieval
    search_default_limit: int = Field(default=5)
    context_default_limit: int = Field(default=10)
    poll_limit: int = Field(default=20)
    context_prefix: str = Field(default="Relevant context from previous conversations:")

    # HTTP server
    server_host: str = Field(default="0.0.0.0")
    server_port: int = Field(default=8443)
    action_secret: str = Field(default="")

    # Logging
    log_level: str = Field(default="INFO")

    model_config = SettingsConfigDict(env_file=_env_file(), env_file_encoding="utf-8")

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings,
        env_settings,
        dotenv_settings,
        file_secret_settings,
    ):
        if os.getenv("PYTEST_CURRENT_TEST"):
            return (init_settings,)
        return (init_settings, env_settings, dotenv_settings, file_secret_settings)

    def resolve_user_id(self, *candidates: str | None) -> str:
        """Return the first non-blank candidate, falling back to DEFAULT_USER_ID."""
        for candidate in candidates:
            if candidate and candidate.strip():
                return candidate.strip()
        return self.default_user_id


settings = Settings()
