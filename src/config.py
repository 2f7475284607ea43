"""Application settings loaded from environment variables."""

import os

from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings, SettingsConfigDict


def _env_file() -> str | None:
    if os.getenv("PYTEST_CURRENT_TEST"):
        return None
    return ".env"


class Settings(BaseSettings):
    """SplashyBot configuration. All values come from environment variables."""

    # Conversational backend (Synthflow-compatible)
    backend_api_key: str = Field(
        default="",
        validation_alias=AliasChoices("backend_api_key", "synthflow_api_key"),
    )
    backend_agent_id: str = Field(
        default="",
        validation_alias=AliasChoices("backend_agent_id", "synthflow_agent_id"),
    )
    backend_api_url: str = Field(default="https://api.synthflow.ai/v2")
    backend_timeout_seconds: float = Field(default=12.0)

    # Sessions
    session_namespace: str = Field(default="splashybot")
    session_cache_size: int = Field(default=1024)
    session_cache_ttl_seconds: float = Field(default=3600.0)

    # HTTP server
    port: int = Field(default=10000)

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

    def is_backend_configured(self) -> bool:
        """True when both the API key and the agent id are set."""
        return bool(self.backend_api_key.strip() and self.backend_agent_id.strip())


settings = Settings()
