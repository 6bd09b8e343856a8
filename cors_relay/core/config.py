from typing import Literal

from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings, SettingsConfigDict

class AppSettings(BaseSettings):
    app_name: str = "CORS-Relay"
    version: str = "0.1.0"
    debug: bool = False
    host: str = "0.0.0.0"
    port: int = Field(default=8787, validation_alias=AliasChoices("RELAY_PORT", "PORT"))

    # Fake upstream
    fake_upstream_host: str = "0.0.0.0"
    fake_upstream_port: int = 8788

    # Logging
    log_level: str = "INFO"

    # CORS: "wildcard" answers every origin with "*", "allowlist" only echoes allowed_origins
    cors_mode: Literal["wildcard", "allowlist"] = "wildcard"
    allowed_origins: list[str] = Field(default_factory=list)  # JSON list in env
    cors_allow_authorization: bool = True

    # Chat relay
    openai_api_key: str | None = Field(
        default=None,
        validation_alias=AliasChoices("RELAY_OPENAI_API_KEY", "OPENAI_API_KEY"),
    )
    chat_upstream_url: str = "https://api.openai.com/v1/chat/completions"
    chat_default_model: str = "gpt-4o-mini"
    chat_default_max_tokens: int = 800
    chat_default_temperature: float = 0.2
    chat_max_body_bytes: int = 8 * 1024 * 1024

    # Fetch relay
    fetch_user_agent: str = "Mozilla/5.0 (LocalFetcher)"
    fetch_max_bytes: int = 25 * 1024 * 1024

    # Upstream client
    upstream_connect_timeout: float = 10.0
    upstream_read_timeout: float = 60.0
    upstream_write_timeout: float = 30.0
    upstream_pool_timeout: float = 10.0
    max_connections: int = 100
    max_keepalive_connections: int = 20

    model_config = SettingsConfigDict(
        env_prefix="RELAY_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        populate_by_name=True,
        frozen=True,
    )

# Load settings
settings = AppSettings()
