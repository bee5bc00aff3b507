"""Configuration management using Pydantic Settings."""

from pydantic import Field, SecretStr
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Settings from environment variables (``AZDO_*``) or a ``.env`` file."""

    model_config = SettingsConfigDict(
        case_sensitive=False,
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="AZDO_",
        env_nested_delimiter="__",
        extra="ignore",
    )

    # Azure DevOps API Client Configuration
    org_service_url: str = Field(
        default="",
        description="Azure DevOps organization URL (e.g., https://dev.azure.com/my-org)",
    )
    personal_access_token: SecretStr = Field(
        default=SecretStr(""),
        description="Azure DevOps personal access token",
    )
    api_timeout: int = Field(
        default=30,
        description="Azure DevOps API timeout in seconds",
    )
    api_max_retries: int = Field(
        default=3,
        description="Transport level retries of the Azure DevOps SDK client",
    )

    # Resource lifecycle
    file_push_timeout: float = Field(
        default=60.0,
        description="Deadline in seconds for retrying file pushes that lost a race "
        "against another client",
    )

    # Logging
    log_level: str = Field(
        default="INFO",
        description="Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)",
    )
    log_format_json: bool = Field(
        default=True,
        description="Render logs as JSON; set to false for human readable output",
    )


settings = Settings()
