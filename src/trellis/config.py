"""Configuration management for the Trellis task service."""

from typing import Literal

from pydantic import Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="TRELLIS_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Server configuration
    environment: Literal["development", "staging", "production"] = Field(
        default="development",
        description="Runtime environment (development, staging, production)",
    )
    server_name: str = Field(default="trellis", description="MCP server name")
    server_host: str = Field(default="localhost", description="Server bind host")
    server_port: int = Field(default=3335, description="Server bind port")
    transport: Literal["streamable-http", "sse", "stdio"] = Field(
        default="streamable-http",
        description="MCP transport used by the daemon",
    )
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = Field(
        default="INFO",
        description="Logging level",
    )

    # FalkorDB configuration
    falkordb_host: str = Field(default="localhost", description="FalkorDB host")
    falkordb_port: int = Field(default=6380, description="FalkorDB port")
    falkordb_password: str = Field(default="trellis", description="FalkorDB password")
    falkordb_graph_name: str = Field(default="trellis", description="Graph name")

    # Task creation
    default_response_format: Literal["structured", "json"] = Field(
        default="structured",
        description="Response shape used when a request does not choose one",
    )
    max_bulk_tasks: int = Field(
        default=100,
        ge=1,
        le=1000,
        description="Maximum number of tasks accepted in one bulk request",
    )

    @model_validator(mode="after")
    def validate_security_settings(self) -> "Settings":
        """Prevent insecure settings in production."""
        if self.environment == "production" and self.falkordb_password == "trellis":  # noqa: S105
            raise ValueError(
                "CRITICAL: Default FalkorDB password 'trellis' is forbidden in production. "
                "Set TRELLIS_FALKORDB_PASSWORD to a secure value."
            )
        return self

    @property
    def falkordb_url(self) -> str:
        """Construct FalkorDB connection URL."""
        return f"redis://:{self.falkordb_password}@{self.falkordb_host}:{self.falkordb_port}"


# Global settings instance
settings = Settings()
