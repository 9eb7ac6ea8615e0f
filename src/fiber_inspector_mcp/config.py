"""Configuration management for the fiber inspector MCP server."""

import logging
import sys
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from .models import EngineConfiguration


class ServerConfig(BaseSettings):
    """Server settings, read from FIBER_INSPECTOR_* environment variables or .env."""

    model_config = SettingsConfigDict(
        env_prefix="FIBER_INSPECTOR_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    hook_path: str | None = Field(
        None, description="module:attribute locating the debug hook for auto-attach"
    )
    target_url: str | None = Field(None, description="Fallback URL reported by detection")
    target_title: str | None = Field(None, description="Fallback title reported by detection")

    default_max_depth: int = Field(20, ge=0)
    default_max_results: int = Field(20, ge=1)

    transport: Literal["stdio", "sse", "http"] = "stdio"
    host: str = "127.0.0.1"
    port: int = Field(8765, ge=1, le=65535)

    log_level: str = "INFO"

    def get_engine_config(self) -> EngineConfiguration:
        """Build the engine configuration from server settings."""
        return EngineConfiguration(
            default_max_depth=self.default_max_depth,
            default_max_results=self.default_max_results,
            target_url=self.target_url,
            target_title=self.target_title,
        )


def setup_logging(level: str = "INFO") -> None:
    """Route stdlib logging to stderr (stdout belongs to the stdio transport)."""
    root = logging.getLogger()
    root.setLevel(getattr(logging, level.upper(), logging.INFO))

    has_console = any(
        isinstance(h, logging.StreamHandler) and getattr(h, "stream", None) is sys.stderr
        for h in root.handlers
    )
    if not has_console:
        handler = logging.StreamHandler(sys.stderr)
        handler.setFormatter(logging.Formatter("%(asctime)s - %(name)s - %(levelname)s - %(message)s"))
        root.addHandler(handler)

    # fastmcp pulls in httpx for its HTTP transports
    logging.getLogger("httpx").setLevel(logging.WARNING)
