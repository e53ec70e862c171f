"""Runtime configuration for the MobSF MCP server."""

import os
from collections.abc import Mapping

from pydantic import BaseModel, Field

from .exceptions import InvalidConfigError, MissingConfigError

DEFAULT_TIMEOUT = 30.0


class Settings(BaseModel):
    """Process-wide settings, read once at startup."""

    mobsf_url: str = Field(..., description="Base URL of the MobSF instance")
    api_key: str = Field(..., description="MobSF REST API key")
    timeout: float = Field(
        default=DEFAULT_TIMEOUT, description="Per-request timeout in seconds"
    )
    log_level: str = Field(default="INFO", description="Log level for stderr logging")
    log_file: str | None = Field(
        default=None, description="Optional file for structured tool-call logs"
    )

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> "Settings":
        env = os.environ if environ is None else environ

        mobsf_url = env.get("MOBSF_URL")
        if not mobsf_url:
            raise MissingConfigError("MOBSF_URL environment variable not set")

        api_key = env.get("MOBSF_API_KEY")
        if not api_key:
            raise MissingConfigError("MOBSF_API_KEY environment variable not set")

        raw_timeout = env.get("MOBSF_TIMEOUT")
        try:
            timeout = float(raw_timeout) if raw_timeout else DEFAULT_TIMEOUT
        except ValueError as e:
            raise InvalidConfigError(
                f"MOBSF_TIMEOUT must be a number of seconds, got {raw_timeout!r}"
            ) from e

        return cls(
            mobsf_url=mobsf_url,
            api_key=api_key,
            timeout=timeout,
            log_level=env.get("MOBSF_MCP_LOG_LEVEL", "INFO"),
            log_file=env.get("MOBSF_MCP_LOG_FILE") or None,
        )
