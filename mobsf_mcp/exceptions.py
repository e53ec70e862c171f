"""Exception hierarchy for the MobSF MCP server.

Startup problems surface as configuration errors and stop the process.
Backend problems surface as client errors and fail a single tool call.
"""


class MobSFMCPError(Exception):
    """Base exception for all mobsf-mcp errors."""
    pass


# =============================================================================
# Configuration Errors
# =============================================================================

class ConfigurationError(MobSFMCPError):
    """Base exception for configuration errors."""
    pass


class MissingConfigError(ConfigurationError):
    """Required configuration is missing."""
    pass


class InvalidConfigError(ConfigurationError):
    """Configuration value is present but unusable."""
    pass


# =============================================================================
# Client Errors (API/Network)
# =============================================================================

class ClientError(MobSFMCPError):
    """Base exception for backend client errors."""
    pass


class MobSFAPIError(ClientError):
    """Error returned by the MobSF REST API or raised while reaching it."""

    def __init__(self, message: str, status_code: int | None = None, response_body: str | None = None):
        super().__init__(message)
        self.status_code = status_code
        self.response_body = response_body


__all__ = [
    "MobSFMCPError",
    "ConfigurationError",
    "MissingConfigError",
    "InvalidConfigError",
    "ClientError",
    "MobSFAPIError",
]
