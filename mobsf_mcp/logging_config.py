"""
Logging configuration for the MobSF MCP server.

All output goes to stderr because stdout carries the JSON-RPC stream. Tool
calls are additionally logged as structured JSON records on a dedicated
logger, optionally mirrored to a rotating file.
"""

import json
import logging
import sys
from logging.handlers import TimedRotatingFileHandler
from typing import Any

TOOL_CALL_LOGGER = "mobsf_mcp.tool_calls"


class ToolCallFormatter(logging.Formatter):
    """Render tool-call records as one JSON object per line."""

    def format(self, record: logging.LogRecord) -> str:
        log_entry: dict[str, Any] = {
            "timestamp": self.formatTime(record),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }

        for field in ["event", "tool", "status", "arguments", "error"]:
            if hasattr(record, field):
                log_entry[field] = getattr(record, field)

        return json.dumps(log_entry)


def configure_logging(log_level: str = "INFO") -> None:
    """Send application logs to stderr."""
    logging.basicConfig(
        level=getattr(logging, log_level.upper(), logging.INFO),
        format="[%(asctime)s] %(name)s %(levelname)s: %(message)s",
        datefmt="%H:%M:%S",
        stream=sys.stderr,
    )


def configure_tool_logging(
    log_file: str | None = None,
    log_level: str = "INFO",
    enable_console: bool = True,
) -> None:
    """
    Configure the structured tool-call logger.

    Args:
        log_file: Path to a log file for tool calls (optional)
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR)
        enable_console: Whether to also log to stderr
    """
    logger = logging.getLogger(TOOL_CALL_LOGGER)
    logger.setLevel(getattr(logging, log_level.upper(), logging.INFO))
    logger.propagate = False

    logger.handlers.clear()

    formatter = ToolCallFormatter()

    if log_file:
        file_handler = TimedRotatingFileHandler(
            log_file,
            when="H",
            interval=1,
            backupCount=168,  # 7 days of hourly files
            encoding="utf-8",
            utc=False,
        )
        file_handler.suffix = "%Y%m%d_%H%M%S.log"
        file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)

    if enable_console:
        console_handler = logging.StreamHandler(sys.stderr)
        console_handler.setFormatter(formatter)
        logger.addHandler(console_handler)


def get_tool_logger() -> logging.Logger:
    """Get the tool-call logger."""
    return logging.getLogger(TOOL_CALL_LOGGER)
