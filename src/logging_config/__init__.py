"""Structured logging for the floating notification pipeline.

Provides JSON or console log output and session-scoped context binding.
"""

from src.logging_config.config import LogFormat, LoggingConfig, LogLevel
from src.logging_config.context import SessionContext, generate_session_id
from src.logging_config.setup import configure_logging, get_logger

__all__ = [
    "LogFormat",
    "LogLevel",
    "LoggingConfig",
    "SessionContext",
    "configure_logging",
    "generate_session_id",
    "get_logger",
]
