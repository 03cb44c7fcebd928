"""Logging utilities for azdocgen runs."""

from __future__ import annotations

import logging
import os
from pathlib import Path

_LOGGER_NAME = "azdocgen"

_WORKFLOW_COMMANDS = {
    logging.DEBUG: "debug",
    logging.WARNING: "warning",
    logging.ERROR: "error",
    logging.CRITICAL: "error",
}


class WorkflowCommandFormatter(logging.Formatter):
    """Render records as GitHub Actions workflow commands."""

    def format(self, record: logging.LogRecord) -> str:
        message = super().format(record)
        command = _WORKFLOW_COMMANDS.get(record.levelno)
        if command is None:
            return message
        # Workflow commands are single-line; GitHub decodes %0A back to newlines.
        escaped = message.replace("%", "%25").replace("\r", "%0D").replace("\n", "%0A")
        return f"::{command}::{escaped}"


def get_logger(name: str | None = None) -> logging.Logger:
    """Return a module-scoped logger under the azdocgen hierarchy."""
    full_name = f"{_LOGGER_NAME}.{name}" if name else _LOGGER_NAME
    return logging.getLogger(full_name)


def running_in_actions() -> bool:
    return os.getenv("GITHUB_ACTIONS", "").lower() == "true"


def configure_logging(
    *,
    verbose: bool = False,
    log_file: Path | None = None,
    workflow_commands: bool | None = None,
) -> logging.Logger:
    """Configure the azdocgen logger with console output and optional file sink."""
    level = logging.DEBUG if verbose else logging.INFO
    logger = logging.getLogger(_LOGGER_NAME)
    logger.setLevel(level)
    logger.propagate = False

    # Reset handlers to avoid duplicate output when the CLI is invoked multiple times.
    for handler in list(logger.handlers):
        logger.removeHandler(handler)

    if workflow_commands is None:
        workflow_commands = running_in_actions()

    stream_handler = logging.StreamHandler()
    # debug records are always forwarded inside Actions; the runner hides them
    # unless step debug logging is enabled.
    stream_handler.setLevel(logging.DEBUG if workflow_commands else level)
    if workflow_commands:
        logger.setLevel(logging.DEBUG)
        stream_handler.setFormatter(WorkflowCommandFormatter("%(message)s"))
    else:
        stream_handler.setFormatter(logging.Formatter("[azdocgen] %(levelname)s %(message)s"))
    logger.addHandler(stream_handler)

    if log_file is not None:
        file_handler = logging.FileHandler(log_file, encoding="utf-8")
        file_handler.setLevel(level)
        file_handler.setFormatter(
            logging.Formatter("%(asctime)s %(levelname)s %(name)s: %(message)s")
        )
        logger.addHandler(file_handler)

    return logger


__all__ = ["WorkflowCommandFormatter", "configure_logging", "get_logger", "running_in_actions"]
