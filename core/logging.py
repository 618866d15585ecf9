"""
Logging configuration for the cadence player using eliot.

This module provides structured logging throughout the application using eliot,
which provides context-aware logging with support for nested actions
and structured data.
"""

import eliot
import logging
import sys
from eliot import log_message, write_traceback
from eliot.stdlib import EliotHandler
from pathlib import Path


class HumanReadableDestination:
    """Destination that formats logs in a human-readable format."""

    # Too noisy for a terminal; still written to the JSON log file
    skip_messages = {
        "queue_operation",
        "status_update",
    }

    def __init__(self, file):
        self.file = file

    def format(self, message: dict) -> str | None:
        """Return the display line for a message, or None to drop it."""
        # Skip internal eliot action start/finish messages
        if message.get("action_type") and not message.get("message_type"):
            return None

        msg_type = message.get("message_type", "")
        if msg_type in self.skip_messages:
            return None

        action = message.get("action", msg_type)
        description = message.get("description", "")
        trigger = message.get("trigger_source", "")

        if msg_type == "player_action":
            if not trigger:
                return None
            track = message.get("track", "")
            old_state = message.get("old_state", "")
            new_state = message.get("new_state", "")
            if track and old_state and new_state:
                return f"[{trigger.upper()}] {action}: {track} ({old_state} → {new_state})"
            if track:
                return f"[{trigger.upper()}] {action}: {track}"
            if description:
                return f"[{trigger.upper()}] {description}"
            return f"[{trigger.upper()}] {action}"

        if msg_type == "api_request":
            output = f"[API] {action}"
            if description:
                output += f": {description}"
            return output

        if msg_type == "error_occurred":
            return f"[ERROR] {message.get('error_type', '')}: {message.get('error_message', '')}"

        if description:
            return description
        if "message" in message:
            return message["message"]
        return None

    def __call__(self, message):
        output = self.format(message)
        if output and output.strip():
            self.file.write(output + "\n")
            self.file.flush()


def setup_logging(log_level: str = "INFO", log_file: str | None = None) -> None:
    """
    Set up eliot logging for the application.

    Args:
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        log_file: Optional file path to write logs to (always logs to stdout as well)
    """
    eliot.add_destinations(HumanReadableDestination(sys.stdout))

    # Raw JSON for machine parsing
    if log_file:
        log_path = Path(log_file)
        log_path.parent.mkdir(parents=True, exist_ok=True)
        eliot.to_file(open(log_path, "a"))

    # Route stdlib logging (uvicorn, fastapi) through eliot
    logger = logging.getLogger()
    logger.setLevel(getattr(logging, log_level.upper(), logging.INFO))
    logger.addHandler(EliotHandler())

    log_message(
        message_type="logging_setup", log_level=log_level, log_file=log_file or "stdout", message="Eliot logging configured"
    )


def get_logger(name: str) -> eliot.Logger:
    """
    Get an eliot logger instance for a specific component.

    The returned Logger is meant for start_action() contexts; use the
    log_* helpers below for individual messages.
    """
    return eliot.Logger()


# Global logger instances for different components
app_logger = get_logger("cadence_app")
player_logger = get_logger("cadence_player")
queue_logger = get_logger("cadence_queue")
controls_logger = get_logger("cadence_controls")
db_logger = get_logger("cadence_database")


def log_player_action(action: str, **context):
    """
    Log player actions with context.

    Args:
        action: Player action (play, pause, next, previous, etc.)
        **context: Additional context data
    """
    log_message(message_type="player_action", action=action, **context)


def log_queue_operation(operation: str, **context):
    """
    Log queue operations with context.

    Args:
        operation: Queue operation (replace, append, shuffle, etc.)
        **context: Additional context data
    """
    log_message(message_type="queue_operation", operation=operation, **context)


def log_database_operation(operation: str, table: str | None = None, **context):
    """Log database operations with context."""
    log_message(message_type="database_operation", operation=operation, table=table, **context)


def log_api_request(action: str, trigger_source: str = "api", **context):
    """
    Log API requests with context.

    Args:
        action: API action being performed
        trigger_source: Source of the request (default: "api")
        **context: Additional context data (request parameters, response, etc.)
    """
    log_message(message_type="api_request", action=action, trigger_source=trigger_source, **context)


def log_error(logger: eliot.Logger, error: Exception, **context):
    """
    Log errors with full context, and the traceback when one is being handled.
    """
    exc_info = sys.exc_info()
    if exc_info[0] is not None:
        write_traceback(logger, exc_info=exc_info)
    log_message(message_type="error_occurred", error_message=str(error), error_type=type(error).__name__, **context)
