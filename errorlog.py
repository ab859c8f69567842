import json
import logging
import os

logger = logging.getLogger(__name__)


class ErrorLogError(ValueError):
    """The error log exists but does not hold a JSON array."""


def get_error_log_path():
    """
    Default: ~/.t_error
    You can override path via T_ERROR_LOG env var.
    """
    override = os.environ.get("T_ERROR_LOG")
    if override:
        return os.path.expanduser(override)

    return os.path.join(os.path.expanduser("~"), ".t_error")


def read_last_entry(path: str | None = None) -> dict | None:
    """
    Return the most recent command/error entry, or None when there is
    nothing to work with. The log is written by the shell hook; this
    module only reads it.
    """
    path = path or get_error_log_path()

    if not os.path.exists(path):
        logger.info("No error log at %s", path)
        return None

    try:
        with open(path, "r", encoding="utf-8") as f:
            data = f.read()
    except UnicodeDecodeError as e:
        raise ErrorLogError(f"Error log {path} is not valid UTF-8: {e}") from e

    if data.strip() == "":
        logger.error("File is empty.")
        return None

    try:
        entries = json.loads(data)
    except json.JSONDecodeError as e:
        raise ErrorLogError(f"Invalid error log {path}: {e}") from e

    if not isinstance(entries, list):
        raise ErrorLogError(f"Error log {path} is not a JSON array")

    if not entries:
        logger.error("Error log %s has no entries.", path)
        return None

    return entries[-1]
