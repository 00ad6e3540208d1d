"""Error types and user-facing message helpers."""

from typing import Any


class TimelineError(Exception):
    """Base error for the workload timeline engine."""


class MutationError(TimelineError):
    """Raised by a mutation gateway when the remote system rejects a change."""


# Known tracker validation messages mapped to friendlier wording
FRIENDLY_RELATION_ERRORS = {
    "doesn't belong to the same project": "Issues must be in the same project",
    "cannot be linked to one of its subtasks": "Cannot link parent to its subtask",
    "cannot be linked to one of its ancestors": "Cannot link to ancestor issue",
    "already exists": "This relation already exists",
    "is invalid": "Invalid relation type",
}


def error_to_string(error: Any) -> str:
    """Extract a displayable message from whatever was raised or reported."""
    if not error:
        return ""
    if isinstance(error, BaseException):
        return str(error) or error.__class__.__name__
    if isinstance(error, str):
        return error
    if isinstance(error, dict):
        message = error.get("message")
        if message is not None:
            return str(message)
        return f"Unknown error object (keys: {','.join(map(str, error.keys()))})"
    return "Unknown error"


def friendly_relation_error(message: str) -> str:
    """Map a relation validation message to friendlier text; unknown messages pass through."""
    lowered = message.lower()
    for pattern, replacement in FRIENDLY_RELATION_ERRORS.items():
        if pattern in lowered:
            return replacement
    return message
