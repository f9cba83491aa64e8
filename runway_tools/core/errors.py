"""Errors raised inside the tools and the classification of vendor errors.

Every error is turned into a failure envelope at the tool boundary, so none of
these ever reach the host.
"""

from enum import Enum
from typing import Any, Optional

from runwayml import TaskFailedError

from runway_tools.core.message import Message, failure_message


class ToolError(Exception):
    """An error that already knows how it should be reported to the host."""

    def __init__(
        self,
        error: str,
        message: Optional[str] = None,
        task_id: Optional[str] = None,
        details: Any = None,
    ):
        super().__init__(error if message is None else f"{error}: {message}")
        self.error = error
        self.message = message
        self.task_id = task_id
        self.details = details

    def to_message(self) -> Message:
        return failure_message(self.error, message=self.message, task_id=self.task_id, details=self.details)


class InvalidParameterError(ToolError):
    """The arguments do not satisfy the tool's input spec."""


class MissingCredentialError(ToolError):
    def __init__(self, env_var: str):
        super().__init__(f"{env_var} environment variable is not set.")
        self.env_var = env_var


class ToolNotFoundError(ToolError, ValueError):
    def __init__(self, tool_name: str, available: list):
        super().__init__(
            "Tool not found",
            message=f"Tool {tool_name} not found. Available tools: {', '.join(available)}",
        )
        self.tool_name = tool_name


class ErrorKind(Enum):
    TASK_FAILED = "task_failed"
    NOT_FOUND = "not_found"
    NOT_CANCELABLE = "not_cancelable"
    GENERIC = "generic"


def error_status_code(exc: BaseException) -> Optional[int]:
    """Return the HTTP status carried by a vendor error, if any."""
    for attr in ("status_code", "status"):
        value = getattr(exc, attr, None)
        if isinstance(value, int) and not isinstance(value, bool):
            return value
    return None


def task_failure_details(exc: BaseException) -> Any:
    """Return the vendor's task payload attached to a task failure error."""
    return getattr(exc, "task_details", None)


def classify_vendor_error(exc: BaseException) -> ErrorKind:
    """Classify an error raised at the vendor boundary.

    The checks run in a fixed order and the first match wins: failed task,
    then not found, then not cancelable, then generic.
    """
    if isinstance(exc, TaskFailedError) or task_failure_details(exc) is not None:
        return ErrorKind.TASK_FAILED
    status_code = error_status_code(exc)
    if status_code == 404:
        return ErrorKind.NOT_FOUND
    if status_code == 400 and "cannot be cancel" in str(exc).lower():
        return ErrorKind.NOT_CANCELABLE
    return ErrorKind.GENERIC
