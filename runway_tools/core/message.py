import json
from typing import Any, Dict, Optional

from pydantic import BaseModel, field_validator

FAILURE_FIELDS = ("error", "message", "taskId", "details")


class Message(BaseModel):
    """Message carries the arguments into a tool and the result envelope out of it.

    A result envelope always has a boolean "success" key. Successful results carry
    operation specific fields such as "taskId", "status" and an output locator.
    Failed results carry only the failure fields:

    {"success": False, "error": "Task not found", "taskId": "abc"}
    """

    content: Dict[str, Any]

    @field_validator("content")
    def check_content(cls, value):
        """Check if the content is a dictionary."""
        if not isinstance(value, dict):
            raise ValueError("Content must be a dictionary")
        return value

    def get(self, key: str, default: Any = None) -> Any:
        return self.content.get(key, default)

    def set(self, key: str, value: Any):
        self.content[key] = value

    @property
    def is_envelope(self) -> bool:
        return isinstance(self.content.get("success"), bool)

    @property
    def succeeded(self) -> bool:
        return self.content.get("success") is True

    def to_json(self) -> str:
        return json.dumps(self.content, default=str)


def success_message(**fields: Any) -> Message:
    """Build a success envelope. Fields named "error" or "details" are not allowed."""
    for key in ("error", "details"):
        if key in fields:
            raise ValueError(f"A success envelope must not contain the field '{key}'.")
    return Message(content={"success": True, **fields})


def failure_message(
    error: str,
    message: Optional[str] = None,
    task_id: Optional[str] = None,
    details: Any = None,
) -> Message:
    """Build a failure envelope. Optional fields are omitted when not available."""
    content: Dict[str, Any] = {"success": False, "error": error}
    if message is not None:
        content["message"] = message
    if task_id is not None:
        content["taskId"] = task_id
    if details is not None:
        content["details"] = details
    return Message(content=content)
