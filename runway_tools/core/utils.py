import datetime
import re
from typing import Any, Dict, Optional, Sequence

_CAMEL_BOUNDARY = re.compile(r"(?<!^)(?=[A-Z])")


def camel_to_snake(name: str) -> str:
    """Convert a tool argument name to the vendor SDK keyword, e.g. promptText -> prompt_text."""
    return _CAMEL_BOUNDARY.sub("_", name).lower()


def to_plain(value: Any) -> Any:
    """Turn vendor response models into plain JSON-compatible values."""
    if hasattr(value, "model_dump"):
        return value.model_dump(mode="json", by_alias=True, exclude_none=True)
    if isinstance(value, (datetime.datetime, datetime.date)):
        return value.isoformat()
    if isinstance(value, dict):
        return {key: to_plain(item) for key, item in value.items()}
    if isinstance(value, (list, tuple)):
        return [to_plain(item) for item in value]
    return value


def task_field(task: Any, name: str, default: Any = None) -> Any:
    """Read a field from a vendor task by its camelCase name.

    The SDK returns pydantic models with snake_case attributes, while raw payloads
    (for example the details of a failed task) may be dicts in either spelling.
    """
    if task is None:
        return default
    candidates = (name, camel_to_snake(name))
    for candidate in candidates:
        if isinstance(task, dict):
            if task.get(candidate) is not None:
                return to_plain(task[candidate])
        else:
            value = getattr(task, candidate, None)
            if value is not None:
                return to_plain(value)
    return default


def first_output(output: Optional[Sequence[Any]]) -> Optional[Any]:
    """Return the primary output locator, the first element of the output list."""
    if not output or isinstance(output, (str, bytes)):
        return None
    return output[0]


def to_vendor_params(arguments: Dict[str, Any], renames: Optional[Dict[str, str]] = None) -> Dict[str, Any]:
    """Map validated tool arguments to vendor SDK keyword arguments.

    None values are dropped so that the vendor applies its own defaults.
    """
    renames = renames or {}
    params = {}
    for name, value in arguments.items():
        if value is None:
            continue
        params[renames.get(name, camel_to_snake(name))] = value
    return params


def utc_now_iso() -> str:
    return datetime.datetime.now(datetime.timezone.utc).isoformat().replace("+00:00", "Z")
