"""Response envelopes returned to tool-calling clients."""

import dataclasses
import json
from typing import Any


def camel_case(name: str) -> str:
    """snake_case field name to the camelCase used on the wire (`ignored_count` -> `ignoredCount`)."""
    head, *rest = name.rstrip("_").split("_")
    return head + "".join(part[:1].upper() + part[1:] for part in rest)


def to_jsonable(value: Any) -> Any:
    """Convert result dataclasses to plain JSON-compatible values.

    Field names become camelCase, matching the tool arguments. A trailing
    underscore (used to dodge keywords, e.g. `global_`) is dropped. Dict keys
    are data (paths, bucket names) and are kept as-is.
    """
    if dataclasses.is_dataclass(value) and not isinstance(value, type):
        return {
            camel_case(f.name): to_jsonable(getattr(value, f.name))
            for f in dataclasses.fields(value)
        }
    if isinstance(value, dict):
        return {str(k): to_jsonable(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [to_jsonable(v) for v in value]
    return value


def text_response(text: Any) -> dict:
    return {"content": [{"type": "text", "text": "" if text is None else str(text)}]}


def json_response(value: Any, pretty: bool = False) -> dict:
    text = json.dumps(to_jsonable(value), indent=2 if pretty else None)
    return text_response(text)


def error_response(message: str) -> dict:
    return {"content": [{"type": "text", "text": f"Error: {message}"}], "isError": True}
