"""
Schema validation for tool arguments.

Each tool's arguments are checked against its JSON Schema before the
operation runs. Fails hard with a clear error when they do not match.
"""

import copy
import json
from pathlib import Path
from typing import Any

import jsonschema

from gitagent.git.errors import InvalidInputError

TOOLS_SCHEMA = "tools"


class ValidationError(InvalidInputError):
    """Schema validation failed."""

    def __init__(self, schema_name: str, message: str, path: str = None):
        self.schema_name = schema_name
        self.path = path
        super().__init__(f"[{schema_name}] {message}" + (f" at {path}" if path else ""))


# Cache loaded schemas
_schema_cache: dict[str, dict] = {}


def _get_schemas_dir() -> Path:
    """Get path to schemas directory."""
    return Path(__file__).parent.parent / "schemas"


def _load_schema(schema_name: str) -> dict:
    """Load schema by name, with caching."""
    if schema_name not in _schema_cache:
        schema_path = _get_schemas_dir() / f"{schema_name}.schema.json"
        if not schema_path.exists():
            raise ValidationError(schema_name, f"Schema file not found: {schema_path}")
        _schema_cache[schema_name] = json.loads(schema_path.read_text())
    return _schema_cache[schema_name]


def tool_names() -> list[str]:
    """Names of every tool with an argument schema."""
    return sorted(_load_schema(TOOLS_SCHEMA)["tools"])


def get_tool_schema(tool: str) -> dict:
    """Argument schema for one tool."""
    tools = _load_schema(TOOLS_SCHEMA)["tools"]
    if tool not in tools:
        raise InvalidInputError(f"Unsupported tool: {tool}")
    return tools[tool]


def validate(data: Any, schema: dict, schema_name: str) -> None:
    """
    Validate data against a schema.

    Raises:
        ValidationError: If validation fails
    """
    try:
        jsonschema.validate(instance=data, schema=schema)
    except jsonschema.ValidationError as e:
        # Build clear error message
        path = ".".join(str(p) for p in e.absolute_path) if e.absolute_path else "(root)"
        raise ValidationError(schema_name, e.message, path) from None


def apply_defaults(data: dict, schema: dict) -> dict:
    """Copy of data with top-level property defaults filled in (null counts as missing)."""
    result = dict(data)
    for name, prop in schema.get("properties", {}).items():
        if "default" in prop and result.get(name) is None:
            result[name] = copy.deepcopy(prop["default"])
    return result


def validate_tool_args(tool: str, args: dict) -> dict:
    """
    Validate a tool's arguments and fill in defaults.

    Args:
        tool: Tool name (e.g., "git_status")
        args: Arguments from the request envelope

    Returns:
        Arguments with defaults applied

    Raises:
        InvalidInputError: unknown tool
        ValidationError: arguments do not match the tool's schema
    """
    schema = get_tool_schema(tool)
    validate(args, schema, tool)
    return apply_defaults(args, schema)
