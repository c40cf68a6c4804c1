"""Fast JSON decoding for screen documents and action descriptors."""

from typing import Any
import json

import msgspec
import orjson
from json_repair import repair_json


class JSONParseError(Exception):
    """JSON parsing failed."""

    def __init__(self, message: str, original: Exception | None = None) -> None:
        super().__init__(message)
        self.original = original


def strip_code_fence(text: str) -> str:
    """Return the body of a ```json fenced block, or the text unchanged."""
    if "```" not in text:
        return text

    if "```json" in text:
        start = text.find("```json") + 7
    else:
        start = text.find("```") + 3

    end = text.find("```", start)
    if end == -1:
        return text
    return text[start:end].strip()


def extract_json(text: str, repair: bool = True) -> dict[str, Any]:
    """
    Parse a JSON object from text, tolerating code fences and minor damage.

    Args:
        text: Text containing a JSON object
        repair: Attempt to repair invalid JSON with json_repair

    Returns:
        Parsed JSON dictionary

    Raises:
        JSONParseError: If no object can be decoded
    """
    body = strip_code_fence(text.strip())

    start = body.find("{")
    end = body.rfind("}")
    if start == -1 or end == -1:
        raise JSONParseError("No JSON object found in text")

    json_str = body[start:end + 1]

    # msgspec first (fastest)
    try:
        result = msgspec.json.decode(json_str.encode("utf-8"))
    except msgspec.DecodeError as e:
        if not repair:
            raise JSONParseError(f"Invalid JSON: {e}", e) from e
        try:
            result = json.loads(repair_json(json_str))
        except Exception as repair_error:
            raise JSONParseError(f"JSON repair failed: {repair_error}", repair_error) from repair_error

    if not isinstance(result, dict):
        raise JSONParseError(f"Expected object, got {type(result).__name__}")
    return result


def safe_json_dumps(obj: Any, **kwargs: Any) -> str:
    """
    Encode object to JSON string using the fastest library that accepts it.

    Args:
        obj: Object to encode
        **kwargs: indent for pretty output

    Returns:
        JSON string
    """
    indent = kwargs.get("indent", 0)

    if indent == 0:
        try:
            return orjson.dumps(obj).decode("utf-8")
        except (TypeError, ValueError):
            # e.g. integers outside the 64-bit range
            pass

    return json.dumps(obj, indent=indent if indent > 0 else None, default=str)


def json_depth(obj: Any) -> int:
    """Nesting depth of a decoded JSON value (scalars are depth 0)."""
    depth = 0
    stack = [(obj, 0)]
    while stack:
        value, level = stack.pop()
        if isinstance(value, dict):
            items = value.values()
        elif isinstance(value, list):
            items = value
        else:
            continue
        depth = max(depth, level + 1)
        stack.extend((item, level + 1) for item in items)
    return depth


def validate_json_size(data: str, max_size: int, name: str = "JSON") -> None:
    """
    Validate encoded JSON size.

    Raises:
        JSONParseError: If size exceeds limit
    """
    size = len(data.encode("utf-8"))
    if size > max_size:
        raise JSONParseError(f"{name} size {size} bytes exceeds maximum {max_size} bytes")


def validate_json_depth(obj: Any, max_depth: int = 128) -> None:
    """
    Validate JSON nesting depth to keep recursive rendering bounded.

    Raises:
        JSONParseError: If depth exceeds limit
    """
    depth = json_depth(obj)
    if depth > max_depth:
        raise JSONParseError(f"JSON nesting depth {depth} exceeds maximum {max_depth}")
