from __future__ import annotations

from dataclasses import asdict, is_dataclass
from enum import Enum
from typing import Any, Mapping


def to_jsonable(obj: Any) -> Any:
    """Convert SDK objects and domain values into JSON-serializable data.

    Handles:
    - Basic types (str, int, float, bool, None)
    - Enums (by value)
    - Sequences and sets (sets are sorted for stable output)
    - Mappings
    - Pydantic models (SDK response objects)
    - Dataclasses (domain models)
    - Objects with __dict__
    """
    if obj is None or isinstance(obj, (str, int, float, bool)):
        return obj
    if isinstance(obj, Enum):
        return to_jsonable(obj.value)
    if isinstance(obj, (bytes, bytearray)):
        return obj.hex()
    if isinstance(obj, (list, tuple)):
        return [to_jsonable(item) for item in obj]
    if isinstance(obj, (set, frozenset)):
        return sorted((to_jsonable(item) for item in obj), key=str)
    if isinstance(obj, Mapping):
        return {str(k): to_jsonable(v) for k, v in obj.items()}
    if hasattr(obj, "model_dump"):
        return to_jsonable(obj.model_dump(mode="json", exclude_none=True))
    if is_dataclass(obj) and not isinstance(obj, type):
        return to_jsonable(asdict(obj))
    if hasattr(obj, "__dict__"):
        return to_jsonable(vars(obj))
    return str(obj)
