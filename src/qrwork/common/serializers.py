from __future__ import annotations

from dataclasses import fields, is_dataclass
from datetime import date, datetime
from decimal import Decimal
from enum import Enum
from typing import Any, Dict, Iterable

_ALWAYS_HIDDEN = frozenset({"password_hash"})


def camel(name: str) -> str:
    head, *rest = name.split("_")
    return head + "".join(part.title() for part in rest)


def json_value(value: Any) -> Any:
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, (datetime, date)):
        return value.isoformat()
    if isinstance(value, Decimal):
        return float(value)
    if is_dataclass(value) and not isinstance(value, type):
        return to_json(value)
    if isinstance(value, dict):
        return {k: json_value(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [json_value(v) for v in value]
    return value


def to_json(obj: Any, *, exclude: Iterable[str] = (), **extra: Any) -> Dict[str, Any]:
    """Dataclass -> JSON-ready dict with camelCase keys; secrets are never emitted."""
    hidden = _ALWAYS_HIDDEN.union(exclude)
    data = {camel(f.name): json_value(getattr(obj, f.name)) for f in fields(obj) if f.name not in hidden}
    data.update({k: json_value(v) for k, v in extra.items()})
    return data
