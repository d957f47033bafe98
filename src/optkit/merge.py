"""Recursive override merge for page argument maps."""

from __future__ import annotations

from typing import Any, Mapping


def _copy_value(value: Any) -> Any:
    # Containers are copied; any other object is shared by reference.
    if isinstance(value, Mapping):
        return {key: _copy_value(val) for key, val in value.items()}
    if isinstance(value, list):
        return [_copy_value(item) for item in value]
    return value


def replace_recursive(base: Mapping[str, Any], override: Mapping[str, Any] | None) -> dict:
    """Return a new dict with ``override`` laid over ``base``.

    Rules:
    - Keys present in both as mappings are merged key-wise.
    - Any other value in ``override`` replaces the base value.
    - Mappings and lists are copied, other objects keep their identity.
    - Neither input is mutated.
    """
    result = _copy_value(dict(base))
    if not override:
        return result
    for key, value in override.items():
        current = result.get(key)
        if isinstance(current, Mapping) and isinstance(value, Mapping):
            result[key] = replace_recursive(current, value)
        else:
            result[key] = _copy_value(value)
    return result
