"""In-process filter/action dispatcher for page extension points."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Tuple

logger = logging.getLogger("optpages.hooks")

Listener = Callable[..., Any]
_Entry = Tuple[int, int, Listener]

DEFAULT_PRIORITY = 10


@dataclass
class HookError(Exception):
    message: str
    code: str = "HOOK_INVALID"
    name: str | None = None

    def __str__(self) -> str:  # pragma: no cover - simple formatting
        base = f"{self.code}: {self.message}"
        return f"{base} (hook={self.name})" if self.name else base


def _validate(name: Any, callback: Any) -> None:
    if not isinstance(name, str) or not name:
        raise HookError("hook name must be non-empty string", "HOOK_NAME_INVALID")
    if not callable(callback):
        raise HookError("callback must be callable", "HOOK_CALLBACK_INVALID", name)


class HookDispatcher:
    """Named filters and actions run in (priority, registration) order.

    Filters transform a value; actions return HTML which is collected in
    listener order. Listener errors are not caught here.
    """

    def __init__(self) -> None:
        self._filters: Dict[str, List[_Entry]] = {}
        self._actions: Dict[str, List[_Entry]] = {}
        self._action_counts: Dict[str, int] = {}
        self._seq = 0

    def _add(self, table: Dict[str, List[_Entry]], name: str, callback: Listener, priority: int) -> None:
        _validate(name, callback)
        self._seq += 1
        entries = table.setdefault(name, [])
        entries.append((int(priority), self._seq, callback))
        entries.sort(key=lambda entry: (entry[0], entry[1]))

    @staticmethod
    def _remove(table: Dict[str, List[_Entry]], name: str, callback: Listener) -> bool:
        entries = table.get(name)
        if not entries:
            return False
        kept = [entry for entry in entries if entry[2] != callback]
        if len(kept) == len(entries):
            return False
        if kept:
            table[name] = kept
        else:
            del table[name]
        return True

    def add_filter(self, name: str, callback: Listener, priority: int = DEFAULT_PRIORITY) -> None:
        self._add(self._filters, name, callback, priority)

    def remove_filter(self, name: str, callback: Listener) -> bool:
        return self._remove(self._filters, name, callback)

    def has_filter(self, name: str) -> bool:
        return bool(self._filters.get(name))

    def apply_filters(self, name: str, value: Any, *context: Any) -> Any:
        for _, _, callback in list(self._filters.get(name, [])):
            value = callback(value, *context)
        return value

    def add_action(self, name: str, callback: Listener, priority: int = DEFAULT_PRIORITY) -> None:
        self._add(self._actions, name, callback, priority)

    def remove_action(self, name: str, callback: Listener) -> bool:
        return self._remove(self._actions, name, callback)

    def has_action(self, name: str) -> bool:
        return bool(self._actions.get(name))

    def do_action(self, name: str, *args: Any) -> str:
        self._action_counts[name] = self._action_counts.get(name, 0) + 1
        output: List[str] = []
        for _, _, callback in list(self._actions.get(name, [])):
            result = callback(*args)
            if isinstance(result, str):
                output.append(result)
        logger.debug("do_action name=%s listeners=%s", name, len(self._actions.get(name, [])))
        return "".join(output)

    def did_action(self, name: str) -> int:
        return self._action_counts.get(name, 0)

    def clear(self) -> None:
        self._filters = {}
        self._actions = {}
        self._action_counts = {}
