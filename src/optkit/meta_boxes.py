"""In-memory meta-box registry and renderer for post-style pages."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List

from .fragments import postbox_html, sortables_html

PRIORITIES = ("high", "core", "default", "low")

BoxCallback = Callable[[Any, "MetaBox"], "str | None"]


@dataclass
class MetaBoxError(Exception):
    message: str
    code: str = "META_BOX_INVALID"

    def __str__(self) -> str:  # pragma: no cover - simple formatting
        return f"{self.code}: {self.message}"


@dataclass
class MetaBox:
    box_id: str
    title: str
    callback: BoxCallback
    screen: str
    context: str = "advanced"
    priority: str = "default"
    callback_args: Dict[str, Any] = field(default_factory=dict)


class MetaBoxRenderer:
    def __init__(self) -> None:
        self._boxes: Dict[str, List[MetaBox]] = {}

    def add_meta_box(
        self,
        box_id: str,
        title: str,
        callback: BoxCallback,
        screen: str,
        context: str = "advanced",
        priority: str = "default",
        callback_args: dict | None = None,
    ) -> MetaBox:
        if not isinstance(box_id, str) or not box_id:
            raise MetaBoxError("box_id must be non-empty string")
        if not isinstance(screen, str) or not screen:
            raise MetaBoxError("screen must be non-empty string")
        if not callable(callback):
            raise MetaBoxError("callback must be callable")
        if priority not in PRIORITIES:
            priority = "default"
        box = MetaBox(
            box_id=box_id,
            title=title or "",
            callback=callback,
            screen=screen,
            context=context or "advanced",
            priority=priority,
            callback_args=dict(callback_args or {}),
        )
        # An id is unique per screen; re-adding moves the box.
        self.remove_meta_box(box_id, screen)
        self._boxes.setdefault(screen, []).append(box)
        return box

    def remove_meta_box(self, box_id: str, screen: str, context: str | None = None) -> bool:
        boxes = self._boxes.get(screen)
        if not boxes:
            return False
        kept = [b for b in boxes if not (b.box_id == box_id and (context is None or b.context == context))]
        if len(kept) == len(boxes):
            return False
        if kept:
            self._boxes[screen] = kept
        else:
            del self._boxes[screen]
        return True

    def boxes(self, screen: str, context: str) -> list[MetaBox]:
        matches = [b for b in self._boxes.get(screen, []) if b.context == context]
        return sorted(matches, key=lambda b: PRIORITIES.index(b.priority))

    def render(self, screen: str, context: str, obj: Any = None) -> str:
        rendered = []
        for box in self.boxes(screen, context):
            content = box.callback(obj, box)
            rendered.append(postbox_html(box.box_id, box.title, content if isinstance(content, str) else ""))
        return sortables_html(context, rendered)

    def clear(self) -> None:
        self._boxes = {}
