"""Box configuration store and its REST representation."""

from __future__ import annotations

import copy
import logging
import re
from typing import Any, Dict, Mapping
from urllib.parse import quote

logger = logging.getLogger("optpages.rest")

FIELDS_REL = "https://cmb2.io/fields"

# Same id pattern as the single-box route.
_BOX_ID_RE = re.compile(r"[\w-]+")

# Keys never exposed over REST.
_PRIVATE_KEYS = ("fields", "show_on_cb")


def _is_box(box: Any) -> bool:
    if not isinstance(box, Mapping):
        return False
    box_id = box.get("id")
    return isinstance(box_id, str) and bool(_BOX_ID_RE.fullmatch(box_id))


class BoxRegistry:
    def __init__(self) -> None:
        self._boxes: Dict[str, dict] = {}

    def register(self, box: Mapping[str, Any]) -> str | None:
        if not _is_box(box):
            logger.warning("box_register_rejected id=%s", box.get("id") if isinstance(box, Mapping) else None)
            return None
        box_id = box["id"]
        self._boxes[box_id] = dict(box)
        return box_id

    def get(self, box_id: str) -> dict | None:
        if not isinstance(box_id, str) or not box_id:
            return None
        return self._boxes.get(box_id)

    def all(self) -> dict:
        return dict(self._boxes)

    def readable(self) -> dict:
        return {box_id: box for box_id, box in self._boxes.items() if box.get("show_in_rest")}

    def remove(self, box_id: str) -> bool:
        if box_id not in self._boxes:
            return False
        del self._boxes[box_id]
        return True

    def clear(self) -> None:
        self._boxes = {}


def prepare_links(box_id: str, namespace_base: str, base_url: str = "/", query_string: str = "") -> dict:
    root = base_url.rstrip("/") + "/" + namespace_base.strip("/")
    box_base = f"{root}/{quote(str(box_id), safe='')}"
    suffix = f"?{query_string}" if query_string else ""
    return {
        "self": [{"href": f"{box_base}{suffix}"}],
        "collection": [{"href": f"{root}{suffix}"}],
        FIELDS_REL: [{"href": f"{box_base}/fields{suffix}", "embeddable": True}],
    }


def rest_box(box: Mapping[str, Any], namespace_base: str, base_url: str = "/", query_string: str = "") -> dict:
    """Box config as exposed over REST: private and callable values removed, links added."""
    data = {
        key: copy.deepcopy(value)
        for key, value in box.items()
        if key not in _PRIVATE_KEYS and not callable(value)
    }
    data["_links"] = prepare_links(box["id"], namespace_base, base_url, query_string)
    return data
