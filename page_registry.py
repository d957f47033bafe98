"""In-memory registry of options pages keyed by page id."""

from __future__ import annotations

import logging
from typing import Any, Dict

logger = logging.getLogger("optpages.registry")


def is_page(page: Any) -> bool:
    page_id = getattr(page, "page_id", None)
    option_key = getattr(page, "option_key", None)
    return isinstance(page_id, str) and bool(page_id) and isinstance(option_key, str)


class PageRegistry:
    """Holds references to page objects; pages add and remove themselves."""

    def __init__(self) -> None:
        self._pages: Dict[str, Any] = {}

    def __len__(self) -> int:
        return len(self._pages)

    def __contains__(self, page_id: object) -> bool:
        return page_id in self._pages

    def add(self, page: Any) -> str | None:
        if not is_page(page):
            logger.warning("page_add_rejected type=%s", type(page).__name__)
            return None
        if page.page_id in self._pages and self._pages[page.page_id] is not page:
            logger.info("page_replaced page_id=%s", page.page_id)
        self._pages[page.page_id] = page
        return page.page_id

    def get(self, page_id: str) -> Any | None:
        if not isinstance(page_id, str) or not page_id:
            return None
        return self._pages.get(page_id)

    def get_all(self) -> dict:
        return dict(self._pages)

    def get_by_options_key(self, key: str) -> dict | None:
        """Pages sharing ``key``; ``None`` means the key itself is invalid."""
        if not isinstance(key, str):
            return None
        return {page_id: page for page_id, page in self._pages.items() if page.option_key == key}

    def remove(self, page_id: str) -> bool:
        if not isinstance(page_id, str) or not page_id:
            return False
        if page_id not in self._pages:
            return False
        del self._pages[page_id]
        return True

    def clear(self) -> None:
        self._pages = {}
