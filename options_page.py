"""Options page object: owns its display and its registry entry."""

from __future__ import annotations

import logging
from typing import Any, Mapping

from hook_dispatcher import HookDispatcher
from optkit.meta_boxes import MetaBoxRenderer
from optkit.nonces import NonceGenerator
from options_page_display import OptionsPageDisplay
from page_registry import PageRegistry

logger = logging.getLogger("optpages")


class OptionsPage:
    def __init__(
        self,
        page_id: str,
        option_key: str,
        props: Mapping[str, Any] | None = None,
        *,
        hooks: HookDispatcher | None = None,
        meta_boxes: MetaBoxRenderer | None = None,
        nonces: NonceGenerator | None = None,
    ) -> None:
        self.page_id = page_id
        self.option_key = option_key
        self.display = OptionsPageDisplay(
            option_key,
            page_id,
            props,
            hooks=hooks,
            meta_boxes=meta_boxes,
            nonces=nonces,
        )

    @property
    def title(self) -> str:
        return self.display.shared.title

    def hookup(self, registry: PageRegistry) -> bool:
        added = registry.add(self)
        if added is None:
            return False
        logger.info("page_hookup page_id=%s option_key=%s", self.page_id, self.option_key)
        return True

    def teardown(self, registry: PageRegistry) -> bool:
        # Leave an entry that now belongs to another page object alone.
        if registry.get(self.page_id) is not self:
            return False
        return registry.remove(self.page_id)

    def render(self, args: Mapping[str, Any] | None = None) -> str:
        return self.display.page(args)

    def summary(self) -> dict:
        shared = self.display.shared
        return {
            "page_id": self.page_id,
            "option_key": self.option_key,
            "title": shared.title,
            "page_format": shared.page_format,
            "page_columns": shared.page_columns,
        }
