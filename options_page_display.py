"""Options-page rendering: page shell, form, and the simple/post layouts."""

from __future__ import annotations

import logging
import math
import re
from dataclasses import asdict, dataclass, fields, replace
from typing import Any, Mapping

from hook_dispatcher import HookDispatcher
from optkit.fragments import admin_url, esc_attr, esc_url, submit_button
from optkit.kses import sanitize_rich_text
from optkit.merge import replace_recursive
from optkit.meta_boxes import MetaBoxRenderer
from optkit.nonces import NonceGenerator

logger = logging.getLogger("optpages.display")

SIMPLE_ACTION = "cmb2_options_simple_page"
TEXT_DOMAIN = "cmb2"

DEFAULT_BOXES = {
    "top": "edit_form_after_title",
    "side": "side",
    "normal": "normal",
    "advanced": "advanced",
}
CONTEXT_LOCATIONS = ("edit_form_after_title",)
META_BOX_LOCATIONS = ("side", "normal", "advanced")

BUTTON_WRAP = '<p class="cmb-submit-wrap clear">%s%s</p>'
BUTTON_NO_WRAP = "%s%s"


def _as_str(value: Any) -> str:
    if value is None:
        return ""
    return value if isinstance(value, str) else str(value)


_INT_PREFIX = re.compile(r"^\s*([+-]?\d+)")


def _as_int(value: Any) -> int:
    """Integer coercion that never raises; numeric strings use their leading digits."""
    if isinstance(value, bool):
        return int(value)
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        return int(value) if math.isfinite(value) else 0
    if isinstance(value, str):
        match = _INT_PREFIX.match(value)
        return int(match.group(1)) if match else 0
    try:
        return int(value)
    except (TypeError, ValueError, OverflowError):
        return 0


def _html(value: Any) -> str:
    return value if isinstance(value, str) else ""


@dataclass(frozen=True)
class SharedProps:
    """Page-level props shared by every box rendered on an options page."""

    page_columns: int = 1
    page_format: str = "simple"
    reset_button: str = ""
    save_button: str = "Save"
    title: str = ""

    @classmethod
    def from_props(cls, props: Any, base: "SharedProps | None" = None) -> "SharedProps":
        base = base or cls()
        if not isinstance(props, Mapping) or not props:
            return base
        known = {f.name for f in fields(cls)}
        values = {key: val for key, val in props.items() if key in known}
        if "page_columns" in values:
            columns = _as_int(values["page_columns"])
            if columns < 1:
                del values["page_columns"]
            else:
                values["page_columns"] = columns
        return replace(base, **values)

    def as_dict(self) -> dict:
        return asdict(self)


class OptionsPageDisplay:
    def __init__(
        self,
        option_key: str,
        page: str,
        props: Mapping[str, Any] | None = None,
        *,
        hooks: HookDispatcher | None = None,
        meta_boxes: MetaBoxRenderer | None = None,
        nonces: NonceGenerator | None = None,
    ) -> None:
        self._option_key = _as_str(option_key)
        self._page = _as_str(page)
        self._hooks = hooks if hooks is not None else HookDispatcher()
        self._meta_boxes = meta_boxes if meta_boxes is not None else MetaBoxRenderer()
        self._nonces = nonces if nonces is not None else NonceGenerator()
        self._shared = SharedProps.from_props(props if isinstance(props, Mapping) else {})
        self._default_args = self.merge_default_args()

    @property
    def option_key(self) -> str:
        return self._option_key

    @property
    def page_slug(self) -> str:
        return self._page

    @property
    def shared(self) -> SharedProps:
        return self._shared

    @property
    def default_args(self) -> dict:
        return replace_recursive(self._default_args, None)

    @property
    def hooks(self) -> HookDispatcher:
        return self._hooks

    def merge_default_args(self, option_key: str | None = None, shared: Mapping[str, Any] | None = None) -> dict:
        """Build default args from shared props. Does not store the result."""
        if not isinstance(option_key, str) or not option_key:
            option_key = self._option_key
        props = SharedProps.from_props(shared, base=self._shared)
        return {
            "option_key": option_key,
            "page_format": props.page_format,
            "simple_action": SIMPLE_ACTION,
            "page_nonces": True,
            "page_columns": props.page_columns,
            "page_metaboxes": dict(DEFAULT_BOXES),
            "save_button": props.save_button,
            "reset_button": props.reset_button,
            "button_wrap": True,
            "title": props.title,
        }

    def _args(self, inserted_args: Any) -> dict:
        if not isinstance(inserted_args, Mapping):
            inserted_args = {}
        return replace_recursive(self._default_args, inserted_args)

    def _columns(self, cols: Any) -> int:
        cols = _as_int(cols)
        return self._shared.page_columns if cols < 1 else cols

    def page(self, inserted_args: Mapping[str, Any] | None = None) -> str:
        """Full page: wrap div, title, before/after content, and the form."""
        args = self._args(inserted_args)
        # Only non-post pages carry the options-page class.
        wrapclass = " cmb2-options-page" if args["page_format"] != "post" else ""

        html = f'<div class="wrap{wrapclass} options-{esc_attr(args["option_key"])}">'
        if args["title"]:
            html += f'<h1 class="wp-heading-inline">{sanitize_rich_text(args["title"])}</h1>'
        html += _html(self._hooks.apply_filters("cmb2_options_page_before", "", self))
        html += self.page_form(args)
        html += _html(self._hooks.apply_filters("cmb2_options_page_after", "", self))
        html += "</div>"
        return html

    def page_form(self, inserted_args: Mapping[str, Any] | None = None) -> str:
        args = self._args(inserted_args)

        default_id = f"cmb2-option-{args['option_key']}"
        form_id = self._hooks.apply_filters("cmb2_options_form_id", default_id, self)
        if not isinstance(form_id, str) or not form_id:
            form_id = default_id

        html = (
            f'<form action="{esc_url(admin_url("admin-post.php"))}" '
            f'method="POST" id="{esc_attr(form_id)}" '
            'enctype="multipart/form-data" encoding="multipart/form-data">'
        )
        html += _html(self._hooks.apply_filters("cmb2_options_form_top", "", self))
        html += f'<input type="hidden" name="action" value="{esc_attr(args["option_key"])}">'

        if args["page_format"] != "post":
            logger.debug("page_form layout=simple page=%s", self._page)
            html += self.page_form_simple(args["simple_action"])
        else:
            logger.debug("page_form layout=post page=%s cols=%s", self._page, args["page_columns"])
            html += self.page_form_post(args["page_nonces"], args["page_columns"], args["page_metaboxes"])

        html += self.save_button(args["save_button"], args["reset_button"], args["button_wrap"])
        html += _html(self._hooks.apply_filters("cmb2_options_form_bottom", "", self))
        html += "</form>"
        return html

    def page_form_simple(self, action: Any = SIMPLE_ACTION, page: Any = "") -> str:
        """Legacy layout: every box on the page renders as one block via ``action``."""
        if not isinstance(action, str) or not action:
            return ""
        if not isinstance(page, str) or not page:
            page = self._page
        return self._hooks.do_action(action, page)

    def page_form_post(self, nonces: bool = True, cols: Any = 0, boxes: Mapping[str, Any] | None = None) -> str:
        """Post-editor style layout with optional sidebar column.

        Contexts other than ``edit_form_after_title`` above the columns are not supported.
        """
        loc = dict(DEFAULT_BOXES)
        if isinstance(boxes, Mapping):
            loc.update(boxes)
        cols = self._columns(cols)

        html = self.page_form_post_nonces(nonces)
        html += self.page_form_post_context_boxes(loc["top"])
        html += '<div id="poststuff">'
        html += f'<div id="post-body" class="metabox-holder columns-{cols}">'
        html += self.page_form_post_sidebar(cols, loc["side"])
        html += f'<div id="postbox-container-{cols}" class="postbox-container">'
        html += self.page_form_post_meta_boxes(loc["normal"])
        html += self.page_form_post_meta_boxes(loc["advanced"])
        html += "</div>"
        html += "</div>"
        html += "</div>"
        return html

    def page_form_post_sidebar(self, cols: Any = 0, side: Any = "side") -> str:
        if self._columns(cols) != 2:
            return ""
        html = '<div id="postbox-container-1" class="postbox-container">'
        html += self.page_form_post_meta_boxes(side)
        html += "</div>"
        return html

    def page_form_post_nonces(self, nonces: bool = True) -> str:
        if not nonces:
            return ""
        html = self._nonces.field("meta-box-order", "meta-box-order-nonce")
        html += self._nonces.field("closedpostboxes", "closedpostboxesnonce")
        return html

    def page_form_post_context_boxes(self, location: Any = "") -> str:
        if not isinstance(location, str) or location not in CONTEXT_LOCATIONS:
            return ""
        return self._hooks.do_action(location, self._page)

    def page_form_post_meta_boxes(self, location: Any = "") -> str:
        if not isinstance(location, str) or location not in META_BOX_LOCATIONS:
            return ""
        return self._meta_boxes.render(self._page, location, None)

    def _translate(self, text: str) -> str:
        translated = self._hooks.apply_filters("gettext", text, text, TEXT_DOMAIN)
        return translated if isinstance(translated, str) else text

    def _button_text(self, text: Any, default: str) -> str:
        text = text or default
        if not isinstance(text, str) or not text:
            return ""
        return self._translate(text)

    def save_button(self, save_button: Any = "", reset_button: Any = "", button_wrap: bool = True) -> str:
        """Save button, optionally preceded by a reset button. Either may be turned off."""
        save_text = self._button_text(save_button, self._shared.save_button)
        reset_text = self._button_text(reset_button, self._shared.reset_button)
        if not save_text and not reset_text:
            return ""

        pieces = {
            "button_wrap": BUTTON_WRAP if button_wrap else BUTTON_NO_WRAP,
            "reset_button": submit_button(reset_text, "secondary", "reset-cmb") if reset_text else "",
            "save_button": submit_button(save_text, "primary", "submit-cmb") if save_text else "",
        }
        html = pieces["button_wrap"] % (pieces["reset_button"], pieces["save_button"])
        html = self._hooks.apply_filters("cmb2_options_page_save_html", html, dict(pieces), self._page)
        return html if isinstance(html, str) and html else ""
