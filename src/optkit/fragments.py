"""Small HTML fragments shared by options-page layouts."""

from __future__ import annotations

import os
from typing import Any
from urllib.parse import urlsplit

from jinja2 import DictLoader, StrictUndefined
from jinja2.sandbox import ImmutableSandboxedEnvironment
from markupsafe import Markup, escape

_TEMPLATES = {
    "nonce_field": '<input type="hidden" id="{{ name }}" name="{{ name }}" value="{{ value }}" />',
    "submit_button": '<input type="submit" name="{{ name }}" id="{{ name }}" class="{{ classes }}" value="{{ text }}" />',
    "postbox": (
        '<div id="{{ box_id }}" class="postbox">'
        '<div class="postbox-header"><h2 class="hndle">{{ title }}</h2></div>'
        '<div class="inside">{{ content }}</div>'
        "</div>"
    ),
    "sortables": (
        '<div id="{{ context }}-sortables" class="meta-box-sortables">'
        "{% for box in boxes %}{{ box }}{% endfor %}"
        "</div>"
    ),
}

_ALLOWED_SCHEMES = {"http", "https", "ftp", "ftps", "mailto", ""}
_BUTTON_SIZES = {"primary", "small", "large"}


class _LockedSandbox(ImmutableSandboxedEnvironment):
    def is_safe_attribute(self, obj, attr, value) -> bool:
        return False

    def is_safe_callable(self, obj) -> bool:
        return False


def _env() -> _LockedSandbox:
    env = _LockedSandbox(loader=DictLoader(_TEMPLATES), autoescape=True, undefined=StrictUndefined)
    env.globals = {}
    env.filters = {}
    env.tests = {key: val for key, val in env.tests.items() if key in ("defined", "none")}
    return env


_ENV = _env()


def render_fragment(name: str, context: dict[str, Any]) -> str:
    """Render a named fragment. Values are escaped unless wrapped in ``Markup``."""
    return str(_ENV.get_template(name).render(context))


def esc_attr(value: Any) -> str:
    if value is None:
        return ""
    return str(escape(str(value)))


def esc_url(url: Any) -> str:
    if not isinstance(url, str) or not url.strip():
        return ""
    url = url.strip()
    scheme = urlsplit(url).scheme.lower()
    if scheme not in _ALLOWED_SCHEMES:
        return ""
    return esc_attr(url)


def admin_url(path: str = "") -> str:
    base = os.getenv("OPTPAGES_ADMIN_URL", "/wp-admin/").strip() or "/wp-admin/"
    if not base.endswith("/"):
        base += "/"
    return base + (path or "").lstrip("/")


def submit_button(text: str, button_type: str = "primary", name: str = "submit") -> str:
    # "secondary" is the plain button style and adds no modifier class.
    classes = ["button"]
    for item in (button_type or "").split():
        if item in ("secondary", "button-secondary"):
            continue
        classes.append(f"button-{item}" if item in _BUTTON_SIZES else item)
    return render_fragment(
        "submit_button",
        {"name": name, "classes": " ".join(classes), "text": text},
    )


def nonce_field_html(name: str, value: str) -> str:
    return render_fragment("nonce_field", {"name": name, "value": value})


def postbox_html(box_id: str, title: str, content: str) -> str:
    return render_fragment(
        "postbox",
        {"box_id": box_id, "title": title, "content": Markup(content or "")},
    )


def sortables_html(context: str, boxes: list[str]) -> str:
    return render_fragment(
        "sortables",
        {"context": context, "boxes": [Markup(box) for box in boxes]},
    )
