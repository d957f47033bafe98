"""Options-page kernel utilities."""

from .fragments import admin_url, esc_attr, esc_url, render_fragment, submit_button
from .kses import sanitize_rich_text
from .merge import replace_recursive
from .meta_boxes import MetaBox, MetaBoxError, MetaBoxRenderer
from .nonces import NonceGenerator

__all__ = [
    "MetaBox",
    "MetaBoxError",
    "MetaBoxRenderer",
    "NonceGenerator",
    "admin_url",
    "esc_attr",
    "esc_url",
    "render_fragment",
    "replace_recursive",
    "sanitize_rich_text",
    "submit_button",
]
