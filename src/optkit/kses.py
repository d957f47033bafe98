"""Allowlist sanitizer for rich-text snippets such as page titles."""

from __future__ import annotations

from typing import Any

from bs4 import BeautifulSoup
from bs4.element import Comment, Tag

_ALLOWED_TAGS: dict[str, set[str]] = {
    "a": {"href", "title", "target", "rel"},
    "abbr": {"title"},
    "b": set(),
    "br": set(),
    "code": set(),
    "del": {"datetime"},
    "em": set(),
    "i": set(),
    "ins": {"datetime"},
    "mark": set(),
    "q": {"cite"},
    "s": set(),
    "small": set(),
    "span": {"class", "title"},
    "strong": set(),
    "sub": set(),
    "sup": set(),
    "u": set(),
}

# Dropped together with their content.
_STRIP_WITH_CONTENT = {"script", "style", "iframe", "object", "embed", "template", "noscript"}

_URL_ATTRS = {"href", "cite"}
_ALLOWED_SCHEMES = ("http:", "https:", "mailto:", "ftp:", "ftps:")


def _safe_url(value: str) -> bool:
    compact = "".join(value.split()).lower()
    if ":" not in compact.split("/", 1)[0]:
        return True
    return compact.startswith(_ALLOWED_SCHEMES)


def _clean_attrs(tag: Tag) -> None:
    allowed = _ALLOWED_TAGS.get(tag.name, set())
    for attr in list(tag.attrs):
        if attr not in allowed:
            del tag.attrs[attr]
            continue
        value = tag.attrs[attr]
        if isinstance(value, list):
            value = " ".join(value)
        if attr in _URL_ATTRS and not _safe_url(str(value)):
            del tag.attrs[attr]


def sanitize_rich_text(value: Any) -> str:
    """Keep inline formatting tags, unwrap everything else, drop active content."""
    if not isinstance(value, str) or not value:
        return ""
    soup = BeautifulSoup(value, "html.parser")
    for comment in soup.find_all(string=lambda text: isinstance(text, Comment)):
        comment.extract()
    for tag in soup.find_all(True):
        if tag.decomposed:
            continue
        if tag.name in _STRIP_WITH_CONTENT:
            tag.decompose()
        elif tag.name not in _ALLOWED_TAGS:
            tag.unwrap()
        else:
            _clean_attrs(tag)
    return str(soup)
