# === FILE: sitesweep/parser/html_parser.py ===
"""HTML snapshot helpers shared by every extractor.

A :class:`DomSnapshot` is what a page session hands to an extraction
routine: the final (post-redirect) URL of the tab plus the serialized live
DOM.  Extractors are plain functions ``DomSnapshot -> T`` so they can be unit
tested on literal markup without a browser.

* ``soup()`` always returns a *fresh* tree, so an extractor may decompose
  nodes without affecting the next one.
* ``visible_text()`` mimics ``innerText`` closely enough for keyword and
  contact matching: scripts, styles and templates are dropped.
"""
from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass

from bs4 import BeautifulSoup
from bs4.element import Tag

__all__: Sequence[str] = ("DomSnapshot", "visible_text", "attr")

_INVISIBLE = ["script", "style", "noscript", "template"]


@dataclass(frozen=True, slots=True)
class DomSnapshot:
    """Serialized DOM of a loaded tab."""

    url: str
    html: str

    def soup(self) -> BeautifulSoup:
        return BeautifulSoup(self.html, "html.parser")


def visible_text(node: Tag) -> str:
    """Text of *node* without script/style content, pieces separated by spaces."""
    for element in node.find_all(_INVISIBLE):
        element.decompose()
    return node.get_text(" ", strip=True)


def attr(tag: Tag, name: str) -> str:
    """String value of an attribute, ``""`` when absent or multi-valued oddly."""
    value = tag.get(name)
    if isinstance(value, list):
        return " ".join(value).strip()
    return value.strip() if isinstance(value, str) else ""
