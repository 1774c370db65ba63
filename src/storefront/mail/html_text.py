"""Plain-text rendering of HTML email bodies.

This is a tag-driven text accumulator, not a layout engine: block elements end
a line, links are written as ``text <href>`` and images are replaced by their
alt text.
"""
import re
from typing import List, Optional

from bs4 import BeautifulSoup, NavigableString, Tag
from bs4.element import Comment, Declaration, Doctype, ProcessingInstruction

BLOCK_TAGS = {"div", "p", "tr", "td", "th"}
SKIPPED_TAGS = {"script", "style"}

_WHITESPACE = re.compile(r"\s+")


class _PlainTextWriter:
    """Collects text while tags are visited in document order."""

    def __init__(self):
        self.parts: List[str] = []
        self.link: Optional[str] = None

    def _ends_line(self) -> bool:
        return not self.parts or self.parts[-1].endswith(("\n", " "))

    def newline(self):
        if self.parts:
            self.parts[-1] = self.parts[-1].rstrip(" ")
        self.parts.append("\n")

    def handle_text(self, data: str):
        text = _WHITESPACE.sub(" ", data)
        if not text.strip():
            return
        if self.link is not None and self.link == text.strip():
            # Link text already shows the URL
            self.link = None
        if self._ends_line():
            text = text.lstrip()
        self.parts.append(text)

    def handle_start_tag(self, tag: Tag):
        if tag.name == "br":
            self.newline()
        elif tag.name == "a":
            href = tag.get("href")
            self.link = href if href else None
        elif tag.name == "img":
            alt = tag.get("alt")
            if alt:
                self.parts.append(alt)

    def handle_end_tag(self, tag: Tag):
        if tag.name == "a" and self.link is not None:
            self.parts.append(f" <{self.link}> ")
            self.link = None
        if tag.name in BLOCK_TAGS:
            self.newline()

    def feed(self, node: Tag):
        for child in node.children:
            if isinstance(child, Tag):
                if child.name in SKIPPED_TAGS:
                    continue
                self.handle_start_tag(child)
                self.feed(child)
                self.handle_end_tag(child)
            elif isinstance(child, NavigableString) and not isinstance(
                child, (Comment, Declaration, Doctype, ProcessingInstruction)
            ):
                self.handle_text(str(child))

    def text(self) -> str:
        return "".join(self.parts)


def html_to_plain(html: str) -> str:
    """
    Render an HTML document as plain text for the text/plain part of an email.

    Args:
        html: HTML markup

    Returns:
        Best-effort plain-text rendering
    """
    writer = _PlainTextWriter()
    writer.feed(BeautifulSoup(html, "html.parser"))
    return writer.text()
