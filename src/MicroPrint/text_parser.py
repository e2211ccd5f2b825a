from __future__ import annotations

import re

from .model import Block, ParsedDocument
from .utils import clean_text, decode_text

_BLANK_LINE_RE = re.compile(r"\n\s*\n")


def parse_text_bytes(data: bytes) -> ParsedDocument:
    """Split plain text on blank lines into paragraph blocks."""
    raw_text = decode_text(data)
    if not raw_text:
        return ParsedDocument(format="txt", blocks=[])

    paragraphs = [clean_text(part) for part in _BLANK_LINE_RE.split(raw_text)]
    blocks = [Block(type="paragraph", text=text) for text in paragraphs if text]
    return ParsedDocument(format="txt", blocks=blocks)
