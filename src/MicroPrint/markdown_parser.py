from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from typing import Iterable, List, Sequence

from markdown_it import MarkdownIt

from .model import Block, InlineSegment, LinkSegment, ParsedDocument, TextSegment
from .utils import clean_text, decode_text

logger = logging.getLogger(__name__)

_TIGHT_BOLD_RE = (
    re.compile(r"(\*\*[^*\n]+?\*\*)(?=[A-Za-z0-9])"),
    re.compile(r"(__[^_\n]+?__)(?=[A-Za-z0-9])"),
)


@dataclass
class _ActiveLink:
    url: str
    inline_style: str | None
    parts: List[str] = field(default_factory=list)
    is_image: bool = False

    def to_segment(self) -> LinkSegment:
        text = clean_text(" ".join(self.parts)) or self.url
        return LinkSegment(text=text, url=self.url, inline_style=self.inline_style, is_image=self.is_image)


@dataclass
class _ListState:
    ordered: bool
    next_index: int = 1


@dataclass
class _ListItemState:
    marker: str | None
    marker_applied: bool = False


def _create_parser() -> MarkdownIt:
    return MarkdownIt("js-default", {"html": False, "linkify": True, "typographer": False})


def parse_markdown_bytes(data: bytes) -> ParsedDocument:
    return parse_markdown(decode_text(data))


def parse_markdown(text: str) -> ParsedDocument:
    raw_text = normalize_loose_markdown(text.replace("\r\n", "\n").strip())
    if not raw_text:
        return ParsedDocument(format="markdown", blocks=[])

    tokens = _create_parser().parse(raw_text)
    blocks = _parse_blocks(tokens)
    logger.debug("Markdown produced %d blocks from %d tokens", len(blocks), len(tokens))
    return ParsedDocument(format="markdown", blocks=blocks)


def normalize_loose_markdown(text: str) -> str:
    """Insert a space after a closing bold marker glued to the next word."""
    for pattern in _TIGHT_BOLD_RE:
        text = pattern.sub(r"\1 ", text)
    return text


def _parse_blocks(tokens: Sequence) -> list[Block]:
    blocks: list[Block] = []
    lists: list[_ListState] = []
    items: list[_ListItemState] = []
    quote_depth = 0
    i = 0
    while i < len(tokens):
        tok = tokens[i]
        if tok.type == "ordered_list_open":
            lists.append(_ListState(ordered=True, next_index=_list_start(tok)))
        elif tok.type == "bullet_list_open":
            lists.append(_ListState(ordered=False))
        elif tok.type in ("ordered_list_close", "bullet_list_close"):
            if lists:
                lists.pop()
        elif tok.type == "list_item_open":
            items.append(_ListItemState(marker=_next_marker(lists[-1] if lists else None)))
        elif tok.type == "list_item_close":
            if items:
                items.pop()
        elif tok.type == "blockquote_open":
            quote_depth += 1
        elif tok.type == "blockquote_close":
            quote_depth = max(0, quote_depth - 1)
        elif tok.type == "hr":
            blocks.append(Block(type="separator", text=""))
        elif tok.type in ("heading_open", "paragraph_open"):
            if tok.type == "heading_open":
                block = _inline_block(tokens[i + 1] if i + 1 < len(tokens) else None, "heading", _heading_level(tok))
            else:
                block_type = "quote" if quote_depth > 0 else "paragraph"
                block = _inline_block(tokens[i + 1] if i + 1 < len(tokens) else None, block_type)
            if block is not None:
                blocks.append(_apply_list_item(block, items[-1] if items else None))
            i += 2
        elif tok.type in ("fence", "code_block"):
            code_text = clean_text(tok.content)
            if code_text:
                block = Block(
                    type="paragraph",
                    text=code_text,
                    inlines=[TextSegment(code_text, inline_style="code")],
                )
                blocks.append(_apply_list_item(block, items[-1] if items else None))
        i += 1
    return blocks


def _list_start(tok) -> int:
    try:
        return int(tok.attrGet("start") or 1)
    except (TypeError, ValueError):
        return 1


def _next_marker(current: _ListState | None) -> str | None:
    if current is None:
        return None
    if current.ordered:
        marker = f"{current.next_index}."
        current.next_index += 1
        return marker
    return "-"


def _heading_level(tok) -> int:
    try:
        return int(tok.tag.lstrip("h"))
    except (AttributeError, ValueError):
        return 1


def _inline_block(inline_tok, block_type: str, level: int | None = None) -> Block | None:
    inlines = _parse_inline(inline_tok.children or []) if inline_tok is not None else []
    text = _segments_to_text(inlines)
    if not text and not inlines:
        return None
    return Block(type=block_type, text=text, inlines=inlines, level=level)


def _apply_list_item(block: Block, item: _ListItemState | None) -> Block:
    if item is None:
        return block
    block.compact_break = True
    if item.marker and not item.marker_applied:
        _prepend_marker(block, item.marker)
        item.marker_applied = True
    return block


def _prepend_marker(block: Block, marker: str) -> None:
    if block.text == marker or block.text.startswith(f"{marker} "):
        return
    block.text = f"{marker} {block.text}".strip()
    block.inlines = [TextSegment(marker), *block.inlines]


def _current_style(stack: list[str]) -> str | None:
    for style in ("code", "strong", "emphasis"):
        if style in stack:
            return style
    return None


def _pop_style(stack: list[str], style: str) -> None:
    for idx in range(len(stack) - 1, -1, -1):
        if stack[idx] == style:
            del stack[idx]
            return


def _push_text(segments: List[InlineSegment], text: str, inline_style: str | None) -> None:
    normalized = clean_text(text)
    if not normalized:
        return
    last = segments[-1] if segments else None
    if isinstance(last, TextSegment) and last.inline_style == inline_style:
        last.text = clean_text(f"{last.text} {normalized}")
        return
    segments.append(TextSegment(normalized, inline_style=inline_style))


def _parse_inline(children: Iterable) -> List[InlineSegment]:
    segments: List[InlineSegment] = []
    styles: list[str] = []
    link: _ActiveLink | None = None

    def append_text(text: str) -> None:
        if link is not None:
            normalized = clean_text(text)
            if normalized:
                link.parts.append(normalized)
            return
        _push_text(segments, text, _current_style(styles))

    for tok in children:
        if tok.type == "strong_open":
            styles.append("strong")
        elif tok.type == "strong_close":
            _pop_style(styles, "strong")
        elif tok.type == "em_open":
            styles.append("emphasis")
        elif tok.type == "em_close":
            _pop_style(styles, "emphasis")
        elif tok.type == "link_open":
            link = _ActiveLink(url=str(tok.attrGet("href") or ""), inline_style=_current_style(styles))
        elif tok.type == "link_close":
            if link is not None and link.url:
                segments.append(link.to_segment())
            link = None
        elif tok.type == "image":
            alt = clean_text(tok.content or tok.attrGet("alt") or "Image") or "Image"
            src = tok.attrGet("src")
            if link is not None:
                link.is_image = True
                link.parts.append(alt)
            elif src:
                segments.append(LinkSegment(text=alt, url=str(src), inline_style=_current_style(styles), is_image=True))
            else:
                append_text(alt)
        elif tok.type == "code_inline":
            styles.append("code")
            append_text(tok.content)
            _pop_style(styles, "code")
        elif tok.type in ("softbreak", "hardbreak"):
            append_text(" ")
        elif tok.type in ("text", "html_inline"):
            append_text(tok.content)

    if link is not None and link.url:
        segments.append(link.to_segment())
    return segments


def _segments_to_text(segments: Iterable[InlineSegment]) -> str:
    return clean_text(" ".join(segment.text for segment in segments))
