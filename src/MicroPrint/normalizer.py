from __future__ import annotations

from typing import Any, Iterable, List, Mapping

from .model import (
    BLOCK_TYPES,
    INLINE_STYLES,
    Block,
    InlineSegment,
    LinkSegment,
    NormalizedDocument,
    ParsedDocument,
    TextSegment,
)
from .utils import clean_text


def normalize_inline_style(style: Any) -> str | None:
    return style if style in INLINE_STYLES else None


def normalize_document(parsed: ParsedDocument | Mapping | None) -> NormalizedDocument:
    """Clean, filter and annotate raw blocks regardless of their source format."""
    raw_blocks = _get(parsed, "blocks") or []
    blocks = [_normalize_block(raw) for raw in raw_blocks if raw is not None]
    blocks = [b for b in blocks if b.type == "separator" or b.text or b.inlines]
    return NormalizedDocument(
        format=_get(parsed, "format") or "unknown",
        blocks=blocks,
        word_count=count_words(blocks),
    )


def count_words(blocks: Iterable[Block]) -> int:
    total = 0
    for block in blocks:
        if block.type == "separator":
            continue
        source = " ".join(segment.text for segment in block.inlines) if block.inlines else block.text
        total += len(source.split())
    return total


def _normalize_block(raw: Any) -> Block:
    block_type = _get(raw, "type") or "paragraph"
    if block_type not in BLOCK_TYPES:
        block_type = "paragraph"
    inlines = normalize_inline_segments(_get(raw, "inlines") or [])
    text = clean_text(_get(raw, "text") or " ".join(segment.text for segment in inlines))
    block = Block(
        type=block_type,
        text=text,
        inlines=inlines,
        compact_break=bool(_get(raw, "compact_break")),
    )
    if block_type == "heading":
        block.level = _clamp_level(_get(raw, "level"))
    return block


def normalize_inline_segments(segments: Iterable[Any]) -> List[InlineSegment]:
    result: List[InlineSegment] = []
    for segment in segments:
        if segment is None:
            continue
        style = normalize_inline_style(_get(segment, "inline_style"))
        text = clean_text(_get(segment, "text"))
        if isinstance(segment, LinkSegment) or _get(segment, "url") is not None:
            url = str(_get(segment, "url") or "").strip()
            if not url:
                if text:
                    result.append(TextSegment(text, inline_style=style))
                continue
            result.append(
                LinkSegment(text=text or url, url=url, inline_style=style, is_image=bool(_get(segment, "is_image")))
            )
            continue
        if text:
            result.append(TextSegment(text, inline_style=style))
    return result


def _clamp_level(value: Any) -> int:
    try:
        level = int(value)
    except (TypeError, ValueError):
        level = 1
    if level == 0:
        level = 1
    return max(1, min(6, level))


def _get(obj: Any, name: str) -> Any:
    if obj is None:
        return None
    if isinstance(obj, Mapping):
        return obj.get(name)
    return getattr(obj, name, None)
