from __future__ import annotations

from typing import Iterable, List

from .model import Block, BreakToken, InlineSegment, LinkSegment, LinkToken, NormalizedDocument, Token, WordToken
from .normalizer import normalize_inline_style
from .utils import clean_text


def tokenize(document: NormalizedDocument) -> List[Token]:
    """Flatten normalized blocks into the linear token stream used for layout."""
    tokens: List[Token] = []
    for block in document.blocks:
        if block.type == "separator":
            tokens.append(BreakToken("separator"))
            tokens.append(BreakToken("paragraph"))
            continue

        if block.type == "heading":
            level = max(1, min(6, block.level or 1))
            _append_block_content(tokens, block, f"heading-{level}")
            tokens.append(BreakToken("paragraph"))
            continue

        variant = "quote" if block.type == "quote" else "body"
        _append_block_content(tokens, block, variant)
        # list continuation blocks stay dense
        if not block.compact_break:
            tokens.append(BreakToken("paragraph"))
    return tokens


def split_words(text: str, variant: str, inline_style: str | None = None) -> List[WordToken]:
    normalized = clean_text(text)
    if not normalized:
        return []
    style = normalize_inline_style(inline_style)
    return [WordToken(word, variant=variant, inline_style=style) for word in normalized.split(" ")]


def is_bare_url(text: str, url: str) -> bool:
    return (text or "").strip() == (url or "").strip()


def _append_block_content(tokens: List[Token], block: Block, variant: str) -> None:
    if block.inlines:
        _append_inline_tokens(tokens, block.inlines, variant)
    else:
        tokens.extend(split_words(block.text, variant))


def _append_inline_tokens(tokens: List[Token], inlines: Iterable[InlineSegment], variant: str) -> None:
    for segment in inlines:
        if isinstance(segment, LinkSegment):
            url = segment.url
            text = clean_text(segment.text) or url
            tokens.append(
                LinkToken(
                    text=text,
                    url=url,
                    variant=variant,
                    inline_style=normalize_inline_style(segment.inline_style),
                    is_bare_url=is_bare_url(text, url),
                    is_image=segment.is_image,
                )
            )
            continue
        tokens.extend(split_words(segment.text, variant, segment.inline_style))
