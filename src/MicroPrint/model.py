from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Union

BLOCK_TYPES = ("paragraph", "heading", "quote", "separator")
INLINE_STYLES = ("strong", "emphasis", "code")

CELLS_PER_PAGE = 16
GRID_COLUMNS = 4


@dataclass
class TextSegment:
    text: str
    inline_style: str | None = None


@dataclass
class LinkSegment:
    text: str
    url: str
    inline_style: str | None = None
    is_image: bool = False


InlineSegment = Union[TextSegment, LinkSegment]


@dataclass
class Block:
    """One semantic unit of the source document, in document order."""

    type: str = "paragraph"
    text: str = ""
    inlines: List[InlineSegment] = field(default_factory=list)
    level: int | None = None
    compact_break: bool = False


@dataclass
class ParsedDocument:
    format: str
    blocks: List[Block]


@dataclass
class NormalizedDocument:
    format: str
    blocks: List[Block]
    word_count: int


@dataclass(frozen=True)
class WordToken:
    text: str
    variant: str = "body"
    inline_style: str | None = None


@dataclass(frozen=True)
class LinkToken:
    text: str
    url: str
    variant: str = "body"
    inline_style: str | None = None
    is_bare_url: bool = False
    is_image: bool = False


@dataclass(frozen=True)
class BreakToken:
    variant: str = "paragraph"


Token = Union[WordToken, LinkToken, BreakToken]


def is_word_like(token: Token) -> bool:
    return isinstance(token, (WordToken, LinkToken))


@dataclass
class HeaderField:
    label: str
    value: str


@dataclass
class MainHeader:
    """Full metadata table shown in Cell 0 of the very first Page."""

    title: str
    fields: List[HeaderField] = field(default_factory=list)
    slot: str = "main"


@dataclass
class RunningHeader:
    """Front-Page header summarising what is left to read."""

    title: str
    words_left: int
    percent_complete: int
    time_left: str
    sheet_number: str = "00/00"
    slot: str = "running"

    @property
    def summary(self) -> str:
        parts = [f"{self.words_left:,} Words", f"{self.percent_complete}% Complete"]
        if self.time_left:
            parts.append(self.time_left)
        return " - ".join(parts)

    @property
    def title_line(self) -> str:
        if self.title:
            return f"{self.sheet_number} - {self.title}"
        return self.sheet_number


@dataclass
class MiniHeader:
    sheet_number: str = "00/00"
    percent: int | None = None
    slot: str = "mini"

    @property
    def percent_text(self) -> str:
        if self.percent is None:
            return "00%"
        return f"{self.percent}%"


Header = Union[MainHeader, RunningHeader, MiniHeader]


@dataclass
class Cell:
    page_index: int
    index: int
    header: Header | None = None
    tokens: List[Token] = field(default_factory=list)
    end_marker: bool = False

    @property
    def header_slot(self) -> str:
        return self.header.slot if self.header is not None else "none"

    @property
    def is_blank(self) -> bool:
        """True when nothing but a mini header placeholder would be printed."""
        if self.tokens or self.end_marker:
            return False
        return self.header is None or isinstance(self.header, MiniHeader)


@dataclass
class Page:
    index: int
    side: str
    cells: List[Cell] = field(default_factory=list)

    @property
    def sheet_number(self) -> int:
        return (self.index + 2) // 2

    @property
    def is_front(self) -> bool:
        return self.side == "front"


@dataclass
class Booklet:
    pages: List[Page]
    total_sheets: int
    total_words: int
    book_name: str = ""

    def cells(self) -> List[Cell]:
        return [cell for page in self.pages for cell in page.cells]
