from __future__ import annotations

import math
from typing import Protocol

from reportlab.pdfbase.pdfmetrics import stringWidth

from .booklet_format import (
    END_MARKER_MARGIN_PT,
    END_MARKER_SCALE,
    LINE_HEIGHT,
    PARAGRAPH_BREAK_TEXT,
    SEPARATOR_MARGIN_EM,
    BookletOptions,
    variant_scale,
)
from .fonts import FontOption
from .headers import END_MARKER_TEXT
from .model import BreakToken, Cell, LinkToken, MainHeader, MiniHeader, RunningHeader, Token, WordToken, is_word_like

CODE_FACE = "Courier"


class Measurer(Protocol):
    def fits(self, cell: Cell) -> bool:  # pragma: no cover - structural protocol
        """Return False once the cell content exceeds the cell's fixed capacity."""


class TokenBudgetMeasurer:
    """Deterministic stand-in: a cell holds at most ``tokens_per_cell`` words or links."""

    def __init__(self, tokens_per_cell: int) -> None:
        if tokens_per_cell < 1:
            raise ValueError("tokens_per_cell must be positive")
        self.tokens_per_cell = tokens_per_cell

    def fits(self, cell: Cell) -> bool:
        return sum(1 for token in cell.tokens if is_word_like(token)) <= self.tokens_per_cell


class _LineLayout:
    def __init__(self, width: float, line_height: float) -> None:
        self.width = width
        self.line_height = line_height
        self.x = 0.0
        self.line_size = 0.0
        self.completed = 0.0

    def add_word(self, text: str, face: str, size: float, trailing_space: bool = True) -> None:
        word_width = stringWidth(text, face, size)
        if self.x > 0 and self.x + word_width > self.width:
            self.break_line()
        if word_width > self.width:
            extra_lines = math.ceil(word_width / self.width) - 1
            self.line_size = max(self.line_size, size)
            for _ in range(extra_lines):
                self.break_line()
                self.line_size = size
            word_width -= extra_lines * self.width
        self.x += word_width
        self.line_size = max(self.line_size, size)
        if trailing_space:
            self.x += stringWidth(" ", face, size)

    def add_text(self, text: str, face: str, size: float) -> None:
        for word in text.split():
            self.add_word(word, face, size)

    def break_line(self) -> None:
        self.completed += self.line_size * self.line_height
        self.x = 0.0
        self.line_size = 0.0

    def finish_line(self) -> None:
        if self.x > 0 or self.line_size > 0:
            self.break_line()

    def add_block(self, height: float) -> None:
        self.finish_line()
        self.completed += height

    @property
    def height(self) -> float:
        return self.completed + self.line_size * self.line_height


class FontMetricsMeasurer:
    """Measure cells by simulating greedy line wrapping with standard PDF font metrics."""

    def __init__(
        self,
        font: FontOption,
        font_size: float,
        cell_width: float,
        cell_height: float,
        line_height: float = LINE_HEIGHT,
    ) -> None:
        self.font = font
        self.font_size = font_size
        self.cell_width = cell_width
        self.cell_height = cell_height
        self.line_height = line_height

    @classmethod
    def for_options(cls, options: BookletOptions) -> "FontMetricsMeasurer":
        return cls(
            font=options.font,
            font_size=options.font_size,
            cell_width=options.cell_width,
            cell_height=options.cell_height,
        )

    def fits(self, cell: Cell) -> bool:
        return self.measure_height(cell) <= self.cell_height

    def measure_height(self, cell: Cell) -> float:
        layout = _LineLayout(self.cell_width, self.line_height)
        self._layout_header(layout, cell)
        for token in cell.tokens:
            self._layout_token(layout, token)
        if cell.end_marker:
            layout.finish_line()
            size = self.font_size * END_MARKER_SCALE
            layout.add_block(END_MARKER_MARGIN_PT)
            layout.add_text(END_MARKER_TEXT, self.font.pdf_bold, size)
        return layout.height

    def _layout_header(self, layout: _LineLayout, cell: Cell) -> None:
        header = cell.header
        bold = self.font.pdf_bold
        regular = self.font.pdf_regular
        if isinstance(header, MainHeader):
            layout.add_text(header.title, bold, self.font_size)
            layout.finish_line()
            # two label/value pairs per table row
            for start in range(0, len(header.fields), 2):
                for item in header.fields[start:start + 2]:
                    layout.add_text(f"{item.label}:", bold, self.font_size)
                    layout.add_text(item.value, regular, self.font_size)
                layout.finish_line()
        elif isinstance(header, RunningHeader):
            layout.add_text(header.title_line, bold, self.font_size)
            layout.finish_line()
            layout.add_text(header.summary, regular, self.font_size)
            layout.finish_line()
        elif isinstance(header, MiniHeader):
            layout.add_word(f"{header.sheet_number} {header.percent_text}", regular, self.font_size)

    def _layout_token(self, layout: _LineLayout, token: Token) -> None:
        if isinstance(token, BreakToken):
            if token.variant == "separator":
                layout.add_block(self.font_size * SEPARATOR_MARGIN_EM * 2)
            else:
                layout.add_word(PARAGRAPH_BREAK_TEXT, self.font.pdf_regular, self.font_size, trailing_space=False)
            return
        if isinstance(token, (WordToken, LinkToken)):
            size = self.font_size * variant_scale(token.variant)
            layout.add_word(token.text, self._face(token), size)

    def _face(self, token: WordToken | LinkToken) -> str:
        if token.inline_style == "code":
            return CODE_FACE
        if token.inline_style == "strong" or token.variant.startswith("heading-"):
            return self.font.pdf_bold
        if token.inline_style == "emphasis" or token.variant == "quote":
            return self.font.pdf_italic
        return self.font.pdf_regular


def measurer_for(options: BookletOptions) -> FontMetricsMeasurer:
    return FontMetricsMeasurer.for_options(options)
