from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Optional

from docx.enum.section import WD_ORIENT
from docx.enum.text import WD_ALIGN_PARAGRAPH
from docx.shared import Pt

from .fonts import DEFAULT_FONT_FAMILY, FontOption, get_font_option

# US Letter, in points
PAGE_WIDTH_PT = 612
PAGE_HEIGHT_PT = 792
PAGE_MARGIN_PT = 18
CELL_PADDING_PT = 3

DEFAULT_FONT_SIZE_PT = 6
LINE_HEIGHT = 1.05

BORDER_STYLES = ("dashed", "solid", "dotted")
DEFAULT_BORDER_STYLE = "dashed"

HEADING_SCALE = {1: 1.15, 2: 1.1, 3: 1.06}
END_MARKER_SCALE = 1.75
END_MARKER_MARGIN_PT = 10
SEPARATOR_MARGIN_EM = 0.2

PARAGRAPH_BREAK_TEXT = "    "
CODE_FONT_NAME = "Courier New"


@dataclass
class BookletOptions:
    font_family: str = DEFAULT_FONT_FAMILY
    font_size: float = DEFAULT_FONT_SIZE_PT
    border_style: str = DEFAULT_BORDER_STYLE
    page_width: float = PAGE_WIDTH_PT
    page_height: float = PAGE_HEIGHT_PT
    page_margin: float = PAGE_MARGIN_PT
    cell_padding: float = CELL_PADDING_PT

    @classmethod
    def from_values(
        cls,
        font_family: Optional[str] = None,
        font_size=None,
        border_style: Optional[str] = None,
        allowed_fonts: Optional[Iterable[str]] = None,
    ) -> "BookletOptions":
        """Build options from loosely typed user input, falling back to defaults."""
        return cls(
            font_family=get_font_option(font_family, allowed_fonts).value,
            font_size=_parse_font_size(font_size),
            border_style=resolve_border_style(border_style),
        )

    @property
    def font(self) -> FontOption:
        return get_font_option(self.font_family)

    @property
    def cell_width(self) -> float:
        return (self.page_width - 2 * self.page_margin) / 4 - 2 * self.cell_padding

    @property
    def cell_height(self) -> float:
        return (self.page_height - 2 * self.page_margin) / 4 - 2 * self.cell_padding


def resolve_border_style(value: Optional[str]) -> str:
    normalized = str(value or "").strip().lower()
    return normalized if normalized in BORDER_STYLES else DEFAULT_BORDER_STYLE


def variant_scale(variant: str) -> float:
    """Relative font size of a token variant (``heading-1`` … ``body``)."""
    if variant.startswith("heading-"):
        try:
            level = int(variant.rsplit("-", 1)[1])
        except ValueError:
            return 1.0
        return HEADING_SCALE.get(level, 1.0)
    return 1.0


def _parse_font_size(value) -> float:
    try:
        size = float(value)
    except (TypeError, ValueError):
        return DEFAULT_FONT_SIZE_PT
    return size if size > 0 else DEFAULT_FONT_SIZE_PT


def apply_page_layout(doc, options: BookletOptions) -> None:
    """Apply Letter page setup and booklet margins."""
    section = doc.sections[0]
    section.orientation = WD_ORIENT.PORTRAIT
    section.page_width = Pt(options.page_width)
    section.page_height = Pt(options.page_height)
    section.left_margin = Pt(options.page_margin)
    section.right_margin = Pt(options.page_margin)
    section.top_margin = Pt(options.page_margin)
    section.bottom_margin = Pt(options.page_margin)


def apply_cell_paragraph_format(paragraph, options: BookletOptions, centered: bool = False) -> None:
    paragraph.alignment = WD_ALIGN_PARAGRAPH.CENTER if centered else WD_ALIGN_PARAGRAPH.JUSTIFY
    paragraph.paragraph_format.space_after = Pt(0)
    paragraph.paragraph_format.space_before = Pt(0)
    paragraph.paragraph_format.line_spacing = Pt(options.font_size * LINE_HEIGHT)
    paragraph.paragraph_format.first_line_indent = Pt(0)


def set_run_font(
    run,
    options: BookletOptions,
    variant: str = "body",
    inline_style: Optional[str] = None,
    scale: float = 1.0,
    bold: bool = False,
) -> None:
    code = inline_style == "code"
    run.font.name = CODE_FONT_NAME if code else options.font.label
    run.font.size = Pt(options.font_size * variant_scale(variant) * scale)
    run.bold = bold or inline_style == "strong" or variant.startswith("heading-")
    run.italic = inline_style == "emphasis" or variant == "quote"
