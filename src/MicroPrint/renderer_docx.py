from __future__ import annotations

import logging
from pathlib import Path

from docx import Document as DocxDocument
from docx.enum.table import WD_TABLE_ALIGNMENT
from docx.oxml import OxmlElement
from docx.oxml.ns import qn
from docx.shared import Pt

from . import booklet_format
from .booklet_format import BookletOptions
from .headers import END_MARKER_TEXT
from .model import (
    CELLS_PER_PAGE,
    GRID_COLUMNS,
    Booklet,
    BreakToken,
    Cell,
    LinkToken,
    MainHeader,
    MiniHeader,
    Page,
    RunningHeader,
)

logger = logging.getLogger(__name__)

DOCX_BORDER_VALUES = {
    "dashed": "dashed",
    "solid": "single",
    "dotted": "dotted",
}

SEPARATOR_TEXT = "-" * 12


def render_booklet_docx(booklet: Booklet, output_path: str | Path, options: BookletOptions) -> None:
    output_path = Path(output_path)
    docx = DocxDocument()
    booklet_format.apply_page_layout(docx, options)
    if booklet.book_name:
        docx.core_properties.title = booklet.book_name

    for page in booklet.pages:
        if page.index > 0:
            docx.add_page_break()
        _render_page(docx, page, options)

    output_path.parent.mkdir(parents=True, exist_ok=True)
    docx.save(output_path)
    logger.debug("Wrote %d pages to %s", len(booklet.pages), output_path)


def _render_page(docx, page: Page, options: BookletOptions) -> None:
    rows = CELLS_PER_PAGE // GRID_COLUMNS
    table = docx.add_table(rows=rows, cols=GRID_COLUMNS)
    table.alignment = WD_TABLE_ALIGNMENT.CENTER
    table.autofit = False
    _set_grid_borders(table, options.border_style)

    column_width = Pt(options.cell_width + 2 * options.cell_padding)
    row_height = options.cell_height + 2 * options.cell_padding
    for column in table.columns:
        column.width = column_width
    for row in table.rows:
        _set_exact_row_height(row, row_height)

    for cell in page.cells:
        row, column = divmod(cell.index, GRID_COLUMNS)
        target = table.cell(row, column)
        target.width = column_width
        _render_cell(target, cell, options)


def _render_cell(target, cell: Cell, options: BookletOptions) -> None:
    paragraph = target.paragraphs[0]
    booklet_format.apply_cell_paragraph_format(paragraph, options)

    header = cell.header
    if isinstance(header, MainHeader):
        _add_line(paragraph, header.title, options, bold=True)
        for item in header.fields:
            paragraph = _new_paragraph(target, options)
            _add_line(paragraph, f"{item.label}: ", options, bold=True)
            _add_line(paragraph, item.value, options)
        paragraph = _new_paragraph(target, options)
    elif isinstance(header, RunningHeader):
        _add_line(paragraph, header.title_line, options, bold=True)
        paragraph = _new_paragraph(target, options)
        _add_line(paragraph, header.summary, options)
        paragraph = _new_paragraph(target, options)
    elif isinstance(header, MiniHeader):
        _add_line(paragraph, f"{header.sheet_number} {header.percent_text} ", options)

    for token in cell.tokens:
        if isinstance(token, BreakToken):
            if token.variant == "separator":
                rule = _new_paragraph(target, options, centered=True)
                _add_line(rule, SEPARATOR_TEXT, options)
                paragraph = _new_paragraph(target, options)
            else:
                _add_line(paragraph, booklet_format.PARAGRAPH_BREAK_TEXT, options)
            continue
        run = paragraph.add_run(f"{token.text} ")
        booklet_format.set_run_font(run, options, variant=token.variant, inline_style=token.inline_style)
        if isinstance(token, LinkToken) and not token.is_bare_url:
            run.font.underline = True

    if cell.end_marker:
        marker = _new_paragraph(target, options, centered=True)
        marker.paragraph_format.space_before = Pt(booklet_format.END_MARKER_MARGIN_PT)
        run = marker.add_run(END_MARKER_TEXT)
        booklet_format.set_run_font(run, options, scale=booklet_format.END_MARKER_SCALE, bold=True)


def _new_paragraph(target, options: BookletOptions, centered: bool = False):
    paragraph = target.add_paragraph()
    booklet_format.apply_cell_paragraph_format(paragraph, options, centered=centered)
    return paragraph


def _add_line(paragraph, text: str, options: BookletOptions, bold: bool = False):
    run = paragraph.add_run(text)
    booklet_format.set_run_font(run, options, bold=bold)
    return run


def _set_grid_borders(table, border_style: str) -> None:
    """Draw only the inner grid lines, like the dashed cut lines of the print sheet."""
    tbl_pr = table._element.tblPr
    if tbl_pr is None:
        return
    for child in list(tbl_pr):
        if child.tag == qn("w:tblBorders"):
            tbl_pr.remove(child)
    value = DOCX_BORDER_VALUES.get(border_style, DOCX_BORDER_VALUES[booklet_format.DEFAULT_BORDER_STYLE])
    borders = OxmlElement("w:tblBorders")
    for border_name in ("top", "left", "bottom", "right", "insideH", "insideV"):
        border = OxmlElement(f"w:{border_name}")
        if border_name.startswith("inside"):
            border.set(qn("w:val"), value)
            border.set(qn("w:sz"), "4")
            border.set(qn("w:color"), "000000")
        else:
            border.set(qn("w:val"), "nil")
        borders.append(border)
    tbl_pr.append(borders)


def _set_exact_row_height(row, height_pt: float) -> None:
    tr_pr = row._tr.get_or_add_trPr()
    for child in list(tr_pr):
        if child.tag == qn("w:trHeight"):
            tr_pr.remove(child)
    tr_height = OxmlElement("w:trHeight")
    tr_height.set(qn("w:val"), str(int(Pt(height_pt).twips)))
    tr_height.set(qn("w:hRule"), "exact")
    tr_pr.append(tr_height)
