"""Render a finalized booklet as a printable, self-contained HTML page."""

from __future__ import annotations

from pathlib import Path

from .booklet_format import BookletOptions
from .model import Booklet, Cell, Token
from .styles import styles_for
from .templating import get_environment

BOOKLET_TEMPLATE = "booklet.html"
CELL_TEMPLATE = "cell.html"


def render_booklet_html(booklet: Booklet, options: BookletOptions) -> str:
    template = get_environment().get_template(BOOKLET_TEMPLATE)
    return template.render(
        title=booklet.book_name or "Booklet",
        stylesheet=styles_for(options),
        pages=booklet.pages,
    )


def write_booklet_html(booklet: Booklet, output_path: str | Path, options: BookletOptions) -> None:
    output_path = Path(output_path)
    output_path.parent.mkdir(parents=True, exist_ok=True)
    output_path.write_text(render_booklet_html(booklet, options), encoding="utf-8")


def render_cell_markup(cell: Cell) -> str:
    return str(_cell_macros().cell_markup(cell))


def render_token_markup(token: Token) -> str:
    return str(_cell_macros().token_markup(token))


def _cell_macros():
    return get_environment().get_template(CELL_TEMPLATE).module
