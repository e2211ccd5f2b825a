from __future__ import annotations

import logging
import math
from dataclasses import dataclass, field
from enum import Enum
from typing import Iterable, List, Sequence

from . import headers
from .book_info import HeaderInfo
from .errors import MeasurementFailure
from .estimates import percent_of
from .measure import Measurer
from .model import (
    CELLS_PER_PAGE,
    GRID_COLUMNS,
    Booklet,
    Cell,
    MiniHeader,
    Page,
    RunningHeader,
    Token,
    is_word_like,
)
from .progress import Progress, ProgressCallback

logger = logging.getLogger(__name__)

TRAILING_CLEANUP_WINDOW = CELLS_PER_PAGE - 1


class Phase(str, Enum):
    EMPTY_DOCUMENT = "empty_document"
    PLACING_TOKENS = "placing_tokens"
    NUMBERING_RESOLUTION = "numbering_resolution"
    FINALIZED = "finalized"


@dataclass
class PaginationState:
    pages: List[Page] = field(default_factory=list)
    current_page_index: int = 0
    current_cell_index: int = 0
    words_consumed: int = 0
    total_words: int = 0
    phase: Phase = Phase.EMPTY_DOCUMENT

    @property
    def current_cell(self) -> Cell:
        return self.pages[self.current_page_index].cells[self.current_cell_index]

    @property
    def words_left(self) -> int:
        return self.total_words - self.words_consumed


class Paginator:
    """Greedy, overflow-driven packing of a token stream into booklet pages.

    Tokens are appended to the current cell one at a time and the injected
    measurer decides whether the cell still fits. A token that overflows is
    moved, whole, to the next cell; a new page is started after cell 15.
    Sheet numbers are only known once every page exists, so headers are
    stamped in a second pass.
    """

    def __init__(
        self,
        measurer: Measurer,
        *,
        book_name: str = "",
        header_info: HeaderInfo | None = None,
        on_progress: ProgressCallback | None = None,
        estimated_sheets: int = 0,
    ) -> None:
        self.measurer = measurer
        self.book_name = book_name
        self.header_info = header_info
        self.on_progress = on_progress
        self.estimated_sheets = estimated_sheets

    def run(self, tokens: Sequence[Token]) -> Booklet:
        state = PaginationState(total_words=sum(1 for token in tokens if is_word_like(token)))
        self._new_page(state)
        if tokens:
            state.phase = Phase.PLACING_TOKENS
        for token in tokens:
            self.place(state, token)
        self._mark_end(state)

        state.phase = Phase.NUMBERING_RESOLUTION
        total_sheets = self._resolve_numbering(state)
        self._trim_trailing_cells(state)
        state.phase = Phase.FINALIZED

        logger.info("Paginated %d words into %d pages (%d sheets)", state.total_words, len(state.pages), total_sheets)
        return Booklet(
            pages=state.pages,
            total_sheets=total_sheets,
            total_words=state.total_words,
            book_name=self.book_name,
        )

    def place(self, state: PaginationState, token: Token) -> None:
        word_like = is_word_like(token)
        consumed = state.words_consumed + 1 if word_like else state.words_consumed
        while True:
            cell = state.current_cell
            previous_percent = self._stamp_percent(cell, consumed, state.total_words) if word_like else None
            cell.tokens.append(token)
            if self._fits(cell):
                break
            if len(cell.tokens) == 1:
                logger.warning(
                    "Token %r does not fit an empty cell (page %d, cell %d); keeping it",
                    getattr(token, "text", token),
                    cell.page_index,
                    cell.index,
                )
                break
            cell.tokens.pop()
            if isinstance(cell.header, MiniHeader) and word_like:
                cell.header.percent = previous_percent
            self._advance(state)
        state.words_consumed = consumed

    def _fits(self, cell: Cell) -> bool:
        try:
            return bool(self.measurer.fits(cell))
        except Exception as exc:
            raise MeasurementFailure(
                f"Could not measure cell {cell.index} on page {cell.page_index + 1}: {exc}"
            ) from exc

    def _advance(self, state: PaginationState) -> None:
        state.current_cell_index += 1
        if state.current_cell_index >= CELLS_PER_PAGE:
            self._new_page(state)
            state.current_page_index = len(state.pages) - 1
            state.current_cell_index = 0

    def _new_page(self, state: PaginationState) -> Page:
        index = len(state.pages)
        side = "front" if index % 2 == 0 else "back"
        page = Page(index=index, side=side)
        for cell_index in range(CELLS_PER_PAGE):
            cell = Cell(page_index=index, index=cell_index)
            if cell_index == 0 and side == "front":
                if index == 0:
                    cell.header = headers.main_header(self.book_name, self.header_info, state.words_left)
                else:
                    cell.header = headers.running_header(self.book_name, state.total_words, state.words_left)
            elif cell_index % GRID_COLUMNS == 0:
                cell.header = headers.mini_header()
            page.cells.append(cell)
        state.pages.append(page)
        logger.debug("Created page %d (%s), %d words left", index + 1, side, state.words_left)
        if self.on_progress is not None:
            self.on_progress(Progress.page(page.sheet_number, self.estimated_sheets))
        return page

    @staticmethod
    def _stamp_percent(cell: Cell, consumed: int, total_words: int) -> int | None:
        if not isinstance(cell.header, MiniHeader):
            return None
        previous = cell.header.percent
        cell.header.percent = percent_of(consumed, total_words)
        return previous

    @staticmethod
    def _mark_end(state: PaginationState) -> None:
        cells = [cell for page in state.pages for cell in page.cells]
        target = next((cell for cell in reversed(cells) if cell.tokens), cells[0])
        target.end_marker = True

    @staticmethod
    def _resolve_numbering(state: PaginationState) -> int:
        total_sheets = math.ceil(len(state.pages) / 2)
        for page in state.pages:
            mini_label = headers.sheet_label(page.sheet_number, total_sheets, back=not page.is_front)
            for cell in page.cells:
                if isinstance(cell.header, MiniHeader):
                    cell.header.sheet_number = mini_label
                elif isinstance(cell.header, RunningHeader) and page.index != 0:
                    cell.header.sheet_number = headers.sheet_label(page.sheet_number, total_sheets)
        return total_sheets

    @staticmethod
    def _trim_trailing_cells(state: PaginationState) -> None:
        cells = [cell for page in state.pages for cell in page.cells]
        blank = {id(cell) for cell in cells[-TRAILING_CLEANUP_WINDOW:] if cell.is_blank}
        for page in state.pages:
            page.cells = [cell for cell in page.cells if id(cell) not in blank]


def paginate(
    tokens: Iterable[Token],
    measurer: Measurer,
    *,
    book_name: str = "",
    header_info: HeaderInfo | None = None,
    on_progress: ProgressCallback | None = None,
    estimated_sheets: int = 0,
) -> Booklet:
    paginator = Paginator(
        measurer,
        book_name=book_name,
        header_info=header_info,
        on_progress=on_progress,
        estimated_sheets=estimated_sheets,
    )
    return paginator.run(list(tokens))
