from __future__ import annotations

from .book_info import HeaderInfo
from .estimates import format_reading_time, percent_of
from .model import MainHeader, MiniHeader, RunningHeader

END_MARKER_TEXT = "THE END"


def main_header(book_name: str, info: HeaderInfo | None, words_left: int) -> MainHeader:
    info = info or HeaderInfo()
    return MainHeader(title=book_name or info.title, fields=info.header_fields(words_left))


def running_header(book_name: str, total_words: int, words_left: int) -> RunningHeader:
    return RunningHeader(
        title=book_name,
        words_left=words_left,
        percent_complete=percent_of(total_words - words_left, total_words),
        time_left=format_reading_time(words_left),
    )


def mini_header() -> MiniHeader:
    return MiniHeader()


def sheet_label(sheet_number: int, total_sheets: int, *, back: bool = False) -> str:
    suffix = "b" if back else ""
    return f"{sheet_number}{suffix}/{total_sheets}"
