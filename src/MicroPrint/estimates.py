from __future__ import annotations

import math

WORDS_PER_MINUTE = 215

# Words that fit on one printed sheet (both sides) at a given font size.
WORDS_PER_SHEET = {
    4: 38266,
    5: 24427,
    6: 16850,
    7: 12278,
    8: 9113,
    9: 7070,
    10: 5584,
}


def format_reading_time(words: int, words_per_minute: int = WORDS_PER_MINUTE) -> str:
    """Return ``"H hour(s) M minute(s)"`` for ``words``, omitting zero parts."""
    minutes_total = max(0, words) / words_per_minute
    hours = math.floor(minutes_total / 60)
    minutes = _round_half_up(minutes_total - hours * 60)
    if minutes == 60:
        hours, minutes = hours + 1, 0
    parts = []
    if hours > 0:
        parts.append(f"{hours} hour{'s' if hours > 1 else ''}")
    if minutes > 0:
        parts.append(f"{minutes} minute{'s' if minutes > 1 else ''}")
    return " ".join(parts)


def estimate_sheets(word_count: int, font_size) -> int:
    try:
        words_per_sheet = WORDS_PER_SHEET.get(int(float(font_size)))
    except (TypeError, ValueError):
        return 0
    if not words_per_sheet:
        return 0
    return math.ceil(word_count / words_per_sheet)


def percent_of(part: int, total: int) -> int:
    if total <= 0:
        return 100
    return _round_half_up(part / total * 100)


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))
