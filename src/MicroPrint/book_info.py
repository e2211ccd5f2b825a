from __future__ import annotations

import re
from dataclasses import dataclass, fields, replace
from pathlib import Path
from typing import Any

import yaml

from .errors import InvalidBookInfo
from .model import HeaderField

_CAMEL_RE = re.compile(r"(?<!^)(?=[A-Z])")

_TITLE_KEYS = {"title", "book_name", "bookname", "name"}


@dataclass
class HeaderInfo:
    """Book metadata printed in the main header of the first page."""

    title: str = ""
    series: str = ""
    sheets_count: str = ""
    word_count: str = ""
    read_time: str = ""
    author: str = ""
    year: str = ""
    font_size: str = ""

    def header_fields(self, words_left: int) -> list[HeaderField]:
        result: list[HeaderField] = []
        for item in fields(self):
            if item.name == "title":
                continue
            value = getattr(self, item.name)
            if not value:
                continue
            if item.name == "word_count":
                value = f"{words_left:,}"
            result.append(HeaderField(label=_label(item.name), value=str(value)))
        return result

    def with_defaults(self, **defaults: Any) -> "HeaderInfo":
        """Fill empty fields from ``defaults`` without overriding user values."""
        updates = {
            key: str(value)
            for key, value in defaults.items()
            if hasattr(self, key) and not getattr(self, key) and value not in (None, "")
        }
        return replace(self, **updates)


def parse_header_info(text: str) -> HeaderInfo:
    """Parse book metadata from a YAML mapping."""
    try:
        data = yaml.safe_load(text) or {}
    except yaml.YAMLError as exc:
        raise InvalidBookInfo(f"Book info is not valid YAML: {exc}") from exc
    if not isinstance(data, dict):
        raise InvalidBookInfo("Book info YAML root must be a mapping.")

    known = {item.name for item in fields(HeaderInfo)}
    values: dict[str, str] = {}
    for key, value in data.items():
        name = _snake(str(key))
        if name in _TITLE_KEYS:
            name = "title"
        if name not in known or value is None:
            continue
        values[name] = str(value).strip()
    return HeaderInfo(**values)


def load_header_info(path: Path) -> HeaderInfo:
    return parse_header_info(path.read_text(encoding="utf-8"))


def _snake(key: str) -> str:
    return _CAMEL_RE.sub("_", key.strip()).replace("-", "_").lower()


def _label(name: str) -> str:
    return " ".join(part.capitalize() for part in name.split("_"))
