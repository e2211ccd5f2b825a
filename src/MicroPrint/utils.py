from __future__ import annotations

import logging
import re
from pathlib import Path
from typing import Optional

OUTPUT_SUFFIXES = (".docx", ".html")

_WHITESPACE_RE = re.compile(r"\s+")


def configure_logging(verbose: bool = False) -> None:
    """Configure a simple console logger."""
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        level=level,
        format="%(levelname)s %(message)s",
    )


def resolve_output_path(input_path: Path, output: Optional[str]) -> Path:
    if output:
        out_path = Path(output)
        if out_path.is_dir():
            out_path = out_path / f"{input_path.stem}.docx"
        return out_path
    return input_path.with_suffix(".docx")


def read_document(path: Path) -> bytes:
    return path.read_bytes()


def decode_text(data: bytes) -> str:
    return data.decode("utf-8", errors="replace").replace("\r\n", "\n").strip()


def clean_text(value) -> str:
    """Collapse runs of whitespace to single spaces and trim."""
    if value is None:
        return ""
    return _WHITESPACE_RE.sub(" ", str(value)).strip()
