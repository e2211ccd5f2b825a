from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import PurePath
from typing import Callable

from .errors import UnsupportedFormat
from .markdown_parser import parse_markdown_bytes
from .model import NormalizedDocument, ParsedDocument, Token
from .normalizer import normalize_document
from .text_parser import parse_text_bytes
from .tokenizer import tokenize

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Importer:
    format: str
    parser: Callable[[bytes], ParsedDocument]


SUPPORTED_IMPORTERS: dict[str, Importer] = {
    ".txt": Importer(format="txt", parser=parse_text_bytes),
    ".md": Importer(format="markdown", parser=parse_markdown_bytes),
    ".markdown": Importer(format="markdown", parser=parse_markdown_bytes),
}


def get_supported_extensions() -> list[str]:
    return list(SUPPORTED_IMPORTERS)


def find_importer(original_name: str | None) -> Importer:
    extension = PurePath(original_name or "").suffix.lower()
    importer = SUPPORTED_IMPORTERS.get(extension)
    if importer is None:
        raise UnsupportedFormat(extension)
    return importer


def parse_uploaded_document(original_name: str | None, data: bytes, mime_type: str | None = None) -> ParsedDocument:
    """Pick the importer registered for the file extension and parse ``data``.

    The MIME type is informational only; the extension decides the format.
    """
    if not isinstance(data, (bytes, bytearray)):
        raise TypeError("Input buffer is required")

    importer = find_importer(original_name)
    logger.debug("Parsing %s as %s (mime %s)", original_name, importer.format, mime_type or "unknown")
    parsed = importer.parser(bytes(data))
    return ParsedDocument(format=importer.format, blocks=list(parsed.blocks or []))


def prepare_document(original_name: str | None, data: bytes, mime_type: str | None = None) -> tuple[NormalizedDocument, list[Token]]:
    """Run import, normalization and tokenization for one uploaded file."""
    parsed = parse_uploaded_document(original_name, data, mime_type)
    document = normalize_document(parsed)
    tokens = tokenize(document)
    logger.info(
        "Prepared %s document: %d blocks, %d words, %d tokens",
        document.format,
        len(document.blocks),
        document.word_count,
        len(tokens),
    )
    return document, tokens
