from __future__ import annotations


class MicroPrintError(Exception):
    """Base class for errors surfaced to callers as a failed generation."""


class UnsupportedFormat(MicroPrintError, ValueError):
    def __init__(self, extension: str | None) -> None:
        self.extension = extension or "unknown"
        super().__init__(f"Unsupported file format: {self.extension}")


class MeasurementFailure(MicroPrintError, RuntimeError):
    """The measurement capability could not decide whether a Cell overflows."""


class InvalidBookInfo(MicroPrintError, ValueError):
    """The book metadata file is not a YAML mapping."""
