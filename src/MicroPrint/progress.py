from __future__ import annotations

import math
from dataclasses import asdict, dataclass
from typing import Any, Callable, Optional


@dataclass(frozen=True)
class Progress:
    """Structured generation progress, as reported to job pollers."""

    step: str
    percentage: int
    phase: str
    current_sheet: Optional[int] = None
    total_sheets: Optional[int] = None
    is_complete: bool = False
    is_error: bool = False
    error_message: Optional[str] = None

    @classmethod
    def initial(cls, book_name: str, estimated_sheets: int = 0) -> "Progress":
        return cls(
            step=f"Initializing: {book_name}" if book_name else "Initializing",
            percentage=5,
            phase="initialization",
            current_sheet=0,
            total_sheets=estimated_sheets,
        )

    @classmethod
    def page(cls, current_sheet: int, total_sheets: int) -> "Progress":
        total = max(total_sheets, current_sheet, 1)
        percentage = min(90, math.floor(current_sheet / total * 75 + 0.5) + 10)
        return cls(
            step=f"Creating sheet {current_sheet} of {total}",
            percentage=percentage,
            phase="page_creation",
            current_sheet=current_sheet,
            total_sheets=total,
        )

    @classmethod
    def finalizing(cls, total_sheets: int) -> "Progress":
        return cls(
            step="Finished creating pages. Writing to file...",
            percentage=95,
            phase="output",
            current_sheet=total_sheets,
            total_sheets=total_sheets,
        )

    @classmethod
    def complete(cls, total_sheets: int) -> "Progress":
        return cls(
            step="Complete",
            percentage=100,
            phase="complete",
            current_sheet=total_sheets,
            total_sheets=total_sheets,
            is_complete=True,
        )

    @classmethod
    def error(cls, message: str) -> "Progress":
        return cls(
            step="Error",
            percentage=0,
            phase="error",
            is_error=True,
            error_message=message,
        )

    def to_dict(self) -> dict[str, Any]:
        payload = asdict(self)
        return {
            "step": payload["step"],
            "percentage": payload["percentage"],
            "phase": payload["phase"],
            "currentSheet": payload["current_sheet"],
            "totalSheets": payload["total_sheets"],
            "isComplete": payload["is_complete"],
            "isError": payload["is_error"],
            "errorMessage": payload["error_message"],
        }


ProgressCallback = Callable[[Progress], None]
