from __future__ import annotations

from typing import Any, Iterable, Optional

from .booklet_format import DEFAULT_BORDER_STYLE, DEFAULT_FONT_SIZE_PT
from .fonts import get_available_font_options, get_default_font_family
from .pipeline import get_supported_extensions

MAX_UPLOAD_SIZE_BYTES = 10 * 1024 * 1024


def get_capabilities(installed_families: Optional[Iterable[str]] = None) -> dict[str, Any]:
    font_options = get_available_font_options(installed_families)
    return {
        "acceptedFormats": get_supported_extensions(),
        "maxUploadSizeBytes": MAX_UPLOAD_SIZE_BYTES,
        "fontOptions": font_options,
        "defaults": {
            "format": ".txt",
            "borderStyle": DEFAULT_BORDER_STYLE,
            "fontSize": str(DEFAULT_FONT_SIZE_PT),
            "fontFamily": get_default_font_family(font_options),
        },
    }
