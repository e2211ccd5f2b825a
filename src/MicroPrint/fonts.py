from __future__ import annotations

import logging
import subprocess
from dataclasses import dataclass
from typing import Iterable, Optional

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class FontOption:
    value: str
    label: str
    stack: str
    detection_families: tuple[str, ...]
    # standard PDF faces used to measure text set in this family
    pdf_regular: str
    pdf_bold: str
    pdf_italic: str


FONT_OPTIONS: tuple[FontOption, ...] = (
    FontOption(
        value="arial",
        label="Arial",
        stack="Arial, 'Liberation Sans', 'Nimbus Sans L', sans-serif",
        detection_families=("Arial",),
        pdf_regular="Helvetica",
        pdf_bold="Helvetica-Bold",
        pdf_italic="Helvetica-Oblique",
    ),
    FontOption(
        value="times-new-roman",
        label="Times New Roman",
        stack="'Times New Roman', 'Liberation Serif', serif",
        detection_families=("Times New Roman",),
        pdf_regular="Times-Roman",
        pdf_bold="Times-Bold",
        pdf_italic="Times-Italic",
    ),
    FontOption(
        value="georgia",
        label="Georgia",
        stack="Georgia, 'Times New Roman', serif",
        detection_families=("Georgia",),
        pdf_regular="Times-Roman",
        pdf_bold="Times-Bold",
        pdf_italic="Times-Italic",
    ),
    FontOption(
        value="courier-new",
        label="Courier New",
        stack="'Courier New', 'Liberation Mono', monospace",
        detection_families=("Courier New",),
        pdf_regular="Courier",
        pdf_bold="Courier-Bold",
        pdf_italic="Courier-Oblique",
    ),
    FontOption(
        value="dejavu-sans",
        label="DejaVu Sans",
        stack="'DejaVu Sans', sans-serif",
        detection_families=("DejaVu Sans",),
        pdf_regular="Helvetica",
        pdf_bold="Helvetica-Bold",
        pdf_italic="Helvetica-Oblique",
    ),
    FontOption(
        value="dejavu-serif",
        label="DejaVu Serif",
        stack="'DejaVu Serif', serif",
        detection_families=("DejaVu Serif",),
        pdf_regular="Times-Roman",
        pdf_bold="Times-Bold",
        pdf_italic="Times-Italic",
    ),
    FontOption(
        value="dejavu-sans-mono",
        label="DejaVu Sans Mono",
        stack="'DejaVu Sans Mono', monospace",
        detection_families=("DejaVu Sans Mono",),
        pdf_regular="Courier",
        pdf_bold="Courier-Bold",
        pdf_italic="Courier-Oblique",
    ),
)

FONTS_BY_VALUE = {option.value: option for option in FONT_OPTIONS}

DEFAULT_FONT_FAMILY = "arial"


def normalize_family_name(family: str) -> str:
    return str(family or "").replace("'", "").replace('"', "").strip().lower()


def parse_installed_families(fc_list_output: str) -> set[str]:
    families: set[str] = set()
    for line in (fc_list_output or "").splitlines():
        for name in line.split(","):
            normalized = normalize_family_name(name)
            if normalized:
                families.add(normalized)
    return families


def detect_installed_families() -> Optional[set[str]]:
    """Ask fontconfig for installed families; ``None`` when it is unavailable."""
    try:
        output = subprocess.run(
            ["fc-list", ":", "family"],
            capture_output=True,
            text=True,
            check=True,
        ).stdout
    except (OSError, subprocess.CalledProcessError) as exc:
        logger.debug("Font detection unavailable: %s", exc)
        return None
    return parse_installed_families(output)


def get_available_font_options(installed_families: Optional[Iterable[str]] = None) -> list[dict[str, str]]:
    families = set(installed_families) if installed_families is not None else detect_installed_families()
    if families is None:
        return [{"value": option.value, "label": option.label} for option in FONT_OPTIONS]
    return [
        {"value": option.value, "label": option.label}
        for option in FONT_OPTIONS
        if any(normalize_family_name(name) in families for name in option.detection_families)
    ]


def get_default_font_family(font_options: Optional[Iterable[dict[str, str]]] = None) -> str:
    if font_options is None:
        font_options = [{"value": option.value, "label": option.label} for option in FONT_OPTIONS]
    values = [option["value"] for option in font_options]
    if DEFAULT_FONT_FAMILY in values:
        return DEFAULT_FONT_FAMILY
    if values:
        return values[0]
    return DEFAULT_FONT_FAMILY


def resolve_font_family(value: Optional[str], allowed_values: Optional[Iterable[str]] = None) -> str:
    allowed = set(allowed_values) if allowed_values is not None else set(FONTS_BY_VALUE)
    default = get_default_font_family(
        {"value": option.value, "label": option.label} for option in FONT_OPTIONS if option.value in allowed
    )
    normalized = str(value or "").strip().lower()
    if normalized not in FONTS_BY_VALUE or normalized not in allowed:
        return default
    return normalized


def get_font_option(value: Optional[str], allowed_values: Optional[Iterable[str]] = None) -> FontOption:
    return FONTS_BY_VALUE[resolve_font_family(value, allowed_values)]


def get_font_stack(value: Optional[str], allowed_values: Optional[Iterable[str]] = None) -> str:
    return get_font_option(value, allowed_values).stack
