from __future__ import annotations

from typing import Optional

from .booklet_format import (
    DEFAULT_FONT_SIZE_PT,
    END_MARKER_MARGIN_PT,
    END_MARKER_SCALE,
    HEADING_SCALE,
    LINE_HEIGHT,
    SEPARATOR_MARGIN_EM,
    BookletOptions,
    resolve_border_style,
)
from .templating import get_environment

DEFAULT_FONT_STACK = "Arial, sans-serif"


def build_token_styles(
    font_stack: Optional[str] = None,
    border_style: Optional[str] = None,
    font_size: float = DEFAULT_FONT_SIZE_PT,
) -> str:
    """CSS for the booklet grid, headers and token classes."""
    template = get_environment().get_template("booklet.css")
    return template.render(
        font_stack=font_stack or DEFAULT_FONT_STACK,
        border_style=resolve_border_style(border_style),
        font_size=f"{font_size:g}",
        line_height=LINE_HEIGHT,
        heading_scales=sorted(HEADING_SCALE.items()),
        separator_margin=SEPARATOR_MARGIN_EM,
        end_marker_scale=END_MARKER_SCALE,
        end_marker_margin=END_MARKER_MARGIN_PT,
    )


def styles_for(options: BookletOptions) -> str:
    return build_token_styles(options.font.stack, options.border_style, options.font_size)
