from __future__ import annotations

from functools import lru_cache
from pathlib import Path

from jinja2 import Environment, FileSystemLoader, select_autoescape

from .booklet_format import PARAGRAPH_BREAK_TEXT
from .headers import END_MARKER_TEXT
from .model import BreakToken, LinkToken, Token

TEMPLATE_DIR = Path(__file__).resolve().parent / "template"


@lru_cache(maxsize=None)
def get_environment() -> Environment:
    """Shared environment; HTML templates autoescape, the stylesheet does not."""
    loader = FileSystemLoader(str(TEMPLATE_DIR))
    env = Environment(
        loader=loader,
        autoescape=select_autoescape(["html"]),
        trim_blocks=True,
        lstrip_blocks=True,
    )
    env.filters["token_kind"] = token_kind
    env.filters["token_classes"] = token_classes
    env.globals["paragraph_break"] = PARAGRAPH_BREAK_TEXT
    env.globals["end_marker_text"] = END_MARKER_TEXT
    return env


def token_kind(token: Token) -> str:
    if isinstance(token, BreakToken):
        return "separator" if token.variant == "separator" else "break"
    return "link" if isinstance(token, LinkToken) else "word"


def token_classes(token: Token) -> str:
    classes = ["token", f"token-{token.variant}"]
    if token.inline_style:
        classes.append(f"token-inline-{token.inline_style}")
    if isinstance(token, LinkToken):
        classes.append("token-link-bare" if token.is_bare_url else "token-link-label")
        if token.is_image:
            classes.append("token-link-image")
    return " ".join(classes)
