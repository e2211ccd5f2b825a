from __future__ import annotations

import argparse
import json
import logging
from pathlib import Path

from . import renderer_docx, renderer_html
from .book_info import HeaderInfo, load_header_info
from .booklet_format import BORDER_STYLES, BookletOptions
from .capabilities import get_capabilities
from .errors import MicroPrintError
from .estimates import estimate_sheets, format_reading_time
from .fonts import FONTS_BY_VALUE, get_available_font_options
from .measure import measurer_for
from .paginator import paginate
from .pipeline import prepare_document
from .progress import Progress
from .utils import OUTPUT_SUFFIXES, configure_logging, read_document, resolve_output_path


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="MicroPrint",
        description="Lay out a plain-text or Markdown document as a micro-print booklet.",
    )
    parser.add_argument("input", nargs="?", type=str, help="Path to a .txt, .md or .markdown file")
    parser.add_argument("-o", "--output", type=str, help="Output path (.docx or .html)")
    parser.add_argument("--title", type=str, help="Book title printed in the headers")
    parser.add_argument("--info", type=str, help="YAML file with book metadata (author, series, year, ...)")
    parser.add_argument("--font-family", type=str, choices=sorted(FONTS_BY_VALUE), help="Font family")
    parser.add_argument("--font-size", type=str, help="Font size in points")
    parser.add_argument("--border-style", type=str, choices=BORDER_STYLES, help="Grid line style")
    parser.add_argument("--capabilities", action="store_true", help="Print accepted formats and fonts, then exit")
    parser.add_argument("--verbose", action="store_true", help="Enable debug logging")
    return parser


def report_progress(progress: Progress) -> None:
    if progress.is_error:
        logging.error("%s: %s", progress.step, progress.error_message)
    else:
        logging.info("%s (%d%%)", progress.step, progress.percentage)


def main(argv: list[str] | None = None) -> None:
    parser = build_parser()
    args = parser.parse_args(argv)
    configure_logging(verbose=args.verbose)

    if args.capabilities:
        print(json.dumps(get_capabilities(), indent=2))
        return
    if not args.input:
        parser.error("the following arguments are required: input")

    input_path = Path(args.input).expanduser()
    if not input_path.exists():
        raise FileNotFoundError(f"Input file not found: {input_path}")
    output_path = resolve_output_path(input_path, args.output)
    if output_path.suffix.lower() not in OUTPUT_SUFFIXES:
        parser.error(f"unsupported output type: {output_path.suffix or 'none'}")

    allowed_fonts = [option["value"] for option in get_available_font_options()]
    options = BookletOptions.from_values(args.font_family, args.font_size, args.border_style, allowed_fonts)

    try:
        info = load_header_info(Path(args.info)) if args.info else HeaderInfo()
        book_name = args.title or info.title or input_path.stem
        logging.info("Reading %s", input_path)
        document, tokens = prepare_document(input_path.name, read_document(input_path))
        estimated_sheets = estimate_sheets(document.word_count, options.font_size)
        info = info.with_defaults(
            word_count=document.word_count,
            read_time=format_reading_time(document.word_count),
            sheets_count=estimated_sheets or None,
            font_size=f"{options.font_size:g}",
        )
        report_progress(Progress.initial(book_name, estimated_sheets))

        booklet = paginate(
            tokens,
            measurer_for(options),
            book_name=book_name,
            header_info=info,
            on_progress=report_progress,
            estimated_sheets=estimated_sheets,
        )

        report_progress(Progress.finalizing(booklet.total_sheets))
        if output_path.suffix.lower() == ".html":
            renderer_html.write_booklet_html(booklet, output_path, options)
        else:
            renderer_docx.render_booklet_docx(booklet, output_path, options)
    except MicroPrintError as exc:
        report_progress(Progress.error(str(exc)))
        raise SystemExit(f"Generation failed: {exc}") from exc

    report_progress(Progress.complete(booklet.total_sheets))
    logging.info("Done. Saved to %s", output_path)


if __name__ == "__main__":
    main()
