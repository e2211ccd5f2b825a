import textwrap

import pytest

from MicroPrint import markdown_parser, pipeline, text_parser
from MicroPrint.errors import UnsupportedFormat
from MicroPrint.model import LinkSegment, TextSegment


def test_supported_extensions_are_txt_and_markdown():
    assert pipeline.get_supported_extensions() == [".txt", ".md", ".markdown"]


def test_parse_plain_text_into_paragraphs():
    parsed = pipeline.parse_uploaded_document("chapter.txt", b"Alpha one two.\n\nBeta three four.", "text/plain")
    assert parsed.format == "txt"
    assert [block.type for block in parsed.blocks] == ["paragraph", "paragraph"]
    assert parsed.blocks[0].text == "Alpha one two."
    assert parsed.blocks[0].inlines == []


def test_plain_text_collapses_whitespace_and_blank_runs():
    raw = b"  first\r\nline   here \r\n\r\n\r\n   \n second\tpara  "
    parsed = text_parser.parse_text_bytes(raw)
    assert [block.text for block in parsed.blocks] == ["first line here", "second para"]


def test_empty_text_yields_no_blocks():
    assert text_parser.parse_text_bytes(b"   \n\n  ").blocks == []
    assert markdown_parser.parse_markdown("").blocks == []


def test_extension_lookup_is_case_insensitive():
    parsed = pipeline.parse_uploaded_document("NOTES.MARKDOWN", b"# Title")
    assert parsed.format == "markdown"


def test_unsupported_extension_is_rejected():
    with pytest.raises(UnsupportedFormat, match="Unsupported file format: .html"):
        pipeline.parse_uploaded_document("chapter.html", b"<html><body>hello</body></html>", "text/html")
    with pytest.raises(UnsupportedFormat, match="unknown"):
        pipeline.parse_uploaded_document("README", b"hello")


def test_input_must_be_bytes():
    with pytest.raises(TypeError):
        pipeline.parse_uploaded_document("chapter.txt", "not bytes")


def test_invalid_utf8_degrades_instead_of_failing():
    parsed = pipeline.parse_uploaded_document("chapter.md", b"caf\xe9 au lait")
    assert len(parsed.blocks) == 1
    assert parsed.blocks[0].text.endswith("au lait")


def test_parse_markdown_headings_quotes_and_paragraphs():
    document = markdown_parser.parse_markdown("# Intro\n\n> A quote\n\nBody.")
    assert [block.type for block in document.blocks] == ["heading", "quote", "paragraph"]
    assert document.blocks[0].level == 1
    assert document.blocks[1].text == "A quote"


def test_every_paragraph_of_a_blockquote_is_a_quote():
    document = markdown_parser.parse_markdown("> first\n>\n> second\n\nafter")
    assert [block.type for block in document.blocks] == ["quote", "quote", "paragraph"]


def test_inline_styles_and_links():
    document = markdown_parser.parse_markdown("See [OpenAI](https://openai.com), **Bold Move**, and *italics*.")
    inlines = document.blocks[0].inlines
    assert TextSegment("See", None) in inlines
    assert LinkSegment(text="OpenAI", url="https://openai.com") in inlines
    assert TextSegment("Bold Move", "strong") in inlines
    assert TextSegment("italics", "emphasis") in inlines


def test_code_wins_over_surrounding_strong():
    document = markdown_parser.parse_markdown("**use `grep -r` now**")
    assert document.blocks[0].inlines == [
        TextSegment("use", "strong"),
        TextSegment("grep -r", "code"),
        TextSegment("now", "strong"),
    ]


def test_adjacent_text_with_same_style_is_merged():
    document = markdown_parser.parse_markdown("one\ntwo  three")
    assert document.blocks[0].inlines == [TextSegment("one two three", None)]


def test_linked_image_becomes_image_link():
    document = markdown_parser.parse_markdown("[![Image 1](https://cdn.example/image.jpg)](https://example.com/post)")
    assert document.blocks[0].inlines == [
        LinkSegment(text="Image 1", url="https://example.com/post", is_image=True),
    ]


def test_standalone_image_with_source_is_a_link():
    document = markdown_parser.parse_markdown("Look ![a chart](chart.png) here")
    assert LinkSegment(text="a chart", url="chart.png", is_image=True) in document.blocks[0].inlines


def test_tight_bold_marker_gets_a_space():
    assert markdown_parser.normalize_loose_markdown("**bold**text") == "**bold** text"
    assert markdown_parser.normalize_loose_markdown("__bold__9") == "__bold__ 9"
    assert markdown_parser.normalize_loose_markdown("**bold**.") == "**bold**."

    document = markdown_parser.parse_markdown("**Bear case: disappointed devs.**Two examples follow.")
    assert document.blocks[0].inlines[0] == TextSegment("Bear case: disappointed devs.", "strong")
    assert document.blocks[0].inlines[1] == TextSegment("Two examples follow.", None)


def test_list_markers_and_compact_breaks():
    md_text = textwrap.dedent(
        """
        3. First item
        4. Second item

        - One

          continued
        - Two

        After list
        """
    )
    blocks = markdown_parser.parse_markdown(md_text).blocks
    assert [block.text for block in blocks] == [
        "3. First item",
        "4. Second item",
        "- One",
        "continued",
        "- Two",
        "After list",
    ]
    assert [block.compact_break for block in blocks] == [True, True, True, True, True, False]
    assert blocks[0].inlines[0] == TextSegment("3.", None)


def test_horizontal_rule_and_code_blocks():
    md_text = "Before\n\n---\n\n```python\nprint(  'hi' )\n```\n"
    blocks = markdown_parser.parse_markdown(md_text).blocks
    assert blocks[1].type == "separator"
    assert blocks[1].text == ""
    assert blocks[2].type == "paragraph"
    assert blocks[2].text == "print( 'hi' )"
    assert blocks[2].inlines == [TextSegment("print( 'hi' )", "code")]


def test_bare_urls_are_linkified():
    document = markdown_parser.parse_markdown("Visit https://example.com today")
    assert any(isinstance(segment, LinkSegment) for segment in document.blocks[0].inlines)
