from MicroPrint.model import Block, BreakToken, LinkSegment, LinkToken, NormalizedDocument, TextSegment, WordToken
from MicroPrint.normalizer import count_words, normalize_document
from MicroPrint.pipeline import prepare_document
from MicroPrint.tokenizer import is_bare_url, split_words, tokenize


def test_plain_text_tokens_end_paragraphs_with_breaks():
    document, tokens = prepare_document("a.txt", b"Alpha one two.\n\nBeta three four.")
    assert document.word_count == 6
    assert tokens == [
        WordToken("Alpha"),
        WordToken("one"),
        WordToken("two."),
        BreakToken("paragraph"),
        WordToken("Beta"),
        WordToken("three"),
        WordToken("four."),
        BreakToken("paragraph"),
    ]


def test_markdown_variants_and_links():
    document, tokens = prepare_document("a.md", b"# Intro\n\n> A quote\n\nSee [OpenAI](https://openai.com)")
    assert tokens == [
        WordToken("Intro", "heading-1"),
        BreakToken("paragraph"),
        WordToken("A", "quote"),
        WordToken("quote", "quote"),
        BreakToken("paragraph"),
        WordToken("See"),
        LinkToken("OpenAI", "https://openai.com"),
        BreakToken("paragraph"),
    ]
    assert document.word_count == 5


def test_separator_emits_rule_and_break():
    _, tokens = prepare_document("a.md", b"one\n\n---\n\ntwo")
    assert tokens == [
        WordToken("one"),
        BreakToken("paragraph"),
        BreakToken("separator"),
        BreakToken("paragraph"),
        WordToken("two"),
        BreakToken("paragraph"),
    ]


def test_emphasis_style_applies_to_every_word():
    _, tokens = prepare_document("a.md", b"*two words* **and more**")
    assert tokens[:4] == [
        WordToken("two", "body", "emphasis"),
        WordToken("words", "body", "emphasis"),
        WordToken("and", "body", "strong"),
        WordToken("more", "body", "strong"),
    ]


def test_linked_image_is_a_single_link_token():
    _, tokens = prepare_document("a.md", b"[![Image 1](https://cdn.example/i.jpg)](https://example.com/post)")
    assert tokens == [
        LinkToken("Image 1", "https://example.com/post", is_image=True),
        BreakToken("paragraph"),
    ]


def test_list_items_are_not_separated_by_paragraph_breaks():
    _, tokens = prepare_document("a.md", b"- one\n- two\n\nafter")
    breaks = [index for index, token in enumerate(tokens) if isinstance(token, BreakToken)]
    assert [token.text for token in tokens if not isinstance(token, BreakToken)] == ["-", "one", "-", "two", "after"]
    assert breaks == [len(tokens) - 1]


def test_compact_break_only_suppresses_body_and_quote_breaks():
    document = NormalizedDocument(
        format="markdown",
        blocks=[
            Block(type="heading", text="Title", level=2, compact_break=True),
            Block(type="quote", text="said", compact_break=True),
            Block(type="paragraph", text="body", compact_break=True),
        ],
        word_count=3,
    )
    assert tokenize(document) == [
        WordToken("Title", "heading-2"),
        BreakToken("paragraph"),
        WordToken("said", "quote"),
        WordToken("body"),
    ]


def test_tokenize_is_deterministic():
    document, tokens = prepare_document("a.md", b"# H\n\nSome *text* with https://example.com link.")
    assert tokenize(document) == tokens
    assert tokenize(document) == tokenize(document)


def test_word_tokens_never_contain_spaces():
    _, tokens = prepare_document("a.md", b"**a  b**\n\n`x   y`\n\n   spaced    out  ")
    words = [token for token in tokens if isinstance(token, WordToken)]
    assert all(token.text and " " not in token.text for token in words)


def test_bare_url_detection():
    assert is_bare_url("https://example.com", " https://example.com ")
    assert not is_bare_url("Example", "https://example.com")
    _, tokens = prepare_document("a.md", b"Visit https://example.com now")
    links = [token for token in tokens if isinstance(token, LinkToken)]
    assert len(links) == 1
    assert links[0].is_bare_url


def test_split_words_drops_unknown_styles():
    assert split_words("  a   b ", "quote", "underline") == [WordToken("a", "quote"), WordToken("b", "quote")]
    assert split_words("   ", "body") == []


def test_normalize_document_filters_and_coerces():
    normalized = normalize_document(
        {
            "format": "markdown",
            "blocks": [
                {"type": "heading", "text": "  Deep   heading ", "level": 9},
                {"type": "heading", "text": "Odd", "level": "x"},
                {"type": "table", "text": "as paragraph"},
                {"type": "paragraph", "text": "   "},
                None,
                {"type": "separator"},
                {
                    "type": "paragraph",
                    "inlines": [
                        {"text": " dangling ", "url": ""},
                        {"text": "", "url": "https://x.y"},
                        {"text": "bold", "inline_style": "blink"},
                    ],
                },
            ],
        }
    )
    blocks = normalized.blocks
    assert [block.type for block in blocks] == ["heading", "heading", "paragraph", "separator", "paragraph"]
    assert blocks[0].text == "Deep heading"
    assert blocks[0].level == 6
    assert blocks[1].level == 1
    assert blocks[4].inlines == [
        TextSegment("dangling"),
        LinkSegment(text="https://x.y", url="https://x.y"),
        TextSegment("bold"),
    ]
    assert blocks[4].text == "dangling https://x.y bold"
    assert normalized.word_count == 8


def test_normalize_missing_document():
    normalized = normalize_document(None)
    assert normalized.format == "unknown"
    assert normalized.blocks == []
    assert normalized.word_count == 0


def test_count_words_skips_separators():
    blocks = [Block(type="separator"), Block(text="one two"), Block(inlines=[TextSegment("three four five")])]
    assert count_words(blocks) == 5


def test_link_labelled_with_its_own_url_is_bare():
    _, tokens = prepare_document("a.md", b"See [https://x.com](https://x.com)")
    assert tokens == [
        WordToken("See"),
        LinkToken("https://x.com", "https://x.com", is_bare_url=True),
        BreakToken("paragraph"),
    ]
