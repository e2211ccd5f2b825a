import subprocess

from MicroPrint import fonts
from MicroPrint.capabilities import MAX_UPLOAD_SIZE_BYTES, get_capabilities


def test_parse_installed_families_splits_aliases():
    output = "Arial,Arial Black\nDejaVu Sans\n\n'Times New Roman'\n"
    assert fonts.parse_installed_families(output) == {"arial", "arial black", "dejavu sans", "times new roman"}


def test_available_fonts_follow_installed_families():
    options = fonts.get_available_font_options({"arial", "dejavu sans"})
    assert options == [
        {"value": "arial", "label": "Arial"},
        {"value": "dejavu-sans", "label": "DejaVu Sans"},
    ]
    assert fonts.get_available_font_options(set()) == []


def test_all_fonts_offered_when_detection_is_unavailable(monkeypatch):
    def missing_fc_list(*args, **kwargs):
        raise FileNotFoundError("fc-list")

    monkeypatch.setattr(subprocess, "run", missing_fc_list)
    assert fonts.detect_installed_families() is None
    values = [option["value"] for option in fonts.get_available_font_options()]
    assert values == [option.value for option in fonts.FONT_OPTIONS]


def test_resolve_font_family_falls_back_to_default():
    assert fonts.resolve_font_family("Georgia") == "georgia"
    assert fonts.resolve_font_family("comic-sans") == "arial"
    assert fonts.resolve_font_family(None) == "arial"
    assert fonts.resolve_font_family("arial", allowed_values=["georgia", "courier-new"]) == "georgia"
    assert fonts.resolve_font_family("courier-new", allowed_values=["georgia", "courier-new"]) == "courier-new"


def test_default_font_prefers_arial():
    assert fonts.get_default_font_family() == "arial"
    assert fonts.get_default_font_family([{"value": "georgia", "label": "Georgia"}]) == "georgia"
    assert fonts.get_default_font_family([]) == "arial"


def test_font_stack_lookup():
    assert fonts.get_font_stack("courier-new") == "'Courier New', 'Liberation Mono', monospace"
    assert fonts.get_font_option("nope").pdf_regular == "Helvetica"
    assert fonts.get_font_option("times-new-roman").pdf_italic == "Times-Italic"


def test_capabilities_describe_formats_and_defaults():
    capabilities = get_capabilities(installed_families={"georgia", "dejavu sans mono"})
    assert capabilities["acceptedFormats"] == [".txt", ".md", ".markdown"]
    assert capabilities["maxUploadSizeBytes"] == MAX_UPLOAD_SIZE_BYTES == 10 * 1024 * 1024
    assert capabilities["fontOptions"] == [
        {"value": "georgia", "label": "Georgia"},
        {"value": "dejavu-sans-mono", "label": "DejaVu Sans Mono"},
    ]
    assert capabilities["defaults"] == {
        "format": ".txt",
        "borderStyle": "dashed",
        "fontSize": "6",
        "fontFamily": "georgia",
    }
