"""Tests for the font-detection and class-cleanup passes."""

from figfix.model.context import RewriteContext
from figfix.model.markup import Document
from figfix.parser import parse_markup, print_markup
from figfix.passes.cleanup import ClassCleanupPass, strip_artifacts
from figfix.passes.fonts import FontDetectionPass, parse_font_class


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _run(pass_, source: str, ctx: RewriteContext | None = None) -> tuple[Document, dict[str, int], RewriteContext]:
    ctx = ctx or RewriteContext()
    doc = parse_markup(source)
    counters = pass_.run(doc, ctx)
    return doc, counters, ctx


# ---------------------------------------------------------------------------
# Font class parsing
# ---------------------------------------------------------------------------


class TestParseFontClass:
    def test_bold(self):
        assert parse_font_class("font-['Inter:Bold',sans-serif]") == ("Inter", "sans-serif", 700, False)

    def test_multi_word_family(self):
        assert parse_font_class("font-['Roboto_Mono:Regular',monospace]") == ("Roboto Mono", "monospace", 400, False)

    def test_italic_style(self):
        assert parse_font_class("font-['Inter:Semi_Bold_Italic',sans-serif]") == ("Inter", "sans-serif", 600, True)

    def test_family_only(self):
        assert parse_font_class("font-['Inter']") == ("Inter", "sans-serif", 400, False)

    def test_unknown_style_defaults_to_regular(self):
        assert parse_font_class("font-['Inter:Condensed',sans-serif]")[2] == 400

    def test_not_a_font_class(self):
        assert parse_font_class("font-bold") is None
        assert parse_font_class("font-[700]") is None


# ---------------------------------------------------------------------------
# FontDetectionPass
# ---------------------------------------------------------------------------


class TestFontDetection:
    def test_inlines_family_and_weight(self):
        doc, counters, ctx = _run(FontDetectionPass(), """<p className="font-['Inter:Bold',sans-serif] text-sm">Hi</p>""")
        style = doc.roots()[0].style
        assert style.get("fontFamily") == "Inter, sans-serif"
        assert style.get("fontWeight") == 700
        assert counters == {"fontsConverted": 1}
        assert ctx.observed_fonts == [("Inter", 700)]

    def test_class_left_for_cleanup(self):
        doc, _, _ = _run(FontDetectionPass(), """<p className="font-['Inter:Bold',sans-serif]" />""")
        assert doc.roots()[0].classes == ["font-['Inter:Bold',sans-serif]"]

    def test_italic(self):
        doc, _, _ = _run(FontDetectionPass(), """<p className="font-['Inter:Italic',sans-serif]" />""")
        style = doc.roots()[0].style
        assert style.get("fontStyle") == "italic"
        assert style.get("fontWeight") == 400

    def test_existing_family_kept_weight_added(self):
        source = """<p className="font-['Inter:Bold',sans-serif]" style={{ fontFamily: "Lato" }} />"""
        doc, counters, ctx = _run(FontDetectionPass(), source)
        style = doc.roots()[0].style
        assert style.entries == {"fontFamily": "Lato", "fontWeight": 700}
        assert counters == {"fontsConverted": 1}
        assert ctx.observed_fonts == [("Inter", 700)]

    def test_complete_font_style_unchanged(self):
        source = """<p className="font-['Inter:Bold',sans-serif]" style={{ fontFamily: "Lato", fontWeight: 300 }} />"""
        doc, counters, _ = _run(FontDetectionPass(), source)
        assert doc.roots()[0].style.entries == {"fontFamily": "Lato", "fontWeight": 300}
        assert counters == {}

    def test_opaque_style_gets_font_beneath(self):
        doc, counters, _ = _run(FontDetectionPass(), """<p className="font-['Inter:Bold',sans-serif]" style={base} />""")
        assert counters == {"fontsConverted": 1}
        assert doc.roots()[0].style is None
        assert print_markup(doc) == (
            """<p className="font-['Inter:Bold',sans-serif]" """
            """style={{ fontFamily: "Inter, sans-serif", fontWeight: 700, ...base }} />"""
        )

    def test_nested_elements(self):
        source = """<div>
  <p className="font-['Inter:Bold',sans-serif]">A</p>
  <p className="font-['Inter:Regular',sans-serif]">B</p>
</div>"""
        _, counters, ctx = _run(FontDetectionPass(), source)
        assert counters == {"fontsConverted": 2}
        assert ctx.observed_fonts == [("Inter", 700), ("Inter", 400)]


# ---------------------------------------------------------------------------
# ClassCleanupPass
# ---------------------------------------------------------------------------


class TestStripArtifacts:
    def test_font_classes_removed(self):
        assert strip_artifacts(["font-['Inter:Bold',sans-serif]", "text-sm"]) == ["text-sm"]

    def test_nowrap_pair_removed(self):
        assert strip_artifacts(["leading-none", "text-nowrap", "whitespace-pre", "shrink-0"]) == ["leading-none", "shrink-0"]

    def test_lone_nowrap_kept(self):
        assert strip_artifacts(["text-nowrap", "shrink-0"]) == ["text-nowrap", "shrink-0"]


class TestClassCleanup:
    def test_text_sizes_converted(self):
        doc, counters, _ = _run(ClassCleanupPass(), '<p className="text-[16px] text-[15px]" />')
        assert doc.roots()[0].classes == ["text-base", "text-[15px]"]
        assert counters == {"textSizesConverted": 1}

    def test_classes_fixed(self):
        doc, counters, _ = _run(ClassCleanupPass(), """<p className="font-['Inter:Bold',sans-serif] text-nowrap whitespace-pre" />""")
        assert doc.roots()[0].classes == []
        assert counters == {"classesFixed": 1}

    def test_overflow_on_first_named_div_only(self):
        source = """<div className="flex" data-name="Page">
  <div className="flex" data-name="Inner" />
</div>"""
        doc, counters, ctx = _run(ClassCleanupPass(), source)
        root = doc.roots()[0]
        assert root.classes == ["flex", "overflow-x-hidden"]
        assert root.elements()[0].classes == ["flex"]
        assert counters["overflowAdded"] == 1
        assert ctx.root_container_processed

    def test_overflow_not_duplicated(self):
        doc, counters, _ = _run(ClassCleanupPass(), '<div className="overflow-x-hidden" data-name="Page" />')
        assert doc.roots()[0].classes == ["overflow-x-hidden"]
        assert "overflowAdded" not in counters

    def test_full_width_added_to_flex_child(self):
        doc, counters, _ = _run(ClassCleanupPass(), '<div className="basis-0 grow min-h-px min-w-px" />')
        assert doc.roots()[0].classes[-1] == "w-full"
        assert counters == {"widthsAdded": 1}

    def test_explicit_width_respected(self):
        doc, counters, _ = _run(ClassCleanupPass(), '<div className="basis-0 grow w-[120px]" />')
        assert "w-full" not in doc.roots()[0].classes
        assert counters == {}

    def test_nodes_analyzed(self):
        source = '<div data-node-id="1:1">\n  <p data-node-id="1:2">x</p>\n  <p>y</p>\n</div>'
        _, counters, _ = _run(ClassCleanupPass(), source)
        assert counters == {"nodesAnalyzed": 2}

    def test_section_markers(self):
        source = "<div>\n  {/* === SECTION 1: Hero === */}\n  <p>x</p>\n</div>"
        _, counters, ctx = _run(ClassCleanupPass(), source)
        assert ctx.sections == ["SECTION 1: Hero"]
        assert counters == {"sectionsDetected": 1}

    def test_dynamic_classes_untouched(self):
        source = "<p className={cx('text-[16px]')} />"
        doc, counters, _ = _run(ClassCleanupPass(), source)
        assert print_markup(doc) == source
        assert counters == {}


class TestFontThenCleanup:
    def test_inline_font_survives_cleanup(self):
        ctx = RewriteContext()
        doc = parse_markup("""<p className="font-['Inter:Medium',sans-serif] text-[14px]">Hi</p>""")
        FontDetectionPass().run(doc, ctx)
        ClassCleanupPass().run(doc, ctx)
        p = doc.roots()[0]
        assert p.classes == ["text-sm"]
        assert p.style.get("fontFamily") == "Inter, sans-serif"
        assert p.style.get("fontWeight") == 500
