"""Tests for variable-placeholder resolution and the safety-net sweep."""

import logging

import pytest

from figfix.model.variables import VariableTable
from figfix.resolution import (
    ResolutionKind,
    clean_variable_name,
    is_placeholder,
    normalize_style_value,
    resolve_border_shorthand,
    resolve_token,
)
from figfix.safety_net import apply_safety_net
from figfix.stylesheet.model import SynthesizedClassTable


VARIABLES = VariableTable.from_mapping({
    "Colors/White": "#ffffff",
    "Colors/Brand": "#ff5500",
    "Margin/R": "32",
})


@pytest.fixture()
def table() -> SynthesizedClassTable:
    return SynthesizedClassTable()


def _resolve(token: str, table: SynthesizedClassTable, variables: VariableTable = VARIABLES):
    resolution = resolve_token(token, variables, table)
    assert resolution is not None
    return resolution


# ---------------------------------------------------------------------------
# Names
# ---------------------------------------------------------------------------


class TestCleanVariableName:
    def test_escaped_slash(self):
        assert clean_variable_name("--colors\\/white") == "colors-white"

    def test_lowercased(self):
        assert clean_variable_name("--Text\\/Primary") == "text-primary"

    def test_parentheses(self):
        assert clean_variable_name("--opacity(50)") == "opacity_50"

    def test_dot_spelled_out(self):
        assert clean_variable_name("--spacing\\/0.5") == "spacing-0dot5"


class TestIsPlaceholder:
    @pytest.mark.parametrize(
        "token",
        [
            "p-[var(--margin\\/r,32px)]",
            "bg-[var(--colors\\/white,#fff)]",
            "text-[color:var(--text,#111)]",
            "hover:bg-[var(--a,#000)]",
            "gap-x-[var(--gap)]",
        ],
    )
    def test_placeholders(self, token):
        assert is_placeholder(token)

    @pytest.mark.parametrize("token", ["p-4", "bg-[#fff]", "p-margin-r", "text-[16px]"])
    def test_not_placeholders(self, token):
        assert not is_placeholder(token)


# ---------------------------------------------------------------------------
# resolve_token
# ---------------------------------------------------------------------------


class TestResolveToken:
    def test_plain_token_is_none(self, table):
        assert resolve_token("flex", VARIABLES, table) is None

    def test_spacing_synthesized(self, table):
        res = _resolve("p-[var(--margin\\/r,32px)]", table)
        assert res.kind is ResolutionKind.SYNTHESIZED
        assert res.token == "p-margin-r"
        assert res.entry.declarations() == [("padding", "var(--margin-r, 32px)")]

    @pytest.mark.parametrize(
        "token",
        ["p-[var(--margin/r,32px)]", "p-[var(--margin\\\\/r,32px)]"],
    )
    def test_escaping_levels_share_a_class(self, table, token):
        _resolve("p-[var(--margin\\/r,32px)]", table)
        assert _resolve(token, table).token == "p-margin-r"
        assert len(table) == 1

    def test_compound_property(self, table):
        res = _resolve("px-[var(--margin\\/r,32px)]", table)
        assert res.token == "px-margin-r"
        assert res.entry.properties == ("padding-left", "padding-right")

    def test_canonical_color_from_table(self, table):
        res = _resolve("bg-[var(--colors\\/white,#fafafa)]", table)
        assert res.kind is ResolutionKind.CANONICAL
        assert res.token == "bg-white"
        assert len(table) == 0

    def test_canonical_color_from_fallback(self, table):
        res = _resolve("text-[var(--unknown,#000)]", table)
        assert res.token == "text-black"

    def test_brand_color_synthesized(self, table):
        res = _resolve("bg-[var(--colors\\/brand,#ff5500)]", table)
        assert res.kind is ResolutionKind.SYNTHESIZED
        assert res.token == "bg-colors-brand"
        assert res.entry.declarations() == [("background-color", "var(--colors-brand, #ff5500)")]

    def test_typed_color_text(self, table):
        res = _resolve("text-[color:var(--text\\/primary,#111)]", table)
        assert res.token == "text-text-primary"
        assert res.entry.properties == ("color",)

    def test_typed_length_text(self, table):
        res = _resolve("text-[length:var(--size\\/body,16px)]", table)
        assert res.token == "text-size-size-body"
        assert res.entry.properties == ("font-size",)

    def test_untyped_text_length_fallback(self, table):
        res = _resolve("text-[var(--size\\/body,16px)]", table)
        assert res.entry.properties == ("font-size",)

    def test_border_length_and_color(self, table):
        width = _resolve("border-[var(--stroke,1px)]", table)
        color = _resolve("border-[var(--line,#e5e5e5)]", table)
        assert width.token == "border-w-stroke"
        assert width.entry.properties == ("border-width",)
        assert color.token == "border-line"
        assert color.entry.properties == ("border-color",)

    def test_unknown_prefix_inlines_fallback(self, table):
        res = _resolve("foo-[var(--x,3px)]", table)
        assert res.kind is ResolutionKind.FALLBACK
        assert res.token == "foo-[3px]"

    def test_variant_inlines_fallback(self, table):
        res = _resolve("hover:bg-[var(--colors\\/brand,#ff5500)]", table)
        assert res.kind is ResolutionKind.FALLBACK
        assert res.token == "hover:bg-[#ff5500]"
        assert len(table) == 0

    def test_unknown_prefix_without_fallback(self, table):
        res = _resolve("foo-[var(--x)]", table)
        assert res.kind is ResolutionKind.UNRECOGNIZED
        assert res.token == "foo-[var(--x)]"
        assert not res.changed

    def test_no_fallback_binds_bare_variable(self, table):
        res = _resolve("gap-[var(--gap)]", table)
        assert res.entry.declaration_value() == "var(--gap)"

    def test_dotted_name_makes_a_valid_class(self, table):
        variables = VariableTable.from_mapping({"Spacing/0.5": "2"})
        res = _resolve("gap-[var(--spacing\\/0.5,2px)]", table, variables)
        assert res.token == "gap-spacing-0dot5"
        assert res.entry.variable == "--spacing-0dot5"
        assert "--spacing-0dot5" in variables.css_properties()


class TestDeduplication:
    def test_same_placeholder_one_entry(self, table):
        a = _resolve("p-[var(--margin\\/r,32px)]", table)
        b = _resolve("p-[var(--margin\\/r,32px)]", table)
        assert a.token == b.token
        assert len(table) == 1

    def test_conflicting_fallback_first_wins(self, table, caplog):
        _resolve("p-[var(--margin\\/r,32px)]", table)
        with caplog.at_level(logging.WARNING, logger="figfix.stylesheet.model"):
            res = _resolve("p-[var(--margin\\/r,16px)]", table)
        assert res.entry.fallback == "32px"
        assert len(table) == 1
        assert "already bound" in caplog.text


class TestBorderShorthand:
    def test_three_values(self, table):
        assert resolve_border_shorthand("border-[0px_0px_2px]", table) == "border-w-0-0-2"
        entry = table.get("border-w-0-0-2")
        assert entry.declarations() == [("border-width", "0px 0px 2px")]

    def test_four_values(self, table):
        assert resolve_border_shorthand("border-[1px_0px_1px_0px]", table) == "border-w-1-0-1-0"

    def test_fractional_widths(self, table):
        assert resolve_border_shorthand("border-[0.5px_0px_0.5px]", table) == "border-w-0dot5-0-0dot5"
        assert table.get("border-w-0dot5-0-0dot5").declarations() == [("border-width", "0.5px 0px 0.5px")]

    def test_single_value_is_not_shorthand(self, table):
        assert resolve_border_shorthand("border-[2px]", table) is None


class TestNormalizeStyleValue:
    def test_escaped_name(self):
        assert normalize_style_value("var(--colors\\/white, #fff)") == "var(--colors-white, #fff)"

    def test_clean_value_unchanged(self):
        assert normalize_style_value("var(--colors-white, #fff)") == "var(--colors-white, #fff)"


# ---------------------------------------------------------------------------
# Safety net
# ---------------------------------------------------------------------------


class TestSafetyNet:
    def test_nothing_found(self, table):
        code = '<div className="p-4" />'
        result = apply_safety_net(code, VARIABLES, table)
        assert (result.found, result.fixed) == (0, 0)
        assert result.code == code
        assert not result.intervened

    def test_resolves_residue(self, table):
        code = '{open && <div className="flex p-[var(--margin\\/r,32px)]" />}'
        result = apply_safety_net(code, VARIABLES, table)
        assert (result.found, result.fixed) == (1, 1)
        assert result.code == '{open && <div className="flex p-margin-r" />}'
        assert "p-margin-r" in table

    def test_unresolvable_counted_not_fixed(self, table):
        code = "<div className='foo-[var(--x)] bg-[var(--colors\\/white,#fff)]' />"
        result = apply_safety_net(code, VARIABLES, table)
        assert result.found == 2
        assert result.fixed == 1
        assert "bg-white" in result.code
        assert "foo-[var(--x)]" in result.code

    def test_font_class_quotes_do_not_end_attribute(self, table):
        code = """<p className="font-['Inter:Bold',sans-serif] text-[var(--unknown,#000)]" />"""
        result = apply_safety_net(code, VARIABLES, table)
        assert result.fixed == 1
        assert "font-['Inter:Bold',sans-serif] text-black" in result.code

    def test_fixed_never_exceeds_found(self, table):
        code = '<a className="hover:bg-[var(--a,#000)] m-[var(--b,4px)]" />'
        result = apply_safety_net(code, VARIABLES, table)
        assert 0 <= result.fixed <= result.found

    def test_logs_intervention(self, table, caplog):
        with caplog.at_level(logging.WARNING, logger="figfix.safety_net"):
            apply_safety_net('<i className="m-[var(--b,4px)]" />', VARIABLES, table)
        assert "Safety net resolved 1 of 1" in caplog.text

    def test_unresolvable_only_is_not_an_intervention(self, table, caplog):
        with caplog.at_level(logging.DEBUG, logger="figfix.safety_net"):
            result = apply_safety_net('<i className="foo-[var(--x)]" />', VARIABLES, table)
        assert (result.found, result.fixed) == (1, 0)
        assert not result.intervened
        assert "left 1 unresolvable" in caplog.text
        assert not [r for r in caplog.records if r.levelno >= logging.WARNING]
