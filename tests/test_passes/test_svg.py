"""Tests for SVG composite inlining, wrapper flattening and asset resolution."""

from pathlib import Path

import pytest

from figfix.assets import AssetResolver, import_bindings, parse_svg
from figfix.model.context import RewriteContext
from figfix.parser import parse_markup, print_markup
from figfix.passes.svg import SvgCompositePass, SvgWrapperPass, camel_case, clean_path_value


SVG_TEMPLATE = """<svg width="24" height="24" viewBox="0 0 24 24" fill="none" xmlns="http://www.w3.org/2000/svg">
<path fill-rule="evenodd" clip-rule="evenodd" d="{d}" fill="var(--fill-0, white)"/>
</svg>
"""

COMPOSITE = """const imgA = "http://localhost:3845/assets/a.svg";
const imgB = "http://localhost:3845/assets/b.svg";
const imgC = "http://localhost:3845/assets/c.svg";

export default function Logo() {
  return (
    <div className="relative w-[24px] h-[24px]" data-name="Logo" data-node-id="3:1">
      <div className="absolute inset-0">
        <img alt="" className="block max-w-none size-full" src={imgA} />
      </div>
      <div className="absolute inset-0">
        <img alt="" className="block max-w-none size-full" src={imgB} />
      </div>
      <img alt="" className="absolute inset-0 block max-w-none size-full" src={imgC} />
    </div>
  );
}
"""


@pytest.fixture()
def asset_dir(tmp_path: Path) -> Path:
    for name, d in (("a", "M0 0h24v24H0z"), ("b", "M4 4h16v16H4z"), ("c", "M8 8h8v8H8z")):
        (tmp_path / f"{name}.svg").write_text(SVG_TEMPLATE.format(d=d))
    return tmp_path


# ---------------------------------------------------------------------------
# Assets
# ---------------------------------------------------------------------------


class TestAssets:
    def test_import_bindings(self):
        doc = parse_markup('import imgLogo from "./assets/logo.svg";\nconst imgIcon = "http://x/assets/i.svg";\n<div />')
        assert import_bindings(doc) == {"imgLogo": "./assets/logo.svg", "imgIcon": "http://x/assets/i.svg"}

    def test_parse_svg(self):
        asset = parse_svg(SVG_TEMPLATE.format(d="M0 0z"))
        assert asset.view_box == "0 0 24 24"
        assert asset.width == "24"
        assert asset.paths == [
            {"fill-rule": "evenodd", "clip-rule": "evenodd", "d": "M0 0z", "fill": "var(--fill-0, white)"}
        ]

    def test_paths_without_data_dropped(self):
        asset = parse_svg('<svg viewBox="0 0 1 1"><path fill="red"/><path d="M0 0z"/></svg>')
        assert asset.paths == [{"d": "M0 0z"}]

    def test_url_resolves_to_file_name(self, tmp_path):
        resolver = AssetResolver(tmp_path)
        assert resolver.resolve("http://localhost:3845/assets/abc.svg") == tmp_path / "abc.svg"

    def test_non_svg_ignored(self, tmp_path):
        (tmp_path / "photo.png").write_bytes(b"\x89PNG")
        assert AssetResolver(tmp_path).read_svg("./photo.png") is None

    def test_missing_file_logged(self, tmp_path, caplog):
        assert AssetResolver(tmp_path).read_svg("./missing.svg") is None
        assert "Cannot read SVG asset" in caplog.text

    def test_undecodable_file_logged(self, tmp_path, caplog):
        (tmp_path / "broken.svg").write_bytes(b"<svg>\xff\xfe</svg>")
        assert AssetResolver(tmp_path).read_svg("./broken.svg") is None
        assert "Cannot read SVG asset" in caplog.text


class TestPathHelpers:
    def test_camel_case(self):
        assert camel_case("fill-rule") == "fillRule"
        assert camel_case("stroke-line-join") == "strokeLineJoin"
        assert camel_case("d") == "d"
        assert camel_case("xlink:href") == "xlink:href"

    def test_clean_path_value(self):
        assert clean_path_value("var(--fill-0, white)") == "white"
        assert clean_path_value("#ff0000") == "#ff0000"


# ---------------------------------------------------------------------------
# SvgCompositePass
# ---------------------------------------------------------------------------


class TestSvgComposite:
    def test_inlines_three_layers(self, asset_dir):
        doc = parse_markup(COMPOSITE)
        counters = SvgCompositePass().run(doc, RewriteContext(asset_dir=asset_dir))
        assert counters == {"compositesInlined": 1}

        svg = doc.roots()[0]
        assert svg.tag == "svg"
        assert svg.get_string("viewBox") == "0 0 24 24"
        assert svg.get_string("fill") == "none"
        assert svg.get_string("data-node-id") == "3:1"
        assert svg.classes == ["relative", "w-[24px]", "h-[24px]"]

        paths = svg.elements()
        assert [p.tag for p in paths] == ["path", "path", "path"]
        assert paths[0].get_string("d") == "M0 0h24v24H0z"
        assert paths[0].get_string("fillRule") == "evenodd"
        assert paths[0].get_string("fill") == "white"

    def test_without_asset_dir_unrecognized(self):
        doc = parse_markup(COMPOSITE)
        counters = SvgCompositePass().run(doc, RewriteContext())
        assert counters == {"compositesUnrecognized": 1}
        assert doc.roots()[0].tag == "div"

    def test_missing_assets_unrecognized(self, tmp_path):
        doc = parse_markup(COMPOSITE)
        counters = SvgCompositePass().run(doc, RewriteContext(asset_dir=tmp_path))
        assert counters == {"compositesUnrecognized": 1}

    def test_undecodable_assets_unrecognized(self, tmp_path):
        for name in "abc":
            (tmp_path / f"{name}.svg").write_bytes(b"\xff\xfe\x00<svg>")
        doc = parse_markup(COMPOSITE)
        counters = SvgCompositePass().run(doc, RewriteContext(asset_dir=tmp_path))
        assert counters == {"compositesUnrecognized": 1}
        assert doc.roots()[0].tag == "div"

    def test_two_layers_not_a_composite(self, asset_dir):
        source = """<div className="relative w-[24px] h-[24px]">
  <img className="absolute inset-0" src={imgA} />
  <img className="absolute inset-0" src={imgB} />
</div>"""
        doc = parse_markup(source)
        assert SvgCompositePass().run(doc, RewriteContext(asset_dir=asset_dir)) == {}

    def test_unpositioned_layer_not_a_composite(self, asset_dir):
        source = """<div className="relative w-[24px] h-[24px]">
  <img className="absolute inset-0" src={imgA} />
  <img className="absolute inset-0" src={imgB} />
  <img className="block" src={imgC} />
</div>"""
        doc = parse_markup(source)
        assert SvgCompositePass().run(doc, RewriteContext(asset_dir=asset_dir)) == {}


# ---------------------------------------------------------------------------
# SvgWrapperPass
# ---------------------------------------------------------------------------


class TestSvgWrapper:
    def test_flattens_positioned_wrapper(self):
        source = """<div className="relative">
  <div className="absolute inset-[10%]" data-name="Vector" data-node-id="4:2">
    <img alt="" className="block max-w-none size-full" src={img} />
  </div>
</div>"""
        doc = parse_markup(source)
        counters = SvgWrapperPass().run(doc, RewriteContext())
        assert counters == {"wrappersFlattened": 1}
        img = doc.roots()[0].elements()[0]
        assert img.tag == "img"
        assert img.classes == ["absolute", "inset-[10%]", "block", "max-w-none", "size-full"]
        assert img.get_string("data-name") == "Vector"
        assert img.get_string("data-node-id") == "4:2"

    def test_root_wrapper_replaced(self):
        doc = parse_markup('<div className="absolute top-0 left-0">\n  <img src={img} />\n</div>')
        SvgWrapperPass().run(doc, RewriteContext())
        root = doc.roots()[0]
        assert root.tag == "img"
        assert root.classes == ["absolute", "top-0", "left-0"]

    @pytest.mark.parametrize(
        "classes",
        ["relative", "absolute size-6", "absolute w-[10px]", "absolute overflow-clip"],
    )
    def test_wrapper_kept(self, classes):
        doc = parse_markup(f'<div className="{classes}">\n  <img src={{img}} />\n</div>')
        assert SvgWrapperPass().run(doc, RewriteContext()) == {}
        assert doc.roots()[0].tag == "div"

    def test_multiple_children_kept(self):
        doc = parse_markup('<div className="absolute">\n  <img src={a} />\n  <img src={b} />\n</div>')
        assert SvgWrapperPass().run(doc, RewriteContext()) == {}

    def test_wrapper_with_text_kept(self):
        doc = parse_markup('<div className="absolute">\n  <img src={a} />\n  caption\n</div>')
        assert SvgWrapperPass().run(doc, RewriteContext()) == {}

    def test_flattened_image_keeps_surrounding_layout(self):
        source = """<div className="relative">
  <div className="absolute inset-0">
    <img src={img} />
  </div>
</div>"""
        doc = parse_markup(source)
        SvgWrapperPass().run(doc, RewriteContext())
        assert print_markup(doc) == '<div className="relative">\n  <img src={img} className="absolute inset-0" />\n</div>'
