"""
Tests for the Document model: construction, placements, decode, encode.

Verifies:
- Fresh documents and add_placement
- Undo/redo as whole placements
- Strict decode of the markup dialect and its error types
- Byte-exact re-encode of the sample documents
- Canvas growth, mask generation and asset resolution failures
"""
import pytest

from conftest import LARCH_URL, RARCH_URL, SAMPLE_EMPTY, SAMPLE_LARCH_RARCH, SAMPLE_CLIPPED
from stampsvg.models.color import Color
from stampsvg.models.document import Document, ImageRect, ImageReference, ClipPath, Mask
from stampsvg.models.transform import Transform
from stampsvg.services.asset_resolver import DictAssetResolver
from stampsvg.utils.errors import (
    AssetResolutionError, ColorFormatError, EncodeError, MarkupStructureError, NumericParseError,
    ParseError, PolygonPointCountError, TransformConsistencyError, TransformGrammarMismatch,
)

HEADER = '<svg version="2.0" width="500" height="500" xmlns="http://www.w3.org/2000/svg">\n'


def make_doc(body: str, defs: str = "") -> str:
    """Wrap placements and defs content in a minimal document."""
    return f"{HEADER}{body}\n<defs>\n{defs}</defs>\n</svg>"


def make_g(transform="translate(32, 32) translate(-32, -32)", rect_attrs=None):
    attrs = {
        'x': '0', 'y': '0', 'width': '64', 'height': '64',
        'fill': '#000000', 'mask': f'url(#{LARCH_URL})',
    }
    attrs.update(rect_attrs or {})
    rendered = ' '.join(f'{k}="{v}"' for k, v in attrs.items() if v is not None)
    return f'<g transform="{transform}">\n<rect {rendered}/>\n</g>'


# ══════════════════════════════════════════════════════════════════════════
# Construction and placements
# ══════════════════════════════════════════════════════════════════════════

class TestDocumentDefaults:

    def test_new(self):
        doc = Document.new(800, 600)
        assert doc.version == "2.0"
        assert (doc.width, doc.height) == (800, 600)
        assert doc.placements == []
        assert doc.definitions.clip_paths == []
        assert doc.definitions.masks == []
        assert doc.dirty is False

    def test_empty_encode(self):
        assert Document.new(800, 600).to_string(DictAssetResolver()) == SAMPLE_EMPTY

    def test_resize(self):
        doc = Document.new(10, 10)
        doc.resize(20, 30)
        assert (doc.width, doc.height) == (20, 30)
        assert doc.dirty


class TestAddPlacement:

    def test_rect_spans_local_box(self):
        doc = Document.new(500, 500)
        placement = doc.add_placement(Transform.from_box(64, 64), LARCH_URL)
        assert placement.rect == ImageRect(
            x=0, y=0, width=64, height=64,
            href=ImageReference(source_url=LARCH_URL, clip_id=""),
            fill=Color(0, 0, 0),
        )
        assert doc.placements == [placement]
        assert doc.dirty

    def test_size_rounds(self):
        doc = Document.new(500, 500)
        placement = doc.add_placement(Transform(pivot_x=10.4, pivot_y=10.3), LARCH_URL)
        assert (placement.rect.width, placement.rect.height) == (21, 21)

    def test_clip_and_fill(self):
        doc = Document.new(500, 500)
        doc.add_clip_path("hole", [(0, 0), (1, 0), (1, 1)])
        placement = doc.add_placement(Transform.from_box(64, 64), LARCH_URL, "hole", Color(4, 5, 6))
        assert placement.clip_id == "hole"
        assert placement.rect.href.has_clip
        assert placement.rect.fill == Color(4, 5, 6)

    def test_duplicate_clip_id(self):
        doc = Document.new(500, 500)
        doc.add_clip_path("hole", [(0, 0), (1, 0), (1, 1)])
        with pytest.raises(ValueError):
            doc.add_clip_path("hole", [(0, 0)])

    def test_placements_are_immutable(self):
        doc = Document.new(500, 500)
        placement = doc.add_placement(Transform.from_box(64, 64), LARCH_URL)
        with pytest.raises(AttributeError):
            placement.transform = Transform()


class TestUndoRedo:

    def test_pop_and_restore(self):
        doc = Document.new(500, 500)
        first = doc.add_placement(Transform.from_box(64, 64), LARCH_URL)
        second = doc.add_placement(Transform.from_box(64, 64).moved(10, 0), RARCH_URL)
        doc.dirty = False

        popped = doc.pop_placement()
        assert popped is second
        assert doc.placements == [first]
        assert doc.dirty

        doc.restore_placement(popped)
        assert doc.placements == [first, second]

    def test_pop_empty(self):
        assert Document.new(1, 1).pop_placement() is None


# ══════════════════════════════════════════════════════════════════════════
# Decode
# ══════════════════════════════════════════════════════════════════════════

class TestDecode:

    def test_larch_rarch_fields(self, parsed_larch_rarch):
        doc = parsed_larch_rarch
        assert doc.version == "2.0"
        assert (doc.width, doc.height) == (500, 500)
        assert len(doc.placements) == 2

        first, second = doc.placements
        assert first.transform == Transform(pivot_x=64, pivot_y=64, rotation_degrees=8, scale=2)
        assert first.rect == ImageRect(0, 0, 128, 128, ImageReference(LARCH_URL), Color(0, 0, 0))
        assert second.transform == Transform(
            pivot_x=64, pivot_y=64, rotation_degrees=220, translate_x=290, translate_y=80)
        assert second.rect.fill == Color(255, 16, 8)
        assert second.source_url == RARCH_URL

        assert doc.definitions.clip_paths == []
        assert doc.definitions.masks == [Mask(LARCH_URL), Mask(RARCH_URL)]
        assert doc.dirty is False

    def test_clip_paths(self, parsed_clipped):
        doc = parsed_clipped
        assert doc.definitions.clip_paths == [
            ClipPath("hellote", [(1.0, -1.0), (2.0, 2.0), (3.0, 3.0), (4.0, 4.25)]),
            ClipPath("goodbyte", [(0.0, 0.0), (1.0, 1.0), (2.0, 2.0), (-3.0, 3.0)]),
        ]
        assert doc.placements[0].clip_id == "hellote"
        assert doc.placements[0].rect.fill == Color(4, 5, 6)
        assert doc.placements[1].clip_id == ""
        assert doc.definitions.clip_path("goodbyte").polygon[-1] == (-3.0, 3.0)

    def test_decode_alias(self, larch_rarch_text, parsed_larch_rarch):
        assert Document.decode(larch_rarch_text) == parsed_larch_rarch

    def test_no_defs(self):
        doc = Document.from_string(f"{HEADER}{make_g()}\n</svg>")
        assert len(doc.placements) == 1
        assert doc.definitions.clip_paths == []

    def test_whitespace_between_elements(self):
        text = (f'{HEADER}  <g transform="rotate(8)">\n   <rect x="0" y="0" width="64" height="64" '
                f'fill="#000000" mask="url(#{LARCH_URL})"/>\n  </g>\n\n</svg>\n')
        doc = Document.from_string(text)
        assert doc.placements[0].transform == Transform(rotation_degrees=8)

    def test_escaped_attributes(self):
        text = make_g(rect_attrs={'mask': 'url(#a&amp;b.bmp)'})
        doc = Document.from_string(make_doc(text))
        assert doc.placements[0].source_url == "a&b.bmp"


class TestDecodeErrors:

    def test_malformed_markup(self):
        with pytest.raises(MarkupStructureError):
            Document.from_string("<svg version='2.0'")

    def test_wrong_root(self):
        with pytest.raises(MarkupStructureError):
            Document.from_string('<html version="2.0" width="1" height="1"/>')

    def test_missing_root_attribute(self):
        with pytest.raises(MarkupStructureError):
            Document.from_string('<svg version="2.0" width="1"></svg>')

    def test_unknown_root_attribute(self):
        with pytest.raises(MarkupStructureError):
            Document.from_string('<svg version="2.0" width="1" height="1" viewBox="0 0 1 1"></svg>')

    def test_unknown_element(self):
        with pytest.raises(MarkupStructureError):
            Document.from_string(make_doc('<circle cx="1" cy="1" r="1"/>'))

    def test_unknown_rect_attribute(self):
        with pytest.raises(MarkupStructureError):
            Document.from_string(make_doc(make_g(rect_attrs={'stroke': 'red'})))

    def test_missing_rect_attribute(self):
        with pytest.raises(MarkupStructureError):
            Document.from_string(make_doc(make_g(rect_attrs={'mask': None})))

    def test_g_needs_exactly_one_rect(self):
        two = make_g().replace('</g>', '<rect x="0" y="0" width="1" height="1" fill="#000000" '
                                       f'mask="url(#{LARCH_URL})"/>\n</g>')
        with pytest.raises(MarkupStructureError):
            Document.from_string(make_doc(two))
        with pytest.raises(MarkupStructureError):
            Document.from_string(make_doc('<g transform="rotate(1)"></g>'))

    def test_text_content_rejected(self):
        with pytest.raises(MarkupStructureError):
            Document.from_string(make_doc(make_g() + "stray"))

    def test_two_defs(self):
        with pytest.raises(MarkupStructureError):
            Document.from_string(make_doc("<defs>\n</defs>"))

    def test_foreign_namespace(self):
        text = make_doc('<x:g xmlns:x="urn:other" transform=""/>')
        with pytest.raises(MarkupStructureError):
            Document.from_string(text)

    def test_mask_reference_format(self):
        with pytest.raises(MarkupStructureError):
            Document.from_string(make_doc(make_g(rect_attrs={'mask': LARCH_URL})))

    def test_dangling_clip_reference(self):
        text = make_doc(make_g(rect_attrs={'clip-path': 'url(#clippy)'}))
        with pytest.raises(MarkupStructureError):
            Document.from_string(text)

    def test_bad_color(self):
        with pytest.raises(ColorFormatError):
            Document.from_string(make_doc(make_g(rect_attrs={'fill': '#04050'})))

    @pytest.mark.parametrize("name,value", [
        ('x', '1.5'), ('width', '-64'), ('height', 'tall'),
    ])
    def test_bad_integer(self, name, value):
        with pytest.raises(NumericParseError):
            Document.from_string(make_doc(make_g(rect_attrs={name: value})))

    def test_bad_canvas_size(self):
        with pytest.raises(NumericParseError):
            Document.from_string('<svg version="2.0" width="-1" height="1"></svg>')

    def test_bad_transform_grammar(self):
        with pytest.raises(TransformGrammarMismatch):
            Document.from_string(make_doc(make_g(transform="matrix(1 0 0 1 0 0)")))

    def test_bad_transform_consistency(self):
        with pytest.raises(TransformConsistencyError):
            Document.from_string(make_doc(make_g(transform="translate(32, 32) rotate(4) translate(-32, -30)")))

    def test_bad_clip_polygon(self):
        defs = '<clipPath id="c">\n<polygon points="1 2 3,3 4"/>\n</clipPath>\n'
        with pytest.raises(PolygonPointCountError):
            Document.from_string(make_doc(make_g(), defs))

    def test_clip_path_needs_polygon(self):
        defs = '<clipPath id="c">\n</clipPath>\n'
        with pytest.raises(MarkupStructureError):
            Document.from_string(make_doc(make_g(), defs))

    def test_unknown_defs_child(self):
        defs = '<linearGradient id="g"/>\n'
        with pytest.raises(MarkupStructureError):
            Document.from_string(make_doc(make_g(), defs))

    def test_all_decode_errors_are_parse_errors(self):
        with pytest.raises(ParseError):
            Document.from_string(make_doc(make_g(rect_attrs={'fill': 'black'})))


# ══════════════════════════════════════════════════════════════════════════
# Encode
# ══════════════════════════════════════════════════════════════════════════

class TestEncode:

    def test_larch_rarch_byte_identical(self, parsed_larch_rarch, asset_resolver):
        assert parsed_larch_rarch.to_string(asset_resolver) == SAMPLE_LARCH_RARCH

    def test_clipped_byte_identical(self, parsed_clipped, asset_resolver):
        assert parsed_clipped.encode(asset_resolver) == SAMPLE_CLIPPED

    def test_built_document_matches_sample(self, asset_resolver):
        doc = Document.new(500, 500)
        doc.add_placement(Transform(pivot_x=64, pivot_y=64, rotation_degrees=8, scale=2), LARCH_URL)
        doc.add_placement(
            Transform(pivot_x=64, pivot_y=64, rotation_degrees=220, translate_x=290, translate_y=80),
            RARCH_URL, fill=Color(255, 16, 8))
        assert doc.to_string(asset_resolver) == SAMPLE_LARCH_RARCH

    def test_round_trip_reproduces_placements(self, asset_resolver):
        doc = Document.new(100, 100)
        doc.add_clip_path("edge", [(0.5, 0.25), (10, 0), (10, 10)])
        doc.add_placement(Transform.from_box(64, 64, 33.5).moved(12.25, -3).scaled(1.5), LARCH_URL, "edge")
        doc.add_placement(Transform.from_box(32, 48), RARCH_URL, fill=Color(1, 2, 3))
        doc.add_placement(Transform.from_box(64, 64), LARCH_URL)

        decoded = Document.from_string(doc.to_string(asset_resolver))
        assert decoded.placements == doc.placements
        assert decoded.definitions.clip_paths == doc.definitions.clip_paths
        assert decoded.definitions.masks == [Mask(LARCH_URL), Mask(RARCH_URL)]

    def test_one_mask_per_source_sorted(self, asset_resolver):
        doc = Document.new(10, 10)
        doc.add_placement(Transform.from_box(64, 64), RARCH_URL)
        doc.add_placement(Transform.from_box(64, 64), LARCH_URL)
        doc.add_placement(Transform.from_box(64, 64), RARCH_URL)
        text = doc.to_string(asset_resolver)
        assert text.count('<mask id="assets/stamps/larch.bmp">') == 1
        assert text.count('<mask id="assets/stamps/rarch.bmp">') == 1
        assert text.index(LARCH_URL + '">') < text.index(RARCH_URL + '">')

    def test_unused_clip_paths_are_kept(self, asset_resolver):
        doc = Document.new(10, 10)
        doc.add_clip_path("unused", [(0, 0), (1, 1), (2, 0)])
        assert '<clipPath id="unused">\n<polygon points="0 0,1 1,2 0"/>\n</clipPath>\n' in doc.to_string(asset_resolver)

    def test_attribute_escaping(self):
        url = 'a&b"<c>.bmp'
        doc = Document.new(10, 10)
        doc.add_placement(Transform(), url)
        text = doc.to_string(DictAssetResolver({url: "<svg/>"}))
        assert 'mask="url(#a&amp;b&quot;&lt;c&gt;.bmp)"' in text
        assert '<mask id="a&amp;b&quot;&lt;c&gt;.bmp"><svg/></mask>' in text
        assert Document.from_string(text).placements[0].source_url == url

    def test_parentheses_in_references(self):
        url = "assets/stamps/a(1).bmp"
        doc = Document.new(10, 10)
        doc.add_clip_path("edge (left)", [(0, 0), (1, 1), (2, 0)])
        doc.add_placement(Transform.from_box(64, 64), url, "edge (left)")
        text = doc.to_string(DictAssetResolver({url: "<svg/>"}))
        assert 'mask="url(#assets/stamps/a(1).bmp)" clip-path="url(#edge (left))"' in text
        decoded = Document.from_string(text)
        assert decoded.placements == doc.placements
        assert decoded.placements[0].clip_id == "edge (left)"


class TestCanvasGrowth:

    def test_grows_to_fit(self):
        doc = Document.new(10, 10)
        doc.add_placement(Transform.from_box(64, 64).moved(100, 20), LARCH_URL)
        # 100 + sqrt(32^2 + 32^2) + 32 ~ 177.25, 20 + 45.25 + 32 ~ 97.25
        assert doc.grown_size() == (177, 97)
        text = doc.to_string(DictAssetResolver({LARCH_URL: ""}))
        assert text.startswith('<svg version="2.0" width="177" height="97" ')

    def test_never_shrinks(self):
        doc = Document.new(1000, 900)
        doc.add_placement(Transform.from_box(64, 64).moved(100, 20), LARCH_URL)
        assert doc.grown_size() == (1000, 900)

    def test_negative_extent_clamps(self):
        doc = Document.new(0, 0)
        doc.add_placement(Transform.from_box(2, 2).moved(-500, -500), LARCH_URL)
        assert doc.grown_size() == (0, 0)

    def test_nominal_size_unchanged(self):
        doc = Document.new(10, 10)
        doc.add_placement(Transform.from_box(64, 64).moved(100, 20), LARCH_URL)
        doc.to_string(DictAssetResolver({LARCH_URL: ""}))
        assert (doc.width, doc.height) == (10, 10)


class TestAssetResolution:

    def test_missing_asset(self):
        doc = Document.new(10, 10)
        doc.add_placement(Transform.from_box(64, 64), LARCH_URL)
        with pytest.raises(AssetResolutionError):
            doc.to_string(DictAssetResolver())

    def test_resolver_exception_is_wrapped(self):
        def broken(url):
            raise OSError("disk on fire")

        doc = Document.new(10, 10)
        doc.add_placement(Transform.from_box(64, 64), LARCH_URL)
        with pytest.raises(AssetResolutionError) as exc_info:
            doc.to_string(broken)
        assert isinstance(exc_info.value.__cause__, OSError)
        assert isinstance(exc_info.value, EncodeError)

    def test_resolver_must_return_text(self):
        doc = Document.new(10, 10)
        doc.add_placement(Transform.from_box(64, 64), LARCH_URL)
        with pytest.raises(AssetResolutionError):
            doc.to_string(lambda url: b"<svg/>")

    def test_resolver_not_called_without_placements(self):
        calls = []
        Document.new(10, 10).to_string(lambda url: calls.append(url) or "")
        assert calls == []

    def test_default_resolver_reads_convention_paths(self, assets_dir, monkeypatch, parsed_larch_rarch):
        monkeypatch.chdir(assets_dir)
        assert parsed_larch_rarch.to_string() == SAMPLE_LARCH_RARCH

    def test_default_resolver_missing_file(self, tmp_path, monkeypatch, parsed_larch_rarch):
        monkeypatch.chdir(tmp_path)
        with pytest.raises(AssetResolutionError):
            parsed_larch_rarch.to_string()
