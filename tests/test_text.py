import json
import logging

import pytest

from framefit_viewer.bounds import compute_bounds
from framefit_viewer.errors import FontError
from framefit_viewer.text import (
    BLOCK_ADVANCE, BLOCK_LINE_ROWS, BLOCK_ROWS, TypefaceFont, build_block_text,
    build_text_mesh, build_typeface_text, signed_area,
)

PX = 5.0 / BLOCK_ROWS

SQUARE = "m 0 0 l 100 0 l 100 100 l 0 100"


def make_font(glyphs, **extra):
    data = {'glyphs': glyphs, 'resolution': 100, 'familyName': 'Test'}
    data.update(extra)
    return TypefaceFont(data)


# Block font

def test_block_glyph_becomes_one_box_per_run():
    mesh = build_block_text("I")
    # seven rows, each a single run of lit pixels
    assert len(mesh.vertices) == 7 * 8
    assert len(mesh.faces) == 7 * 6


def test_block_text_extent():
    bounds = compute_bounds(build_block_text("HI", size=5.0, depth=0.5))
    assert bounds.min.x == pytest.approx(0.0)
    assert bounds.max.x == pytest.approx((BLOCK_ADVANCE + 4) * PX)
    assert bounds.min.y == pytest.approx(0.0)
    assert bounds.max.y == pytest.approx(5.0)
    assert bounds.size.z == pytest.approx(0.5)


def test_block_text_newline_moves_down():
    bounds = compute_bounds(build_block_text("H\nH"))
    assert bounds.min.y == pytest.approx(-BLOCK_LINE_ROWS * PX)
    assert bounds.max.y == pytest.approx(5.0)


def test_block_text_unknown_character_uses_question_mark():
    assert build_block_text("~").vertices == build_block_text("?").vertices


def test_block_text_space_is_empty():
    assert build_block_text("   ").is_empty()


def test_block_text_is_case_insensitive():
    assert build_block_text("hi").vertices == build_block_text("HI").vertices


# Typeface fonts

def test_square_glyph_extrudes_to_caps_and_sides():
    font = make_font({'A': {'ha': 120, 'o': SQUARE}})
    mesh = build_typeface_text("A", font, size=5.0, depth=0.5)
    assert len(mesh.vertices) == 8
    # front cap, back cap, four side quads
    assert len(mesh.faces) == 6
    bounds = compute_bounds(mesh)
    assert bounds.size.x == pytest.approx(5.0)
    assert bounds.size.y == pytest.approx(5.0)
    assert bounds.size.z == pytest.approx(0.5)


def test_caps_are_wound_opposite_ways():
    font = make_font({'A': {'ha': 120, 'o': SQUARE}})
    mesh = build_typeface_text("A", font)
    front, back = mesh.faces[0], mesh.faces[1]
    front_xy = [tuple(mesh.vertices[i][:2]) for i in front]
    back_xy = [tuple(mesh.vertices[i][:2]) for i in back]
    assert signed_area(front_xy) > 0
    assert signed_area(back_xy) < 0
    assert all(mesh.vertices[i][2] == 0.0 for i in front)
    assert all(mesh.vertices[i][2] == 0.5 for i in back)


def test_clockwise_outline_is_flipped():
    cw = "m 0 0 l 0 100 l 100 100 l 100 0"
    ccw_mesh = build_typeface_text("A", make_font({'A': {'ha': 0, 'o': SQUARE}}))
    cw_mesh = build_typeface_text("A", make_font({'A': {'ha': 0, 'o': cw}}))
    front_xy = [tuple(cw_mesh.vertices[i][:2]) for i in cw_mesh.faces[0]]
    assert signed_area(front_xy) > 0
    assert len(cw_mesh.faces) == len(ccw_mesh.faces)


def test_glyph_with_hole_has_two_contours():
    outline = SQUARE + " m 25 25 l 25 75 l 75 75 l 75 25"
    font = make_font({'O': {'ha': 120, 'o': outline}})
    contours, advance = font.contours('O', 1.0, 0.0, 0.0)
    assert len(contours) == 2
    assert advance == 120
    mesh = build_typeface_text("O", font)
    assert len(mesh.faces) == 2 * (2 + 4)


def test_advance_places_next_glyph():
    font = make_font({'A': {'ha': 200, 'o': SQUARE}})
    bounds = compute_bounds(build_typeface_text("AA", font, size=5.0))
    # second glyph starts at 200 font units, scale 5/100
    assert bounds.max.x == pytest.approx(15.0)


def test_quadratic_segment_is_flattened():
    outline = "m 0 0 q 100 0 50 -50 l 100 100 l 0 100"
    font = make_font({'U': {'ha': 0, 'o': outline}})
    contours, _ = font.contours('U', 1.0, 0.0, 0.0, curve_segments=4)
    assert len(contours[0]) == 1 + 4 + 2
    assert contours[0][4] == pytest.approx((100.0, 0.0))
    # midpoint of the curve dips toward the control point
    assert contours[0][2][1] == pytest.approx(-25.0)


def test_cubic_segment_ends_on_end_point():
    outline = "m 0 0 b 100 0 30 -50 70 -50 l 100 100"
    font = make_font({'S': {'ha': 0, 'o': outline}})
    contours, _ = font.contours('S', 1.0, 0.0, 0.0, curve_segments=3)
    assert len(contours[0]) == 1 + 3 + 1
    assert contours[0][3] == pytest.approx((100.0, 0.0))


def test_closing_point_is_dropped():
    outline = "m 0 0 l 100 0 l 100 100 l 0 0"
    font = make_font({'T': {'ha': 0, 'o': outline}})
    contours, _ = font.contours('T', 1.0, 0.0, 0.0)
    assert contours == [[(0.0, 0.0), (100.0, 0.0), (100.0, 100.0)]]


def test_line_height_from_bounding_box():
    font = make_font({'A': {'ha': 0, 'o': SQUARE}},
                     resolution=1000,
                     boundingBox={'yMin': -200, 'yMax': 800},
                     underlineThickness=50)
    assert font.line_height == 1050
    bounds = compute_bounds(build_typeface_text("A\nA", font, size=5.0))
    assert bounds.min.y == pytest.approx(-1050 * 0.005)


def test_line_height_falls_back_to_resolution():
    assert make_font({}).line_height == 100


def test_missing_glyph_falls_back_to_question_mark():
    font = make_font({'?': {'ha': 50, 'o': SQUARE}})
    contours, advance = font.contours('Z', 1.0, 0.0, 0.0)
    assert len(contours) == 1
    assert advance == 50


def test_missing_glyph_without_fallback_is_skipped(caplog):
    font = make_font({'A': {'ha': 50, 'o': SQUARE}})
    with caplog.at_level(logging.WARNING, logger='framefit_viewer.text'):
        mesh = build_typeface_text("Z", font)
    assert mesh.is_empty()
    assert "no glyph" in caplog.text


def test_space_glyph_only_advances():
    font = make_font({' ': {'ha': 100}, 'A': {'ha': 100, 'o': SQUARE}})
    bounds = compute_bounds(build_typeface_text(" A", font, size=5.0))
    assert bounds.min.x == pytest.approx(5.0)


@pytest.mark.parametrize("raw, message", [
    ("{", "not valid JSON"),
    ("[]", "JSON object"),
    ("{}", "glyphs"),
    ('{"glyphs": {}, "resolution": 0}', "positive"),
    ('{"glyphs": {}, "resolution": "x"}', "resolution"),
])
def test_malformed_font_raises(raw, message):
    with pytest.raises(FontError, match=message):
        TypefaceFont.from_json(raw)


@pytest.mark.parametrize("outline, message", [
    ("m 0 0 z", "unknown outline command"),
    ("m 0 0 l 1", "truncated"),
    ("l 1 1", "before moving"),
    ("m 0 x", "bad number"),
])
def test_malformed_outline_raises(outline, message):
    font = make_font({'A': {'ha': 0, 'o': outline}})
    with pytest.raises(FontError, match=message):
        font.contours('A', 1.0, 0.0, 0.0)


def test_from_json_accepts_bytes():
    raw = json.dumps({'glyphs': {'A': {'ha': 1, 'o': SQUARE}}}).encode('utf-8')
    font = TypefaceFont.from_json(raw)
    assert font.resolution == 1000
    assert font.family_name == 'unknown'


def test_from_file_missing_raises(tmp_path):
    with pytest.raises(FontError, match="could not read"):
        TypefaceFont.from_file(tmp_path / "missing.json")


def test_signed_area_sign():
    square = [(0, 0), (1, 0), (1, 1), (0, 1)]
    assert signed_area(square) == pytest.approx(1.0)
    assert signed_area(square[::-1]) == pytest.approx(-1.0)


def test_build_text_mesh_picks_font():
    font = make_font({'A': {'ha': 100, 'o': SQUARE}})
    assert len(build_text_mesh("A", font).vertices) == 8
    assert build_text_mesh("A").vertices == build_block_text("A").vertices


def test_undecodable_font_bytes_raise_font_error():
    with pytest.raises(FontError, match="not valid JSON"):
        TypefaceFont.from_json(b"\xff\xfe{}")


def test_glyph_that_is_not_an_object_raises():
    font = make_font({'A': 5})
    with pytest.raises(FontError, match="not a JSON object"):
        font.contours('A', 1.0, 0.0, 0.0)


@pytest.mark.parametrize("advance", ["wide", None, [1]])
def test_non_numeric_advance_raises(advance):
    font = make_font({'A': {'ha': advance, 'o': SQUARE}})
    with pytest.raises(FontError, match="bad advance"):
        build_typeface_text("A", font)
