"""Test flattening of OCR annotations into pixel-space words."""
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).resolve().parents[1]))

from receipt_settle.processors.geometry.word_normalizer import flatten_words, get_box_extents
from ocr_fixtures import make_annotation, make_word


def test_symbols_are_joined_into_word_text():
    words = flatten_words(make_annotation([make_word("합계", (10, 100, 40, 120))]))
    assert len(words) == 1
    w = words[0]
    assert w.text == "합계"
    assert (w.min_x, w.max_x, w.min_y, w.max_y) == (10, 40, 100, 120)
    assert w.h == 20
    assert w.cy == 110


def test_words_without_text_are_dropped():
    annotation = make_annotation([
        {"symbols": [], "boundingBox": {"vertices": [{"x": 1, "y": 1}]}},
        {"symbols": [{"text": ""}, {}]},
        make_word("A", (0, 0, 5, 5)),
    ])
    assert [w.text for w in flatten_words(annotation)] == ["A"]


def test_normalized_vertices_are_scaled_by_image_size():
    word = {
        "symbols": [{"text": "X"}],
        "boundingBox": {
            "normalizedVertices": [
                {"x": 0.1, "y": 0.25},
                {"x": 0.2, "y": 0.25},
                {"x": 0.2, "y": 0.3},
                {"x": 0.1, "y": 0.3},
            ]
        },
    }
    w = flatten_words(make_annotation([word]), {"width": 1000, "height": 2000})[0]
    assert round(w.min_x, 6) == 100
    assert round(w.max_x, 6) == 200
    assert round(w.min_y, 6) == 500
    assert round(w.max_y, 6) == 600


def test_pixel_vertices_win_over_normalized():
    box = {
        "vertices": [{"x": 5, "y": 6}, {"x": 15, "y": 16}],
        "normalizedVertices": [{"x": 0.5, "y": 0.5}, {"x": 0.9, "y": 0.9}],
    }
    assert get_box_extents(box, {"width": 100, "height": 100}) == (5, 15, 6, 16)


def test_missing_geometry_defaults_to_zero_extents():
    assert get_box_extents(None) == (0, 0, 0, 0)
    # normalized vertices cannot be used without the image size
    assert get_box_extents({"normalizedVertices": [{"x": 0.5, "y": 0.5}]}) == (0, 0, 0, 0)

    w = flatten_words(make_annotation([{"symbols": [{"text": "Q"}]}]))[0]
    assert w.h == 1
    assert w.cy == 0


def test_omitted_coordinates_are_ignored():
    # the provider leaves out zero-valued fields
    box = {"vertices": [{"y": 10}, {"x": 30, "y": 10}, {"x": 30, "y": 20}, {"x": 12, "y": 20}]}
    assert get_box_extents(box) == (12, 30, 10, 20)


def test_malformed_annotation_yields_no_words():
    assert flatten_words(None) == []
    assert flatten_words({}) == []
    assert flatten_words({"pages": "oops"}) == []
    assert flatten_words({"pages": [{"blocks": [None, {"paragraphs": [{"words": [None]}]}]}]}) == []
