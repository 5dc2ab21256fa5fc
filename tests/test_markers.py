import pytest

from trackdiag_lib.markers import (
    classify_markers,
    extract_markers,
    infer_icon,
    match_marker,
    median_y,
)
from trackdiag_lib.models import Line, RawMarker


def test_match_marker_takes_following_part_as_label():
    raw = match_marker(Line(y=100, parts=["Rerail", "47.250km", "supersite"]))
    assert raw.km == pytest.approx(47.25)
    assert raw.label == "supersite"
    assert raw.y == 100


def test_match_marker_falls_back_to_preceding_part():
    raw = match_marker(Line(y=300, parts=["Signal WAN 12", "46.820 km"]))
    assert raw.km == pytest.approx(46.82)
    assert raw.label == "Signal WAN 12"


def test_match_marker_is_case_insensitive_and_allows_space_before_unit():
    raw = match_marker(Line(y=10, parts=["47.5 KM", "Creek"]))
    assert raw.km == pytest.approx(47.5)
    assert raw.label == "Creek"


def test_adjacent_marker_is_never_used_as_label():
    raw = match_marker(Line(y=10, parts=["Detector", "47.100km", "47.200km"]))
    assert raw.km == pytest.approx(47.1)
    assert raw.label == "Detector"


def test_two_adjacent_markers_without_text_give_empty_label():
    raw = match_marker(Line(y=10, parts=["47.100km", "47.200km"]))
    assert raw.km == pytest.approx(47.1)
    assert raw.label == ""


def test_token_split_across_parts_uses_non_matching_parts():
    raw = match_marker(Line(y=10, parts=["47.250", "km", "WILD"]))
    assert raw.km == pytest.approx(47.25)
    assert raw.label == "47.250 km WILD"


def test_line_without_token_yields_nothing():
    assert match_marker(Line(y=10, parts=["Maintenance tamp", "47 km"])) is None


def test_median_is_an_observed_value():
    cands = [RawMarker(1, "", y) for y in (30, 10, 20, 40)]
    assert median_y(cands) == 30


def test_median_split_assigns_sides():
    cands = [RawMarker(1.0, "a", 20), RawMarker(2.0, "b", 10), RawMarker(3.0, "c", 30)]
    markers = classify_markers(cands)
    assert [m.side for m in markers] == ["top", "bottom", "top"]
    assert [m.km for m in markers] == [1.0, 2.0, 3.0]


def test_classify_markers_empty():
    assert classify_markers([]) == []


@pytest.mark.parametrize(
    "label, icon",
    [
        ("Weigh bridge", "bridge"),
        ("Creek detector", "bridge"),
        ("WILD site", "detector"),
        ("Video Imaging", "note"),
        ("Rail monitor", "note"),
        ("Signal WAS 14", "signal"),
        ("", "signal"),
    ],
)
def test_infer_icon_priority(label, icon):
    assert infer_icon(label) == icon


def test_extract_markers_classifies_the_whole_corpus():
    lines = [
        Line(y=700, parts=["47km Supersite Summary"]),
        Line(y=300, parts=["46.820km", "Weigh bridge"]),
        Line(y=200, parts=["47.000km", "WILD"]),
        Line(y=100, parts=["47.300km", "Signal"]),
    ]
    markers = extract_markers(lines)
    assert [(m.km, m.side, m.icon) for m in markers] == [
        (46.82, "top", "bridge"),
        (47.0, "top", "detector"),
        (47.3, "bottom", "signal"),
    ]
