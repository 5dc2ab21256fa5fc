import pytest

from trackdiag_lib.manual import format_markers, parse_km, parse_markers
from trackdiag_lib.models import Marker


def test_parse_markers_with_defaults():
    markers = parse_markers("47.000,Rerail,top,signal\n48.5,,bottom,\n")
    assert markers == [
        Marker(km=47.0, label="Rerail", side="top", icon="signal"),
        Marker(km=48.5, label="", side="bottom", icon="signal"),
    ]


def test_missing_fields_default():
    assert parse_markers("50") == [Marker(km=50.0, label="", side="top", icon="signal")]


def test_fields_are_trimmed_and_blank_lines_ignored():
    markers = parse_markers("\n   \n  47.1 , Foo ,  mid , note  \n\n")
    assert markers == [Marker(km=47.1, label="Foo", side="mid", icon="note")]


def test_unusable_km_lines_are_dropped():
    text = "abc,Foo\n,NoKm\n1e999,Huge\n47.2,Kept\nkm47,Nope"
    assert [m.label for m in parse_markers(text)] == ["Kept"]


def test_order_and_duplicates_are_preserved():
    markers = parse_markers("48,b\n47,a\n48,b")
    assert [m.km for m in markers] == [48.0, 47.0, 48.0]


@pytest.mark.parametrize(
    "raw, expected",
    [("47.5km", 47.5), (" 12 ", 12.0), ("-1.5", -1.5), (".5", 0.5), ("1e2", 100.0)],
)
def test_parse_km_accepts_numeric_prefix(raw, expected):
    assert parse_km(raw) == expected


@pytest.mark.parametrize("raw", ["", "km", "inf", "nan", "1e999"])
def test_parse_km_rejects_non_finite(raw):
    assert parse_km(raw) is None


def test_format_markers_uses_three_decimals():
    text = format_markers([Marker(47.25, "Weigh bridge", "top", "bridge"), Marker(48.0)])
    assert text == "47.250,Weigh bridge,top,bridge\n48.000,,top,signal"


def test_full_precision_format_parses_back_identically():
    markers = [Marker(47.12345, "A", "mid", "note"), Marker(0.1, "", "bottom", "signal")]
    assert parse_markers(format_markers(markers, precision=None)) == markers
