from trackdiag_lib.models import Line
from trackdiag_lib.summary import extract_summary, parse_between_sentence


def test_title_and_bulleted_items():
    lines = [
        Line(y=760, parts=["Works Pack"]),
        Line(y=740, parts=["47km Supersite", "Summary"]),
        Line(y=720, parts=["□", "Rerail 1000m through supersite"]),
        Line(y=700, parts=["- Maintenance tamp"]),
        Line(y=680, parts=["•Remove weigh bridge"]),
        Line(y=660, parts=["■ Video Imaging"]),
        Line(y=640, parts=["☐ Test and commissioning"]),
        Line(y=620, parts=["Second summary line"]),
        Line(y=600, parts=["Plain paragraph"]),
    ]
    summary = extract_summary(lines)
    assert summary.title == "47km Supersite Summary"
    assert summary.items == [
        "Rerail 1000m through supersite",
        "Maintenance tamp",
        "Remove weigh bridge",
        "Video Imaging",
        "Test and commissioning",
    ]


def test_bullet_line_can_also_be_the_title():
    summary = extract_summary([Line(y=10, parts=["- Summary of works"])])
    assert summary.title == "- Summary of works"
    assert summary.items == ["Summary of works"]


def test_no_title_found():
    summary = extract_summary([Line(y=10, parts=["Nothing here"])])
    assert summary.title == ""
    assert summary.items == []


def test_parse_between_sentence():
    found = parse_between_sentence("Possession between WAN:P11A and WAS:P11B tonight")
    assert found == ("WAN:P11A", "WAS:P11B")
    assert parse_between_sentence("BETWEEN a AND b") == ("a", "b")
    assert parse_between_sentence("from here to there") is None
