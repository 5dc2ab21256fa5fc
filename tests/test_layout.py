import pytest

from trackdiag_lib.errors import NoMarkersError
from trackdiag_lib.layout import LayoutEngine, marker_x, marker_y
from trackdiag_lib.models import DiagramInput

# Header rect + title, then frame, two tracks, two track labels, band, caption.
FRAME_PRIMITIVES = 2 + 7


@pytest.fixture
def engine():
    return LayoutEngine()


def marker_prims(scene, n_items=0):
    return scene.primitives[FRAME_PRIMITIVES + n_items :]


def test_scale_maps_km_range_onto_track():
    assert marker_x(20, 10, 30, 80, 900) == pytest.approx(490)
    assert marker_x(10, 10, 30, 80, 900) == pytest.approx(80)
    assert marker_x(30, 10, 30, 80, 900) == pytest.approx(900)


def test_zero_span_places_marker_at_left():
    assert marker_x(50, 50, 50, 80, 900) == 80
    assert marker_x(50, 50, 50, 13, 777) == 13


def test_vertical_placement_by_side():
    assert marker_y("top") == 280
    assert marker_y("bottom") == 360
    assert marker_y("mid") == 320
    assert marker_y("sideways") == 280


def test_single_marker_scene(engine):
    scene = engine.build_scene(DiagramInput(markers_text="50,Lone"))
    circle, stub, label = marker_prims(scene)
    assert circle.kind == "circle"
    assert circle.attrs["cx"] == 80
    assert circle.attrs["r"] == 6
    assert (stub.attrs["x1"], stub.attrs["x2"]) == (88, 102)
    assert label.text == "50.00 Lone"
    assert scene.min_km == scene.max_km == 50


def test_marker_positions_and_status(engine):
    scene = engine.build_scene(DiagramInput(markers_text="10,a\n20,b\n30,c"))
    circles = [p for p in scene.primitives if p.kind == "circle"]
    assert [c.attrs["cx"] for c in circles] == pytest.approx([80, 490, 900])
    assert scene.status == "Rendered 3 markers from 10.00 to 30.00 km."
    assert (scene.width, scene.height) == (980, 540)


def test_km_text_rounds_halves_up(engine):
    diagram = DiagramInput(markers_text="47.125,Creek\n47.625,Bridge,bottom,note")
    scene = engine.build_scene(diagram)
    labels = [p.text for p in scene.primitives if p.text.startswith("47.")]
    assert labels == ["47.13 Creek", "47.63 Bridge"]
    assert scene.status == "Rendered 2 markers from 47.13 to 47.63 km."


def test_no_markers_is_an_error(engine):
    with pytest.raises(NoMarkersError, match="Add at least one marker"):
        engine.build_scene(DiagramInput(markers_text="not a marker\n\n"))


def test_icon_geometry_and_label_offsets(engine):
    text = "10,Det,bottom,detector\n20,Weigh bridge,bottom,bridge\n30,,mid,note"
    prims = marker_prims(engine.build_scene(DiagramInput(markers_text=text)))
    det, det_label, bridge, bridge_label, note, note_label = prims

    assert det.kind == "rect"
    assert (det.attrs["x"], det.attrs["y"]) == (72, 352)
    assert det.attrs["width"] == det.attrs["height"] == 16
    assert det_label.attrs["y"] == 382

    # Bridges always straddle the top track, whatever their side.
    assert bridge.attrs["y"] == 220
    assert bridge.attrs["height"] == 120
    assert bridge.attrs["x"] == pytest.approx(480)
    assert bridge_label.text == "20.00 Weigh bridge"

    assert note.kind == "circle"
    assert note.attrs["r"] == 4
    assert note.attrs["cy"] == 320
    assert note_label.attrs["y"] == 306
    assert note_label.text == "30.00"


def test_header_defaults_and_item_limit(engine):
    items = "\n".join(f"item {i}" for i in range(8))
    scene = engine.build_scene(DiagramInput(items=items, markers_text="1"))
    header, title = scene.primitives[:2]
    assert header.attrs["fill"] == "url(#summaryGrad)"
    assert header.attrs["width"] == 740
    assert title.text == "Track Summary"
    item_prims = scene.primitives[2:8]
    assert [p.text for p in item_prims] == [f"□ item {i}" for i in range(6)]
    assert [p.attrs["y"] for p in item_prims] == [80, 98, 116, 134, 152, 170]


def test_track_frame_and_labels(engine):
    diagram = DiagramInput(
        top_track_label="Up Main", segment_label="47.00km Supersite", markers_text="1"
    )
    frame = engine.build_scene(diagram).primitives[2:FRAME_PRIMITIVES]
    rect, top, bottom, top_label, bottom_label, band, caption = frame
    assert (rect.attrs["x"], rect.attrs["y"], rect.attrs["width"]) == (40, 210, 900)
    assert (top.attrs["y1"], bottom.attrs["y1"]) == (280, 360)
    assert (top.attrs["x1"], top.attrs["x2"]) == (80, 900)
    assert (top_label.text, top_label.attrs["y"]) == ("Up Main", 266)
    assert (bottom_label.text, bottom_label.attrs["y"]) == ("Bottom Track", 384)
    assert (band.attrs["x"], band.attrs["y"]) == (464, 230)
    assert caption.text == "47.00km Supersite"
    assert caption.attrs["transform"] == "rotate(90 490 320)"


def test_between_caption_only_when_from_or_to_set(engine):
    scene = engine.build_scene(DiagramInput(markers_text="1"))
    assert not any(p.text.startswith("Between") for p in scene.primitives)

    scene = engine.build_scene(DiagramInput(from_label=" WAN:P11A ", markers_text="1"))
    caption = scene.primitives[-1]
    assert caption.text == "Between WAN:P11A and ?"
    assert caption.attrs["text-anchor"] == "end"
    assert (caption.attrs["x"], caption.attrs["y"]) == (870, 230)


def test_style_and_label_overrides():
    engine = LayoutEngine({"ink": "#000000", "muted": ""}, {"title": "Works"})
    scene = engine.build_scene(DiagramInput(markers_text="1"))
    assert scene.primitives[1].text == "Works"
    assert scene.primitives[2].attrs["stroke"] == "#000000"
    circle = marker_prims(scene)[0]
    assert circle.attrs["fill"] == "#6d655c"
