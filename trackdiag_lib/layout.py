# --- trackdiag_lib/layout.py ---
"""
trackdiag_lib/layout.py: Maps a marker list onto the fixed track diagram
geometry and emits an ordered list of scene primitives.
"""
import logging
from typing import Any, Dict, List, Optional, Tuple

from . import constants as C
from .errors import NoMarkersError
from .manual import parse_markers
from .models import (
    ICON_BRIDGE,
    ICON_DETECTOR,
    ICON_SIGNAL,
    SIDE_BOTTOM,
    SIDE_MID,
    DiagramInput,
    Marker,
    Scene,
    ScenePrimitive,
    format_fixed,
)

log = logging.getLogger("trackdiag.layout")

DEFAULT_STYLES = {
    "header_fill_top": "#fde8df",
    "header_fill_bottom": "#f7b69b",
    "header_stroke": "#b56a52",
    "ink": "#3f3a35",
    "muted": "#6d655c",
    "band_fill": "#f3c09e",
    "band_stroke": "#c47a58",
    "detector_fill": "#f7b69b",
    "note_fill": "#d96b46",
    "frame_fill": "#fff",
    "sans_font": "Avenir Next, Futura, Gill Sans, sans-serif",
    "serif_font": "Iowan Old Style, Palatino, serif",
}

DEFAULT_LABELS = {
    "title": "Track Summary",
    "top_track": "Top Track",
    "bottom_track": "Bottom Track",
    "segment": "Segment",
}


def km_range(markers: List[Marker]) -> Tuple[float, float]:
    kms = [m.km for m in markers]
    return min(kms), max(kms)


def marker_x(km: float, min_km: float, max_km: float, left: float, right: float) -> float:
    """Linear km-to-x mapping; a zero span is treated as 1 so all markers sit at `left`."""
    span = (max_km - min_km) or 1
    return left + (km - min_km) / span * (right - left)


def marker_y(side: str) -> float:
    if side == SIDE_BOTTOM:
        return C.BOTTOM_TRACK_Y
    if side == SIDE_MID:
        return (C.TOP_TRACK_Y + C.BOTTOM_TRACK_Y) / 2
    return C.TOP_TRACK_Y


class LayoutEngine:
    """Builds the scene description of a track diagram."""

    def __init__(
        self,
        style_options: Optional[Dict[str, Any]] = None,
        labels: Optional[Dict[str, str]] = None,
    ):
        self.styles = dict(DEFAULT_STYLES)
        self.styles.update({k: v for k, v in (style_options or {}).items() if v})
        self.labels = dict(DEFAULT_LABELS)
        self.labels.update({k: v for k, v in (labels or {}).items() if v})
        self.left, self.right = C.TRACK_LEFT, C.TRACK_RIGHT

    def build_scene(self, diagram: DiagramInput) -> Scene:
        """
        Lays out the diagram. Raises NoMarkersError when nothing can be placed.

        Emission order is the drawing order: header, frame, tracks, segment
        band, markers, then the optional between caption.
        """
        markers = parse_markers(diagram.markers_text)
        if not markers:
            log.warning("No markers survived parsing; nothing to lay out.")
            raise NoMarkersError()

        min_km, max_km = km_range(markers)
        log.debug("Scale: %.3f..%.3f km over x=%d..%d", min_km, max_km, self.left, self.right)

        prims: List[ScenePrimitive] = []
        self._add_header(prims, diagram)
        self._add_tracks(prims, diagram)
        for marker in markers:
            self._add_marker(prims, marker, min_km, max_km)
        self._add_between_caption(prims, diagram)

        log.info("Laid out %d markers as %d primitives.", len(markers), len(prims))
        return Scene(
            width=C.CANVAS_WIDTH,
            height=C.CANVAS_HEIGHT,
            primitives=prims,
            marker_count=len(markers),
            min_km=min_km,
            max_km=max_km,
        )

    def _add_header(self, prims, diagram):
        s = self.styles
        prims.append(
            ScenePrimitive(
                "rect",
                {
                    **C.HEADER_BOX,
                    "rx": 6,
                    "fill": f"url(#{C.GRADIENT_ID})",
                    "stroke": s["header_stroke"],
                    "stroke-width": 2,
                },
            )
        )
        prims.append(
            ScenePrimitive(
                "text",
                {
                    "x": C.CANVAS_WIDTH / 2,
                    "y": C.TITLE_Y,
                    "text-anchor": "middle",
                    "font-size": "20",
                    "font-family": s["sans_font"],
                },
                diagram.title.strip() or self.labels["title"],
            )
        )
        for i, item in enumerate(diagram.item_list[: C.MAX_ITEMS]):
            prims.append(
                ScenePrimitive(
                    "text",
                    {
                        "x": C.ITEM_X,
                        "y": C.ITEM_FIRST_Y + i * C.ITEM_SPACING,
                        "font-size": "13",
                        "font-family": s["serif_font"],
                    },
                    f"□ {item}",
                )
            )

    def _add_tracks(self, prims, diagram):
        s = self.styles
        prims.append(
            ScenePrimitive(
                "rect",
                {**C.FRAME_BOX, "fill": s["frame_fill"], "stroke": s["ink"], "stroke-width": 2},
            )
        )
        for y in (C.TOP_TRACK_Y, C.BOTTOM_TRACK_Y):
            prims.append(
                ScenePrimitive(
                    "line",
                    {
                        "x1": self.left,
                        "y1": y,
                        "x2": self.right,
                        "y2": y,
                        "stroke": s["ink"],
                        "stroke-width": 2,
                    },
                )
            )
        track_labels = (
            (C.TOP_TRACK_Y - C.TRACK_LABEL_ABOVE, diagram.top_track_label, "top_track"),
            (C.BOTTOM_TRACK_Y + C.TRACK_LABEL_BELOW, diagram.bottom_track_label, "bottom_track"),
        )
        for y, text, default_key in track_labels:
            prims.append(
                ScenePrimitive(
                    "text",
                    {"x": self.left, "y": y, "font-size": "12", "font-family": s["sans_font"]},
                    text or self.labels[default_key],
                )
            )

        seg_x = (self.left + self.right) / 2
        prims.append(
            ScenePrimitive(
                "rect",
                {
                    "x": seg_x - C.SEGMENT_BAND_WIDTH / 2,
                    "y": C.TOP_TRACK_Y - C.SEGMENT_BAND_RISE,
                    "width": C.SEGMENT_BAND_WIDTH,
                    "height": C.SEGMENT_BAND_HEIGHT,
                    "fill": s["band_fill"],
                    "stroke": s["band_stroke"],
                    "stroke-width": 1.5,
                },
            )
        )
        caption_y = C.TOP_TRACK_Y + C.SEGMENT_CAPTION_DROP
        prims.append(
            ScenePrimitive(
                "text",
                {
                    "x": seg_x,
                    "y": caption_y,
                    "text-anchor": "middle",
                    "font-size": "11",
                    "font-family": s["sans_font"],
                    "transform": f"rotate(90 {seg_x:g} {caption_y:g})",
                },
                diagram.segment_label or self.labels["segment"],
            )
        )

    def _add_marker(self, prims, marker: Marker, min_km: float, max_km: float):
        s = self.styles
        x = marker_x(marker.km, min_km, max_km, self.left, self.right)
        y = marker_y(marker.side)

        if marker.icon == ICON_SIGNAL:
            prims.append(
                ScenePrimitive("circle", {"cx": x, "cy": y, "r": C.SIGNAL_RADIUS, "fill": s["muted"]})
            )
            stub_start, stub_end = C.SIGNAL_STUB
            prims.append(
                ScenePrimitive(
                    "line",
                    {
                        "x1": x + stub_start,
                        "y1": y,
                        "x2": x + stub_end,
                        "y2": y,
                        "stroke": s["muted"],
                        "stroke-width": 2,
                    },
                )
            )
        elif marker.icon == ICON_DETECTOR:
            half = C.DETECTOR_SIZE / 2
            prims.append(
                ScenePrimitive(
                    "rect",
                    {
                        "x": x - half,
                        "y": y - half,
                        "width": C.DETECTOR_SIZE,
                        "height": C.DETECTOR_SIZE,
                        "fill": s["detector_fill"],
                        "stroke": s["header_stroke"],
                        "stroke-width": 1.5,
                    },
                )
            )
        elif marker.icon == ICON_BRIDGE:
            # Bridges span the whole structure whatever side they were given.
            prims.append(
                ScenePrimitive(
                    "rect",
                    {
                        "x": x - C.BRIDGE_WIDTH / 2,
                        "y": C.TOP_TRACK_Y - C.BRIDGE_HEIGHT / 2,
                        "width": C.BRIDGE_WIDTH,
                        "height": C.BRIDGE_HEIGHT,
                        "fill": s["band_fill"],
                        "stroke": s["band_stroke"],
                        "stroke-width": 1.5,
                    },
                )
            )
        else:
            prims.append(
                ScenePrimitive("circle", {"cx": x, "cy": y, "r": C.NOTE_RADIUS, "fill": s["note_fill"]})
            )

        label_y = y + C.LABEL_OFFSET_BELOW if marker.side == SIDE_BOTTOM else y - C.LABEL_OFFSET_ABOVE
        prims.append(
            ScenePrimitive(
                "text",
                {
                    "x": x,
                    "y": label_y,
                    "text-anchor": "middle",
                    "font-size": "10",
                    "font-family": s["serif_font"],
                    "fill": s["ink"],
                },
                f"{format_fixed(marker.km)} {marker.label}".strip(),
            )
        )

    def _add_between_caption(self, prims, diagram):
        from_text, to_text = diagram.from_label.strip(), diagram.to_label.strip()
        if not (from_text or to_text):
            return
        prims.append(
            ScenePrimitive(
                "text",
                {
                    "x": C.BETWEEN_CAPTION_X,
                    "y": C.BETWEEN_CAPTION_Y,
                    "text-anchor": "end",
                    "font-size": "11",
                    "font-family": self.styles["sans_font"],
                    "fill": self.styles["muted"],
                },
                f"Between {from_text or '?'} and {to_text or '?'}",
            )
        )
