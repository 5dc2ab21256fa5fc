# --- trackdiag_lib/models.py ---
"""
trackdiag_lib/models.py: Data models shared by the extraction pipeline, the
layout engine and the renderers.
"""
import math
from dataclasses import dataclass, field
from decimal import ROUND_HALF_UP, Decimal
from typing import Any, Dict, List

SIDE_TOP = "top"
SIDE_BOTTOM = "bottom"
SIDE_MID = "mid"
SIDES = (SIDE_TOP, SIDE_BOTTOM, SIDE_MID)

ICON_SIGNAL = "signal"
ICON_DETECTOR = "detector"
ICON_BRIDGE = "bridge"
ICON_NOTE = "note"
ICONS = (ICON_SIGNAL, ICON_DETECTOR, ICON_BRIDGE, ICON_NOTE)


def round_half_up(value: float) -> int:
    """Rounds to the nearest integer, halves towards positive infinity."""
    return int(math.floor(value + 0.5))


def format_fixed(value: float, places: int = 2) -> str:
    """Fixed-point text of the exact binary value, halves rounded away from zero."""
    quantum = Decimal(1).scaleb(-places)
    return str(Decimal(value).quantize(quantum, rounding=ROUND_HALF_UP))


@dataclass(frozen=True)
class TextFragment:
    """One unit of positioned text from a page's text layer (y grows upward)."""

    text: str
    x: float
    y: float


@dataclass
class Line:
    """A reading-order row of fragments sharing a quantized vertical position."""

    y: int
    parts: List[str]

    @property
    def text(self) -> str:
        return " ".join(self.parts)


@dataclass
class RawMarker:
    """A kilometre candidate found on a line, before side/icon classification."""

    km: float
    label: str
    y: int


@dataclass
class Marker:
    """A classified kilometre-position record."""

    km: float
    label: str = ""
    side: str = SIDE_TOP
    icon: str = ICON_SIGNAL


@dataclass
class ExtractedSummary:
    title: str = ""
    items: List[str] = field(default_factory=list)


@dataclass
class ExtractionResult:
    """Everything one extraction run produced, plus diagnostics."""

    summary: ExtractedSummary
    markers: List[Marker]
    page_count: int
    total_items: int
    lines_by_page: List[List[Line]] = field(default_factory=list)

    def page_text(self, index: int, limit: int = 80) -> str:
        """Returns a plain-text dump of one page's reconstructed lines."""
        if not 0 <= index < len(self.lines_by_page):
            return ""
        texts = [line.text.strip() for line in self.lines_by_page[index]]
        return "\n".join([t for t in texts if t][:limit])

    @property
    def stats_text(self) -> str:
        avg = round_half_up(self.total_items / self.page_count) if self.page_count else 0
        return (
            f"Extracted {self.total_items} text items across {self.page_count} pages "
            f"(avg {avg} per page)."
        )


@dataclass
class DiagramInput:
    """
    The editable structured state of one diagram.

    `items` and `markers_text` hold the text exactly as edited; the marker list
    used for layout is always derived from `markers_text`.
    """

    title: str = ""
    items: str = ""
    from_label: str = ""
    to_label: str = ""
    segment_label: str = ""
    top_track_label: str = ""
    bottom_track_label: str = ""
    markers_text: str = ""

    @property
    def item_list(self) -> List[str]:
        return [line.strip() for line in self.items.split("\n") if line.strip()]

    def update(self, **fields: str) -> None:
        """Replaces the given fields wholesale (last writer wins)."""
        for name, value in fields.items():
            if not hasattr(self, name):
                raise AttributeError(f"DiagramInput has no field '{name}'")
            setattr(self, name, value)


@dataclass
class ScenePrimitive:
    """One drawable unit of a diagram, independent of rendering technology."""

    kind: str  # "rect", "line", "circle" or "text"
    attrs: Dict[str, Any]
    text: str = ""


@dataclass
class Scene:
    width: int
    height: int
    primitives: List[ScenePrimitive]
    marker_count: int
    min_km: float
    max_km: float

    @property
    def status(self) -> str:
        return (
            f"Rendered {self.marker_count} markers from "
            f"{format_fixed(self.min_km)} to {format_fixed(self.max_km)} km."
        )


def example_input() -> DiagramInput:
    """Returns a fresh copy of the bundled 47km Supersite example."""
    return DiagramInput(
        title="47km Supersite Summary",
        items="\n".join(
            [
                "Rerail 1000m through 47km supersite including new .",
                "Maintenance tamp through supersite extents.",
                "Remove and replace weigh bridge and WILD",
                "Video Imaging/Rail BAM/WCM disconnection and reconnection",
                "Test and commissioning for all asset protection & monitoring equipment",
            ]
        ),
        from_label="WAN:P11A",
        to_label="WAS:P11B",
        segment_label="47.00km Supersite",
        top_track_label="Up Main",
        bottom_track_label="Down Main",
        markers_text="\n".join(
            [
                "46.820,Signal WAN 12,top,signal",
                "46.950,Weigh bridge,top,bridge",
                "47.000,WILD detector,bottom,detector",
                "47.120,Video imaging,mid,note",
                "47.300,Signal WAS 14,bottom,signal",
            ]
        ),
    )
