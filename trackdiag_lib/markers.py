# --- trackdiag_lib/markers.py ---
"""
trackdiag_lib/markers.py: Detects kilometre markers on reconstructed lines and
classifies them by side and icon.
"""
import logging
import math
from typing import Iterable, List, Optional

from .constants import ICON_RULES, KM_PATTERN
from .models import ICON_SIGNAL, SIDE_BOTTOM, SIDE_TOP, Line, Marker, RawMarker

log_markers = logging.getLogger("trackdiag.markers")


def match_marker(line: Line) -> Optional[RawMarker]:
    """
    Finds the first kilometre token on a line and infers its label.

    A line is assumed to carry at most one marker. The label is the part right
    after the token (or right before it when the token ends the line). If that
    neighbour is itself a kilometre token, the label is built from every part
    that is not one instead.
    """
    match = KM_PATTERN.search(line.text)
    if not match:
        return None
    km = float(match.group(1))
    if not math.isfinite(km):
        log_markers.debug("Dropping non-finite km '%s' on line y=%d", match.group(1), line.y)
        return None

    label = ""
    km_index = next(
        (i for i, part in enumerate(line.parts) if KM_PATTERN.search(part)), None
    )
    if km_index is not None:
        if km_index + 1 < len(line.parts):
            label = line.parts[km_index + 1]
        elif km_index > 0:
            label = line.parts[km_index - 1]
        if label and KM_PATTERN.search(label):
            label = ""
    if not label:
        label = " ".join(p for p in line.parts if not KM_PATTERN.search(p)).strip()

    log_markers.debug("Line y=%d: km=%.3f label='%s'", line.y, km, label)
    return RawMarker(km=km, label=label, y=line.y)


def collect_candidates(lines: Iterable[Line]) -> List[RawMarker]:
    """Runs the matcher over a line corpus, keeping corpus order."""
    return [m for m in (match_marker(line) for line in lines) if m is not None]


def infer_icon(label: str) -> str:
    """Maps a label to an icon category by priority-ordered keyword tests."""
    low = label.lower()
    for icon, keywords in ICON_RULES:
        if any(k in low for k in keywords):
            return icon
    return ICON_SIGNAL


def median_y(candidates: List[RawMarker]) -> int:
    """The observed y at index n // 2 of the ascending sort (never an average)."""
    ys = sorted(c.y for c in candidates)
    return ys[len(ys) // 2]


def classify_markers(candidates: List[RawMarker]) -> List[Marker]:
    """
    Assigns side and icon to every candidate.

    Sides depend on the median y of the whole candidate set, so all candidates
    from all pages must be collected before calling this.
    """
    if not candidates:
        return []
    median = median_y(candidates)
    log_markers.debug("Classifying %d candidates around median y=%d", len(candidates), median)
    return [
        Marker(
            km=c.km,
            label=c.label,
            side=SIDE_TOP if c.y >= median else SIDE_BOTTOM,
            icon=infer_icon(c.label),
        )
        for c in candidates
    ]


def extract_markers(lines: Iterable[Line]) -> List[Marker]:
    """Collect-then-classify over a full line corpus."""
    return classify_markers(collect_candidates(lines))
