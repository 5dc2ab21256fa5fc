# --- trackdiag_lib/manual.py ---
"""
trackdiag_lib/manual.py: Reads and writes the hand-editable marker encoding,
one `km,label,side,icon` record per line.
"""
import logging
import math
import re
from typing import Iterable, List, Optional

from .models import ICON_SIGNAL, SIDE_TOP, Marker

log_markers = logging.getLogger("trackdiag.markers")

# Leading decimal number; trailing text such as a unit is ignored.
_NUMBER_PREFIX = re.compile(r"^[+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?")


def parse_km(raw: str) -> Optional[float]:
    """Permissively parses a kilometre value, returning None unless finite."""
    match = _NUMBER_PREFIX.match(raw.strip())
    if not match:
        return None
    value = float(match.group(0))
    return value if math.isfinite(value) else None


def parse_markers(text: str) -> List[Marker]:
    """
    Parses marker records, silently dropping lines without a usable km.

    Missing or empty side and icon fields fall back to "top" and "signal".
    """
    markers = []
    for line_num, raw_line in enumerate(text.split("\n"), start=1):
        line = raw_line.strip()
        if not line:
            continue
        fields = [f.strip() for f in line.split(",")]
        km = parse_km(fields[0])
        if km is None:
            log_markers.debug("Dropping marker line %d: '%s'", line_num, line)
            continue
        label = fields[1] if len(fields) > 1 else ""
        side = fields[2] if len(fields) > 2 and fields[2] else SIDE_TOP
        icon = fields[3] if len(fields) > 3 and fields[3] else ICON_SIGNAL
        markers.append(Marker(km=km, label=label, side=side, icon=icon))
    return markers


def format_markers(markers: Iterable[Marker], precision: Optional[int] = 3) -> str:
    """
    Writes markers back to the manual encoding.

    With `precision=None` km values are written at full precision so that
    parsing the text again gives back identical markers.
    """
    lines = []
    for m in markers:
        km = repr(m.km) if precision is None else f"{m.km:.{precision}f}"
        lines.append(f"{km},{m.label},{m.side},{m.icon}")
    return "\n".join(lines)
