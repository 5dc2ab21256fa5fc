# --- trackdiag_lib/reconstructor.py ---
"""
trackdiag_lib/reconstructor.py: Rebuilds reading-order lines from the
unordered, positioned text fragments of a page.
"""
import logging
from collections import defaultdict
from typing import Iterable, List, Sequence, Tuple

from .constants import LINE_Y_QUANTUM
from .models import Line, TextFragment, round_half_up

log_lines = logging.getLogger("trackdiag.lines")


def quantize_y(y: float) -> int:
    """Snaps a baseline to the nearest even coordinate, rounding halves up."""
    return round_half_up(y / LINE_Y_QUANTUM) * LINE_Y_QUANTUM


def reconstruct_lines(fragments: Iterable[TextFragment]) -> List[Line]:
    """
    Groups the fragments of one page into lines, top to bottom.

    All fragments must be collected before any line is final, since fragments
    of the same row may arrive in any order.
    """
    rows = defaultdict(list)
    for frag in fragments:
        text = frag.text.strip()
        if not text:
            continue
        rows[quantize_y(frag.y)].append((frag.x, text))

    lines = []
    # y grows upward, so descending y is top-to-bottom reading order.
    for y in sorted(rows, reverse=True):
        parts = [text for _, text in sorted(rows[y])]
        lines.append(Line(y=y, parts=parts))
    log_lines.debug("Reconstructed %d lines from %d rows.", len(lines), len(rows))
    return lines


def reconstruct_document(
    pages: Sequence[Sequence[TextFragment]],
) -> Tuple[List[Line], List[List[Line]]]:
    """Reconstructs every page and concatenates the lines in page order."""
    all_lines, lines_by_page = [], []
    for page_num, fragments in enumerate(pages, start=1):
        lines = reconstruct_lines(fragments)
        log_lines.debug("Page %d: %d fragments -> %d lines", page_num, len(fragments), len(lines))
        lines_by_page.append(lines)
        all_lines.extend(lines)
    return all_lines, lines_by_page
