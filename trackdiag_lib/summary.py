# --- trackdiag_lib/summary.py ---
"""
trackdiag_lib/summary.py: Pulls the title and bulleted work items out of a
reconstructed line corpus.
"""
import logging
from typing import Iterable, Optional, Tuple

from .constants import BETWEEN_PATTERN, BULLET_PATTERN, SUMMARY_PATTERN
from .models import ExtractedSummary, Line

log_summary = logging.getLogger("trackdiag.summary")


def extract_summary(lines: Iterable[Line]) -> ExtractedSummary:
    """The first line mentioning 'summary' is the title; bullet lines are items."""
    title, items = "", []
    for line in lines:
        text = line.text.strip()
        if not title and SUMMARY_PATTERN.search(text):
            title = text
            log_summary.debug("Title found at y=%d: '%s'", line.y, title)
        if BULLET_PATTERN.match(text):
            items.append(BULLET_PATTERN.sub("", text, count=1))
    log_summary.debug("Found %d bulleted items.", len(items))
    return ExtractedSummary(title=title, items=items)


def parse_between_sentence(sentence: str) -> Optional[Tuple[str, str]]:
    """Finds 'between <from> and <to>' in free text, e.g. a work description."""
    match = BETWEEN_PATTERN.search(sentence)
    if not match:
        return None
    return match.group(1), match.group(2)
