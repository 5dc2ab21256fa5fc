# --- trackdiag_lib/constants.py ---
"""
trackdiag_lib/constants.py: Patterns, classification rules and the fixed
layout geometry of a track diagram.
"""
import re

# --- EXTRACTION ---
KM_PATTERN = re.compile(r"(\d{1,3}\.\d{1,3})\s*km", re.IGNORECASE)
SUMMARY_PATTERN = re.compile(r"summary", re.IGNORECASE)
BETWEEN_PATTERN = re.compile(r"between\s+(\S+)\s+and\s+(\S+)", re.IGNORECASE)

# Open square, filled square, ballot box, hyphen, bullet.
BULLET_GLYPHS = "□■☐-•"
BULLET_PATTERN = re.compile(f"^[{re.escape(BULLET_GLYPHS)}]\\s*")

# Evaluated in order; the first rule with a matching keyword wins.
ICON_RULES = (
    ("bridge", ("bridge", "creek")),
    ("detector", ("detector", "wild")),
    ("note", ("imaging", "monitor", "weigh")),
)

LINE_Y_QUANTUM = 2

# --- LAYOUT (part of the diagram contract, not configurable) ---
CANVAS_WIDTH = 980
CANVAS_HEIGHT = 540
MARGIN_X = 80
TRACK_LEFT = MARGIN_X
TRACK_RIGHT = CANVAS_WIDTH - MARGIN_X
TOP_TRACK_Y = 280
BOTTOM_TRACK_Y = 360

HEADER_BOX = {"x": 120, "y": 24, "width": CANVAS_WIDTH - 240, "height": 140}
TITLE_Y = 54
ITEM_X = 150
ITEM_FIRST_Y = 80
ITEM_SPACING = 18
MAX_ITEMS = 6
FRAME_BOX = {"x": 40, "y": 210, "width": CANVAS_WIDTH - 80, "height": 260}
SEGMENT_BAND_WIDTH = 52
SEGMENT_BAND_HEIGHT = 160
SEGMENT_BAND_RISE = 50
SEGMENT_CAPTION_DROP = 40
TRACK_LABEL_ABOVE = 14
TRACK_LABEL_BELOW = 24
BETWEEN_CAPTION_X = CANVAS_WIDTH - 110
BETWEEN_CAPTION_Y = 230

SIGNAL_RADIUS = 6
SIGNAL_STUB = (8, 22)
DETECTOR_SIZE = 16
BRIDGE_WIDTH = 20
BRIDGE_HEIGHT = 120
NOTE_RADIUS = 4
LABEL_OFFSET_ABOVE = 14
LABEL_OFFSET_BELOW = 22

GRADIENT_ID = "summaryGrad"
