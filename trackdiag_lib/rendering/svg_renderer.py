# --- trackdiag_lib/rendering/svg_renderer.py ---
import logging
from typing import Any, Dict, Optional
from xml.sax.saxutils import escape, quoteattr

from trackdiag_lib.constants import GRADIENT_ID
from trackdiag_lib.layout import DEFAULT_STYLES
from trackdiag_lib.models import Scene, ScenePrimitive

log = logging.getLogger("trackdiag.render")


def _fmt(value: Any) -> str:
    """Formats an attribute value; floats get at most two decimals."""
    if isinstance(value, float):
        return f"{value:.2f}".rstrip("0").rstrip(".")
    return str(value)


class SVGRenderer:
    """Serializes a scene description into a standalone SVG document."""

    def __init__(self, scene: Scene, style_options: Optional[Dict[str, Any]] = None):
        self.scene = scene
        self.styles = dict(DEFAULT_STYLES)
        self.styles.update({k: v for k, v in (style_options or {}).items() if v})

    def render(self) -> str:
        w, h = self.scene.width, self.scene.height
        svg = [
            f'<svg xmlns="http://www.w3.org/2000/svg" viewBox="0 0 {w} {h}" '
            f'width="{w}" height="{h}">',
            "<defs>",
            f'<linearGradient id="{GRADIENT_ID}" x1="0" x2="0" y1="0" y2="1">',
            f'<stop offset="0%" stop-color="{self.styles["header_fill_top"]}"/>',
            f'<stop offset="100%" stop-color="{self.styles["header_fill_bottom"]}"/>',
            "</linearGradient>",
            "</defs>",
        ]
        svg.extend(self._render_primitive(p) for p in self.scene.primitives)
        svg.append("</svg>")
        log.info("SVG rendering complete (%d primitives).", len(self.scene.primitives))
        return "\n".join(svg)

    def _render_primitive(self, prim: ScenePrimitive) -> str:
        attrs = " ".join(f"{k}={quoteattr(_fmt(v))}" for k, v in prim.attrs.items())
        if prim.kind == "text":
            return f"<text {attrs}>{escape(prim.text)}</text>"
        return f"<{prim.kind} {attrs}/>"
