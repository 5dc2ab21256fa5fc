# --- trackdiag_lib/rendering/png_renderer.py ---
import logging
import re
from io import BytesIO
from typing import Any, Dict, Optional

from PIL import Image, ImageColor, ImageDraw, ImageFont

from trackdiag_lib.constants import GRADIENT_ID
from trackdiag_lib.layout import DEFAULT_STYLES
from trackdiag_lib.models import Scene, ScenePrimitive

log = logging.getLogger("trackdiag.render")

_ROTATE = re.compile(r"rotate\(\s*([-\d.]+)")
_ANCHORS = {"middle": "ms", "end": "rs"}


def _num(attrs: Dict[str, Any], key: str, default: float = 0.0) -> float:
    return float(attrs.get(key, default))


def _width(attrs: Dict[str, Any]) -> int:
    return max(1, round(_num(attrs, "stroke-width", 1)))


class PNGRenderer:
    """Rasterizes a scene description onto a white canvas of the same size."""

    def __init__(self, scene: Scene, style_options: Optional[Dict[str, Any]] = None):
        self.scene = scene
        self.styles = dict(DEFAULT_STYLES)
        self.styles.update({k: v for k, v in (style_options or {}).items() if v})
        self._fonts = {}

    def render(self) -> bytes:
        img = Image.new("RGB", (self.scene.width, self.scene.height), "#ffffff")
        draw = ImageDraw.Draw(img)
        for prim in self.scene.primitives:
            handler = getattr(self, f"_draw_{prim.kind}", None)
            if handler is None:
                log.warning("Skipping unknown primitive kind '%s'.", prim.kind)
                continue
            handler(img, draw, prim)

        buf = BytesIO()
        img.save(buf, "PNG")
        log.info("PNG rendering complete (%dx%d).", self.scene.width, self.scene.height)
        return buf.getvalue()

    def _font(self, size: float):
        key = round(size)
        if key not in self._fonts:
            self._fonts[key] = ImageFont.load_default(size=key)
        return self._fonts[key]

    def _fill(self, attrs: Dict[str, Any]):
        fill = attrs.get("fill")
        if not fill or fill == "none" or str(fill).startswith("url("):
            return None
        return fill

    def _draw_rect(self, img, draw, prim: ScenePrimitive):
        a = prim.attrs
        x0, y0 = _num(a, "x"), _num(a, "y")
        box = (x0, y0, x0 + _num(a, "width"), y0 + _num(a, "height"))
        if str(a.get("fill", "")) == f"url(#{GRADIENT_ID})":
            self._fill_gradient(draw, box)
        radius = _num(a, "rx")
        kwargs = {"fill": self._fill(a), "outline": a.get("stroke"), "width": _width(a)}
        if radius:
            draw.rounded_rectangle(box, radius=radius, **kwargs)
        else:
            draw.rectangle(box, **kwargs)

    def _fill_gradient(self, draw, box):
        """Vertical linear gradient between the two header fill colours."""
        top = ImageColor.getrgb(self.styles["header_fill_top"])
        bottom = ImageColor.getrgb(self.styles["header_fill_bottom"])
        x0, y0, x1, y1 = (round(v) for v in box)
        height = max(1, y1 - y0)
        for row in range(y0, y1 + 1):
            t = (row - y0) / height
            color = tuple(round(a + (b - a) * t) for a, b in zip(top, bottom))
            draw.line([(x0, row), (x1, row)], fill=color)

    def _draw_line(self, img, draw, prim: ScenePrimitive):
        a = prim.attrs
        draw.line(
            [(_num(a, "x1"), _num(a, "y1")), (_num(a, "x2"), _num(a, "y2"))],
            fill=a.get("stroke", "#000000"),
            width=_width(a),
        )

    def _draw_circle(self, img, draw, prim: ScenePrimitive):
        a = prim.attrs
        cx, cy, r = _num(a, "cx"), _num(a, "cy"), _num(a, "r")
        draw.ellipse((cx - r, cy - r, cx + r, cy + r), fill=self._fill(a), outline=a.get("stroke"))

    def _draw_text(self, img, draw, prim: ScenePrimitive):
        a = prim.attrs
        font = self._font(_num(a, "font-size", 12))
        fill = a.get("fill", "#000000")
        anchor = _ANCHORS.get(a.get("text-anchor"), "ls")
        x, y = _num(a, "x"), _num(a, "y")

        rotation = _ROTATE.match(str(a.get("transform", "")))
        if not rotation:
            draw.text((x, y), prim.text, fill=fill, font=font, anchor=anchor)
            return

        # Draw onto a transparent tile, turn it, and centre it on the anchor point.
        left, top, right, bottom = font.getbbox(prim.text)
        size = (max(1, round(right - left)), max(1, round(bottom - top)))
        tile = Image.new("RGBA", size, (0, 0, 0, 0))
        ImageDraw.Draw(tile).text((-left, -top), prim.text, fill=fill, font=font)
        # SVG angles turn clockwise on screen, PIL angles counter-clockwise.
        tile = tile.rotate(-float(rotation.group(1)), expand=True)
        img.paste(tile, (round(x - tile.width / 2), round(y - tile.height / 2)), tile)
