"""Drawing surfaces: the shapes and text targets renderers draw into.

Renderers only describe geometry. A surface keeps a display list and turns it
into an output format: SVG markup for the generated page, or a PNG image via
Pillow. Panels are the HTML text targets (tooltip, counts, breakdowns).
"""

import abc
import html
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import TypeVar

from PIL import Image, ImageColor, ImageDraw, ImageFont

from locviz.errors import RenderTargetUnavailable
from locviz.models import Commit, Point

logger = logging.getLogger(__name__)

_T = TypeVar("_T")

MARK_FILL = "#4682b4"  # steelblue
SELECTED_FILL = "#ff6b6b"
GRID_STROKE = "#d0d7de"
AXIS_STROKE = "#57606a"
TEXT_FILL = "#24292f"
BG = "#ffffff"

_FONT_REGULAR = "/usr/share/fonts/truetype/dejavu/DejaVuSans.ttf"


def require_target(target: _T | None, name: str) -> _T:
    if target is None:
        raise RenderTargetUnavailable(f"render target {name!r} is unavailable")
    return target


# --- Display list ---


@dataclass
class LineShape:
    x0: float
    y0: float
    x1: float
    y1: float
    layer: str = "axis"
    stroke: str = AXIS_STROKE


@dataclass
class TextShape:
    x: float
    y: float
    content: str
    anchor: str = "middle"  # start | middle | end
    layer: str = "axis"
    size: int = 10


@dataclass
class Mark:
    """One commit circle. Keyed by commit id so handlers can restyle it."""
    key: str
    cx: float
    cy: float
    r: float
    opacity: float
    href: str | None = None
    title: str | None = None
    selected: bool = False


@dataclass
class BrushShape:
    x0: float
    y0: float
    x1: float
    y1: float


class ChartSurface(abc.ABC):
    """Base class for chart surfaces."""

    def __init__(self, width: int, height: int) -> None:
        self.width = width
        self.height = height
        self.lines: list[LineShape] = []
        self.texts: list[TextShape] = []
        self.marks: dict[str, Mark] = {}
        self.brush: BrushShape | None = None

    def clear(self) -> None:
        self.lines.clear()
        self.texts.clear()
        self.marks.clear()

    def line(self, x0: float, y0: float, x1: float, y1: float, *, layer: str = "axis",
             stroke: str = AXIS_STROKE) -> None:
        self.lines.append(LineShape(x0, y0, x1, y1, layer=layer, stroke=stroke))

    def text(self, x: float, y: float, content: str, *, anchor: str = "middle",
             layer: str = "axis", size: int = 10) -> None:
        self.texts.append(TextShape(x, y, content, anchor=anchor, layer=layer, size=size))

    def circle(self, key: str, cx: float, cy: float, r: float, *, opacity: float,
               href: str | None = None, title: str | None = None) -> None:
        """Add a mark. Marks draw in insertion order, later ones on top."""
        self.marks[key] = Mark(key, cx, cy, r, opacity, href=href, title=title)

    def set_opacity(self, key: str | None, opacity: float) -> None:
        """Set one mark's opacity, or every mark's when key is None."""
        targets = self.marks.values() if key is None else [self.marks[key]] if key in self.marks else []
        for mark in targets:
            mark.opacity = opacity

    def set_selected(self, keys: set[str]) -> None:
        for key, mark in self.marks.items():
            mark.selected = key in keys

    def set_brush(self, x0: float, y0: float, x1: float, y1: float) -> None:
        self.brush = BrushShape(x0, y0, x1, y1)

    def clear_brush(self) -> None:
        self.brush = None


class SVGSurface(ChartSurface):
    """Renders the display list as an inline ``<svg>`` element."""

    def to_svg(self, css_class: str = "chart") -> str:
        parts = [
            f'<svg class="{css_class}" viewBox="0 0 {self.width} {self.height}" '
            f'fill="steelblue" style="overflow: visible" xmlns="http://www.w3.org/2000/svg">'
        ]
        for layer in ("gridlines", "axis"):
            parts.append(f'<g class="{layer}">')
            for ln in self.lines:
                if ln.layer == layer:
                    parts.append(
                        f'<line x1="{ln.x0:.2f}" y1="{ln.y0:.2f}" x2="{ln.x1:.2f}" y2="{ln.y1:.2f}" '
                        f'stroke="{ln.stroke}" />'
                    )
            for tx in self.texts:
                if tx.layer == layer:
                    parts.append(
                        f'<text x="{tx.x:.2f}" y="{tx.y:.2f}" text-anchor="{tx.anchor}" '
                        f'font-size="{tx.size}" fill="currentColor">{html.escape(tx.content)}</text>'
                    )
            parts.append("</g>")

        if self.brush is not None:
            b = self.brush
            parts.append(
                f'<rect class="selection" x="{b.x0:.2f}" y="{b.y0:.2f}" '
                f'width="{b.x1 - b.x0:.2f}" height="{b.y1 - b.y0:.2f}" '
                f'fill="#777" fill-opacity="0.3" stroke="#fff" />'
            )

        parts.append('<g class="dots">')
        for mark in self.marks.values():
            cls = ' class="selected"' if mark.selected else ""
            fill = f' fill="{SELECTED_FILL}"' if mark.selected else ""
            title = f"<title>{html.escape(mark.title)}</title>" if mark.title else ""
            circle = (
                f'<circle data-commit="{html.escape(mark.key)}" cx="{mark.cx:.2f}" cy="{mark.cy:.2f}" '
                f'r="{mark.r:.2f}"{cls}{fill} style="fill-opacity: {mark.opacity}">{title}</circle>'
            )
            if mark.href:
                circle = f'<a href="{html.escape(mark.href)}" target="_blank">{circle}</a>'
            parts.append(circle)
        parts.append("</g>")
        parts.append("</svg>")
        return "\n".join(parts)


def _font(size: int) -> ImageFont.ImageFont | ImageFont.FreeTypeFont:
    try:
        return ImageFont.truetype(_FONT_REGULAR, size)
    except OSError:
        logger.debug("%s not found, using Pillow's default font", _FONT_REGULAR)
        return ImageFont.load_default(size)


_PIL_ANCHORS = {"start": "lm", "middle": "mm", "end": "rm"}


class ImageSurface(ChartSurface):
    """Renders the display list to a PNG with Pillow."""

    def to_image(self) -> Image.Image:
        img = Image.new("RGB", (self.width, self.height), BG)
        draw = ImageDraw.Draw(img, "RGBA")

        for layer in ("gridlines", "axis"):
            for ln in self.lines:
                if ln.layer == layer:
                    draw.line([(ln.x0, ln.y0), (ln.x1, ln.y1)], fill=ln.stroke, width=1)
            for tx in self.texts:
                if tx.layer == layer:
                    draw.text(
                        (tx.x, tx.y), tx.content, font=_font(tx.size),
                        fill=TEXT_FILL, anchor=_PIL_ANCHORS.get(tx.anchor, "mm"),
                    )

        if self.brush is not None:
            b = self.brush
            draw.rectangle([b.x0, b.y0, b.x1, b.y1], fill=(119, 119, 119, 77), outline=(255, 255, 255))

        for mark in self.marks.values():
            rgb = ImageColor.getrgb(SELECTED_FILL if mark.selected else MARK_FILL)
            alpha = int(round(max(0.0, min(mark.opacity, 1.0)) * 255))
            draw.ellipse(
                [mark.cx - mark.r, mark.cy - mark.r, mark.cx + mark.r, mark.cy + mark.r],
                fill=rgb[:3] + (alpha,),
            )
        return img

    def save(self, output_path: Path) -> Path:
        img = self.to_image()
        output_path.parent.mkdir(parents=True, exist_ok=True)
        img.save(str(output_path), "PNG")
        logger.info("Chart saved to %s (%dx%d)", output_path, self.width, self.height)
        return output_path


# --- Panels ---


@dataclass
class HTMLPanel:
    """An HTML text target such as the stats list or the breakdown."""
    name: str
    html: str = ""
    hidden: bool = False
    position: Point | None = None

    def set_html(self, content: str) -> None:
        self.html = content

    def clear(self) -> None:
        self.html = ""


@dataclass
class TooltipPanel(HTMLPanel):
    hidden: bool = True
    commit_id: str | None = None

    def show(self, commit: Commit, at: Point) -> None:
        self.commit_id = commit.id
        self.html = render_tooltip(commit)
        self.position = at
        self.hidden = False

    def hide(self) -> None:
        self.hidden = True


def full_date(commit: Commit) -> str:
    """Human-readable full date, e.g. 'Tuesday, October 29, 2024'."""
    d = commit.datetime
    return f"{d.strftime('%A')}, {d.strftime('%B')} {d.day}, {d.year}"


def render_tooltip(commit: Commit) -> str:
    return (
        '<dl class="info tooltip">\n'
        f'  <dt>Commit</dt><dd><a href="{html.escape(commit.url)}" target="_blank">'
        f"{html.escape(commit.id)}</a></dd>\n"
        f"  <dt>Date</dt><dd>{full_date(commit)}</dd>\n"
        "</dl>"
    )


@dataclass
class Panels:
    """The set of text targets a page exposes. Any of them may be absent."""
    tooltip: TooltipPanel | None = field(default_factory=lambda: TooltipPanel("commit-tooltip"))
    selection_count: HTMLPanel | None = field(default_factory=lambda: HTMLPanel("selection-count"))
    languages: HTMLPanel | None = field(default_factory=lambda: HTMLPanel("language-breakdown"))
    files: HTMLPanel | None = field(default_factory=lambda: HTMLPanel("files"))
    stats: HTMLPanel | None = field(default_factory=lambda: HTMLPanel("stats"))
    slider_label: HTMLPanel | None = field(default_factory=lambda: HTMLPanel("selectedTime"))
