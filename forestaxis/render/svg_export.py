from __future__ import annotations

from pathlib import Path
import logging
from typing import Any
import xml.etree.ElementTree as ET

from forestaxis.layout import snap_px
from forestaxis.raster.canvas import RGBA
from forestaxis.render.scene import AxisScene, build_axis_scene
from forestaxis.render.style import AxisStyle
from forestaxis.types import AxisConfig

LOGGER = logging.getLogger(__name__)

SVG_NS = "http://www.w3.org/2000/svg"


def _paint(color: RGBA) -> tuple[str, str]:
    r, g, b, a = (int(c) for c in color)
    return f"#{r:02x}{g:02x}{b:02x}", f"{a / 255.0:.3g}"


def _line(parent: ET.Element, x1: float, y1: float, x2: float, y2: float, color: RGBA, **extra: str) -> ET.Element:
    stroke, opacity = _paint(color)
    attrs = {
        "x1": f"{x1:g}",
        "y1": f"{y1:g}",
        "x2": f"{x2:g}",
        "y2": f"{y2:g}",
        "stroke": stroke,
        "stroke-width": "1",
    }
    if opacity != "1":
        attrs["stroke-opacity"] = opacity
    attrs.update(extra)
    return ET.SubElement(parent, "line", attrs)


def render_scene_svg(scene: AxisScene, style: AxisStyle) -> str:
    """Serialize a computed axis scene.

    Lines sit on pixel centres (column + 0.5) of the same snapped columns the
    raster view fills, so both outputs place every tick identically.
    """
    frame, layout = scene.frame, scene.layout
    root = ET.Element(
        "svg",
        {
            "xmlns": SVG_NS,
            "width": str(frame.width),
            "height": str(frame.height),
            "viewBox": f"0 0 {frame.width} {frame.height}",
        },
    )
    fill, fill_opacity = _paint(style.background)
    if fill_opacity != "0":
        ET.SubElement(
            root,
            "rect",
            {"width": "100%", "height": "100%", "fill": fill, "fill-opacity": fill_opacity},
        )

    grid_bottom = frame.axis_y - 1 + 0.5
    pattern = style.dash_pattern(layout.gridline_style)
    if pattern is not None and layout.gridlines:
        group = ET.SubElement(root, "g", {"class": "gridlines"})
        for gx in layout.gridlines:
            x = snap_px(gx) + 0.5
            _line(
                group,
                x,
                frame.plot_top,
                x,
                grid_bottom,
                style.gridline_color,
                **{"stroke-dasharray": f"{pattern[0]} {pattern[1]}"},
            )
    if layout.null_x_px is not None:
        x = snap_px(layout.null_x_px) + 0.5
        _line(root, x, frame.plot_top, x, grid_bottom, style.null_line_color, **{"class": "null-line"})

    axis = ET.SubElement(root, "g", {"class": "axis"})
    y = frame.axis_y + 0.5
    _line(axis, frame.x0_px, y, frame.x0_px + frame.width_px, y, style.axis_color)
    label_fill, label_opacity = _paint(style.label_color)
    for tick in layout.ticks:
        x = snap_px(tick.x_px) + 0.5
        _line(axis, x, frame.axis_y, x, frame.tick_bottom + 1, style.axis_color, **{"class": "tick"})
        if not tick.show_label:
            continue
        text = ET.SubElement(
            axis,
            "text",
            {
                "x": f"{x:g}",
                "y": str(frame.label_top),
                "fill": label_fill,
                "font-family": style.font_family,
                "font-size": f"{style.font_size_px:g}",
                "text-anchor": "middle",
                "dominant-baseline": "hanging",
            },
        )
        if label_opacity != "1":
            text.set("fill-opacity", label_opacity)
        text.text = tick.label
    return ET.tostring(root, encoding="unicode")


def export_axis_svg(
    *,
    rows,
    config: AxisConfig | None = None,
    scale: str = "linear",
    null_value: float | None = None,
    point_col: str | None = None,
    lower_col: str | None = None,
    upper_col: str | None = None,
    effects=(),
    width: int = 480,
    height: int = 240,
    point_size: float = 8.0,
    style: AxisStyle | None = None,
) -> str:
    style = style or AxisStyle()
    scene = build_axis_scene(
        rows=rows,
        config=config or AxisConfig(),
        scale=scale,
        null_value=null_value,
        point_col=point_col,
        lower_col=lower_col,
        upper_col=upper_col,
        effects=tuple(effects),
        width=width,
        height=height,
        point_size=point_size,
        style=style,
    )
    return render_scene_svg(scene, style)


def write_axis_svg(path: str | Path, **kwargs: Any) -> Path:
    out = Path(path)
    out.parent.mkdir(parents=True, exist_ok=True)
    out.write_text(export_axis_svg(**kwargs), encoding="utf-8")
    LOGGER.info("wrote axis svg to %s", out)
    return out
