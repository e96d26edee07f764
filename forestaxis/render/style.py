from __future__ import annotations

from dataclasses import dataclass

from forestaxis.raster.canvas import RGBA
from forestaxis.raster.draw_text import DEFAULT_FONT_FAMILY, DEFAULT_FONT_SIZE_PX


@dataclass(frozen=True)
class AxisStyle:
    background: RGBA = (255, 255, 255, 0)
    axis_color: RGBA = (68, 68, 68, 255)
    label_color: RGBA = (51, 51, 51, 255)
    gridline_color: RGBA = (0, 0, 0, 48)
    null_line_color: RGBA = (145, 12, 7, 255)
    font_family: str = DEFAULT_FONT_FAMILY
    font_size_px: float = DEFAULT_FONT_SIZE_PX
    side_padding_px: int = 30
    axis_height_px: int = 32
    tick_length_px: int = 5
    label_gap_px: int = 3
    dashed: tuple[int, int] = (4, 4)
    dotted: tuple[int, int] = (1, 3)

    def dash_pattern(self, gridline_style: str) -> tuple[int, int] | None:
        if gridline_style == "dashed":
            return self.dashed
        if gridline_style == "dotted":
            return self.dotted
        return None


@dataclass(frozen=True)
class AxisFrame:
    """Pixel rectangle of the forest panel and the axis band under it."""

    width: int
    height: int
    x0_px: int
    width_px: int
    plot_top: int
    axis_y: int
    tick_bottom: int
    label_top: int


def axis_frame(width: int, height: int, style: AxisStyle) -> AxisFrame:
    if width <= 1 or height <= 1:
        raise ValueError("axis view width/height must be > 1")
    # Small views give up side padding before the forest itself.
    x0 = min(style.side_padding_px, max(0, (width - 2) // 4))
    axis_y = max(0, height - style.axis_height_px)
    tick_bottom = axis_y + style.tick_length_px
    return AxisFrame(
        width=width,
        height=height,
        x0_px=x0,
        width_px=width - 2 * x0,
        plot_top=0,
        axis_y=axis_y,
        tick_bottom=tick_bottom,
        label_top=tick_bottom + style.label_gap_px,
    )
