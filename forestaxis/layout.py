from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
import math

from forestaxis.raster.draw_text import DEFAULT_FONT_FAMILY, DEFAULT_FONT_SIZE_PX, text_size
from forestaxis.scales import AxisTransform, build_axis_transform
from forestaxis.ticks import format_ticks_for_axis
from forestaxis.types import AxisComputation, AxisConfig, GridlineStyle


def snap_px(x: float) -> int:
    """Pixel column a coordinate lands on; every back-end draws there."""
    return int(math.floor(x + 0.5))


@dataclass(frozen=True)
class TickMark:
    value: float
    x_px: float
    label: str
    label_width_px: int
    show_label: bool


@dataclass(frozen=True)
class AxisLayout:
    """Pixel placement of one axis, shared verbatim by every back-end."""

    transform: AxisTransform
    ticks: tuple[TickMark, ...]
    gridlines: tuple[float, ...]
    gridline_style: GridlineStyle
    null_x_px: float | None

    @property
    def tick_positions(self) -> tuple[float, ...]:
        return tuple(t.x_px for t in self.ticks)

    @property
    def visible_labels(self) -> tuple[str, ...]:
        return tuple(t.label for t in self.ticks if t.show_label)


def prune_ticks_for_width(
    positions: Sequence[float],
    label_widths: Sequence[float],
    *,
    min_gap_px: float,
    priority: int | None = None,
) -> tuple[bool, ...]:
    """Decide which tick labels fit without overlapping.

    The ``priority`` label (usually the reference value) is placed first, then
    the rest greedily from left to right. Only labels are pruned; tick values
    themselves are left alone.
    """
    keep = [False] * len(positions)
    occupied: list[tuple[float, float]] = []
    order = list(range(len(positions)))
    if priority is not None and 0 <= priority < len(positions):
        order.remove(priority)
        order.insert(0, priority)
    for i in order:
        x = float(positions[i])
        if not math.isfinite(x):
            continue
        half = float(label_widths[i]) / 2.0
        lo, hi = x - half, x + half
        if any(lo < o_hi + min_gap_px and hi + min_gap_px > o_lo for o_lo, o_hi in occupied):
            continue
        keep[i] = True
        occupied.append((lo, hi))
    return tuple(keep)


def build_axis_layout(
    computation: AxisComputation,
    *,
    config: AxisConfig,
    scale: str,
    null_value: float,
    x0_px: float,
    width_px: float,
    font_family: str = DEFAULT_FONT_FAMILY,
    font_size_px: float = DEFAULT_FONT_SIZE_PX,
    min_gap_px: float | None = None,
) -> AxisLayout:
    transform = build_axis_transform(computation.plot_region, scale, x0_px=x0_px, width_px=width_px)
    values = computation.ticks
    positions = [float(x) for x in transform.to_px_many(values)] if values else []
    labels = format_ticks_for_axis(values)
    widths = [text_size(label, font_family=font_family, font_size_px=font_size_px)[0] for label in labels]
    gap = min_gap_px if min_gap_px is not None else max(4.0, font_size_px * 0.5)

    priority = None
    for i, value in enumerate(values):
        if math.isclose(value, null_value, rel_tol=1e-9, abs_tol=1e-12):
            priority = i
            break
    visible = prune_ticks_for_width(positions, widths, min_gap_px=gap, priority=priority)

    ticks = tuple(
        TickMark(value=float(v), x_px=x, label=label, label_width_px=w, show_label=show)
        for v, x, label, w, show in zip(values, positions, labels, widths, visible, strict=True)
    )
    gridlines: tuple[float, ...] = ()
    if config.gridlines and config.gridline_style != "none":
        gridlines = tuple(positions)

    null_x_px = None
    lo, hi = computation.plot_region
    if lo <= null_value <= hi and (transform.scale == "linear" or null_value > 0.0):
        null_x_px = transform.to_px(null_value)

    return AxisLayout(
        transform=transform,
        ticks=ticks,
        gridlines=gridlines,
        gridline_style=config.gridline_style,
        null_x_px=null_x_px,
    )
