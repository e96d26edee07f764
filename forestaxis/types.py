from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
import math
from typing import Any, Literal

from forestaxis.errors import AxisConfigError


Scale = Literal["linear", "log"]
GridlineStyle = Literal["dashed", "dotted", "none"]

AxisLimits = tuple[float, float]
PlotRegion = tuple[float, float]
Ticks = tuple[float, ...]

SCALES: tuple[str, ...] = ("linear", "log")
GRIDLINE_STYLES: tuple[str, ...] = ("dashed", "dotted", "none")


def check_scale(scale: str) -> Scale:
    if scale not in SCALES:
        raise AxisConfigError(f"unknown scale: {scale!r} (expected 'linear' or 'log')")
    return scale  # type: ignore[return-value]


@dataclass(frozen=True)
class Row:
    id: str
    label: str
    group_id: str | None = None
    metadata: Mapping[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class EffectRef:
    """Metadata field names of one secondary effect drawn on the same row."""

    id: str
    point_col: str
    lower_col: str
    upper_col: str


@dataclass(frozen=True)
class AxisConfig:
    """Fully resolved axis configuration.

    ``range_min``/``range_max`` pin one or both sides of the axis; ``None`` means
    the side is derived from row data. ``ci_clip_factor`` bounds how far interval
    ends may stretch the domain past the spread of the point estimates.
    """

    range_min: float | None = None
    range_max: float | None = None
    tick_count: int | None = None
    tick_values: tuple[float, ...] | None = None
    gridlines: bool = False
    gridline_style: GridlineStyle = "dotted"
    ci_clip_factor: float = 2.0
    include_null: bool = True
    symmetric: bool | None = None
    null_tick: bool = True
    marker_margin: bool = True

    def __post_init__(self) -> None:
        for name in ("range_min", "range_max"):
            value = getattr(self, name)
            if value is None:
                continue
            value = float(value)
            if not math.isfinite(value):
                raise AxisConfigError(f"{name} must be finite")
            object.__setattr__(self, name, value)
        if self.range_min is not None and self.range_max is not None and self.range_min >= self.range_max:
            raise AxisConfigError(f"range_min must be < range_max (got {self.range_min} >= {self.range_max})")
        if self.tick_count is not None:
            if int(self.tick_count) < 1:
                raise AxisConfigError("tick_count must be >= 1")
            object.__setattr__(self, "tick_count", int(self.tick_count))
        if self.tick_values is not None:
            values = tuple(float(v) for v in self.tick_values)
            if not all(math.isfinite(v) for v in values):
                raise AxisConfigError("tick_values must be finite")
            object.__setattr__(self, "tick_values", values)
        clip = float(self.ci_clip_factor)
        if math.isnan(clip) or clip < 0:
            raise AxisConfigError("ci_clip_factor must be >= 0")
        object.__setattr__(self, "ci_clip_factor", clip)
        if self.gridline_style not in GRIDLINE_STYLES:
            raise AxisConfigError(f"unknown gridline_style: {self.gridline_style!r}")


@dataclass(frozen=True)
class AxisComputation:
    axis_limits: AxisLimits
    plot_region: PlotRegion
    ticks: Ticks
