from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
import math

import numpy as np

from forestaxis.errors import AxisConfigError
from forestaxis.types import PlotRegion, Scale, check_scale


@dataclass(frozen=True)
class AxisTransform:
    """Maps axis values to horizontal pixels.

    Linear scales interpolate the value itself, log scales interpolate
    ``log10(value)``; both map ``plot_region`` onto ``[x0_px, x0_px + width_px]``.
    """

    scale: Scale
    plot_region: PlotRegion
    x0_px: float
    width_px: float
    sx: float
    tx: float

    def to_px(self, value: float) -> float:
        u = self._forward(float(value))
        return u * self.sx + self.tx

    def to_px_many(self, values: Sequence[float] | np.ndarray) -> np.ndarray:
        arr = np.asarray(values, dtype=np.float64)
        if self.scale == "log":
            with np.errstate(divide="ignore", invalid="ignore"):
                arr = np.where(arr > 0.0, np.log10(np.where(arr > 0.0, arr, 1.0)), np.nan)
        return arr * self.sx + self.tx

    def from_px(self, px: float) -> float:
        u = (float(px) - self.tx) / self.sx
        return float(10.0**u) if self.scale == "log" else u

    def _forward(self, value: float) -> float:
        if self.scale == "log":
            return math.log10(value) if value > 0.0 else math.nan
        return value


def build_axis_transform(plot_region: PlotRegion, scale: str, *, x0_px: float, width_px: float) -> AxisTransform:
    scale = check_scale(scale)
    if width_px <= 0:
        raise AxisConfigError("axis pixel width must be > 0")
    lo, hi = float(plot_region[0]), float(plot_region[1])
    if scale == "log":
        if lo <= 0.0 or hi <= 0.0:
            raise AxisConfigError("log plot region must be strictly positive")
        u0, u1 = math.log10(lo), math.log10(hi)
    else:
        u0, u1 = lo, hi
    if not u1 > u0:
        raise AxisConfigError("plot region must have a non-zero span")
    sx = float(width_px) / (u1 - u0)
    tx = float(x0_px) - u0 * sx
    return AxisTransform(scale=scale, plot_region=(lo, hi), x0_px=float(x0_px), width_px=float(width_px), sx=sx, tx=tx)
