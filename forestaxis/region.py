from __future__ import annotations

from forestaxis.types import AxisLimits, PlotRegion, check_scale


DEFAULT_MARGIN_FRACTION = 0.05
MAX_MARGIN_FRACTION = 0.25
MARKER_PADDING_PX = 2.0


def marker_margin_fraction(forest_width: float | None, point_size: float | None) -> float:
    """Share of the axis span kept free on each side for edge markers.

    Half a marker glyph plus a little padding, relative to the forest width.
    """
    if forest_width is None or forest_width <= 0:
        return DEFAULT_MARGIN_FRACTION
    half_marker = max(0.0, float(point_size or 0.0)) / 2.0
    return min(MAX_MARGIN_FRACTION, (half_marker + MARKER_PADDING_PX) / float(forest_width))


def compute_plot_region(
    axis_limits: AxisLimits,
    scale: str,
    *,
    marker_margin: bool,
    margin_fraction: float = DEFAULT_MARGIN_FRACTION,
) -> PlotRegion:
    scale = check_scale(scale)
    lo, hi = axis_limits
    fraction = max(0.0, margin_fraction)
    if not marker_margin or fraction == 0.0 or hi <= lo:
        return (lo, hi)
    if scale == "log":
        ratio = (hi / lo) ** fraction
        return (min(lo, lo / ratio), max(hi, hi * ratio))
    pad = (hi - lo) * fraction
    return (min(lo, lo - pad), max(hi, hi + pad))
