from __future__ import annotations

from forestaxis.nice import (
    ceil_to_step,
    floor_to_step,
    ladder_ceil,
    ladder_floor,
    nice_step,
    target_tick_count,
)
from forestaxis.types import AxisLimits, check_scale


LINEAR_FALLBACK: AxisLimits = (-1.0, 1.0)
LOG_FALLBACK: AxisLimits = (0.1, 10.0)


def fallback_limits(scale: str) -> AxisLimits:
    return LOG_FALLBACK if check_scale(scale) == "log" else LINEAR_FALLBACK


def normalize_domain(
    raw: tuple[float, float],
    scale: str,
    null_value: float,
    *,
    symmetric: bool = False,
    tick_count: int | None = None,
) -> AxisLimits:
    """Widen a raw data domain to round, readable bounds.

    Linear bounds snap outward to the nice step picked for the tick target; log
    bounds snap outward onto the 1/2/5 x 10^n ladder. With ``symmetric`` the
    result is centred on ``null_value`` (by difference on linear, by ratio on
    log).
    """
    scale = check_scale(scale)
    lo, hi = sorted((float(raw[0]), float(raw[1])))
    if scale == "log":
        return _normalize_log(lo, hi, float(null_value), symmetric=symmetric)
    return _normalize_linear(lo, hi, float(null_value), symmetric=symmetric, target=target_tick_count(tick_count))


def _normalize_linear(lo: float, hi: float, null_value: float, *, symmetric: bool, target: int) -> AxisLimits:
    if symmetric:
        half = max(abs(lo - null_value), abs(hi - null_value))
        if half <= 0.0:
            half = abs(null_value) * 0.5 or 1.0
        step = nice_step(null_value - half, null_value + half, target)
        half = ceil_to_step(half, step)
        return (null_value - half, null_value + half)

    if hi - lo <= 0.0:
        pad = abs(lo) * 0.5 or 1.0
        lo -= pad
        hi += pad
    step = nice_step(lo, hi, target)
    return (floor_to_step(lo, step), ceil_to_step(hi, step))


def _normalize_log(lo: float, hi: float, null_value: float, *, symmetric: bool) -> AxisLimits:
    if hi <= 0.0:
        return LOG_FALLBACK
    if lo <= 0.0:
        lo = hi / 10.0
    if hi / lo <= 1.0:
        lo /= 2.0
        hi *= 2.0

    if symmetric and null_value > 0.0:
        ratio = ladder_ceil(max(null_value / lo, hi / null_value))
        return (null_value / ratio, null_value * ratio)

    return (ladder_floor(lo), ladder_ceil(hi))
