from __future__ import annotations

from collections.abc import Iterable, Sequence
import logging
import math

import numpy as np

from forestaxis.adapters.normalize import coerce_number, collect_values
from forestaxis.errors import AxisConfigError
from forestaxis.normalize import fallback_limits, normalize_domain
from forestaxis.types import AxisConfig, AxisLimits, EffectRef, Row, check_scale

LOGGER = logging.getLogger(__name__)

# Core-span floor on log scale when all point estimates coincide: one doubling.
LOG_CORE_FLOOR_DECADES = math.log10(2.0)


def aggregate_domain(
    rows: Iterable[Row],
    config: AxisConfig,
    scale: str,
    null_value: float,
    effects: Sequence[EffectRef],
    point_col: str,
    lower_col: str,
    upper_col: str,
) -> AxisLimits | None:
    """Raw data domain before rounding, or ``None`` when no usable value exists.

    Point estimates always count in full. Interval bounds may reach at most
    ``ci_clip_factor`` core spans past the core (points plus the reference
    value when included), checked separately on each side. On log scale the
    clipping is done in log10 space and non-positive values are dropped.
    """
    scale = check_scale(scale)
    is_log = scale == "log"
    rows = list(rows)
    point_cols = [point_col, *(e.point_col for e in effects)]
    bound_cols = [lower_col, upper_col, *(c for e in effects for c in (e.lower_col, e.upper_col))]

    points, rejected_points = collect_values(rows, point_cols, positive_only=is_log)
    bounds, rejected_bounds = collect_values(rows, bound_cols, positive_only=is_log)
    if rejected_points or rejected_bounds:
        LOGGER.debug(
            "skipped %d point and %d interval values that are unusable on %s scale",
            rejected_points,
            rejected_bounds,
            scale,
        )
    if points.size == 0 and bounds.size == 0:
        return None

    core = points
    if config.include_null:
        null = coerce_number(null_value)
        if null is None or (is_log and null <= 0.0):
            LOGGER.debug("reference value %r cannot be placed on %s scale", null_value, scale)
        else:
            core = np.append(core, null)

    if is_log:
        core = np.log10(core)
        bounds = np.log10(bounds)
    lo, hi = _clip_to_core(core, bounds, config.ci_clip_factor, is_log=is_log)
    if is_log:
        return (float(10.0**lo), float(10.0**hi))
    return (lo, hi)


def _clip_to_core(core: np.ndarray, bounds: np.ndarray, clip_factor: float, *, is_log: bool) -> tuple[float, float]:
    if core.size == 0:
        return float(np.min(bounds)), float(np.max(bounds))

    core_lo = float(np.min(core))
    core_hi = float(np.max(core))
    span = core_hi - core_lo
    if span <= 0.0:
        span = LOG_CORE_FLOOR_DECADES if is_log else (abs(core_lo) * 0.5 or 1.0)
    reach = clip_factor * span

    lo, hi = core_lo, core_hi
    if bounds.size:
        lo = min(lo, max(float(np.min(bounds)), core_lo - reach))
        hi = max(hi, min(float(np.max(bounds)), core_hi + reach))
    return lo, hi


def compute_axis_limits(
    rows: Iterable[Row],
    config: AxisConfig,
    scale: str,
    null_value: float,
    effects: Sequence[EffectRef],
    point_col: str,
    lower_col: str,
    upper_col: str,
) -> AxisLimits:
    scale = check_scale(scale)
    if scale == "log":
        for name in ("range_min", "range_max"):
            value = getattr(config, name)
            if value is not None and value <= 0.0:
                raise AxisConfigError(f"{name} must be > 0 on log scale (got {value})")

    if config.range_min is not None and config.range_max is not None:
        return (config.range_min, config.range_max)

    raw = aggregate_domain(rows, config, scale, null_value, effects, point_col, lower_col, upper_col)
    if raw is None:
        LOGGER.debug("no usable values for columns %s/%s/%s; using %s fallback", point_col, lower_col, upper_col, scale)
        derived = fallback_limits(scale)
    else:
        derived = normalize_domain(
            raw,
            scale,
            null_value,
            symmetric=bool(config.symmetric),
            tick_count=config.tick_count,
        )
    return _apply_side_overrides(derived, config, scale)


def _apply_side_overrides(derived: AxisLimits, config: AxisConfig, scale: str) -> AxisLimits:
    lo, hi = derived
    if config.range_min is not None:
        lo = config.range_min
        if hi <= lo:
            hi = lo * 10.0 if scale == "log" else lo + max(abs(lo), 1.0)
    if config.range_max is not None:
        hi = config.range_max
        if lo >= hi:
            lo = hi / 10.0 if scale == "log" else hi - max(abs(hi), 1.0)
    return (lo, hi)
