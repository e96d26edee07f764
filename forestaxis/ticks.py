from __future__ import annotations

from collections.abc import Sequence
from decimal import Decimal, InvalidOperation
import math

import numpy as np

from forestaxis.nice import (
    LOG_LADDER,
    nice_step,
    scaled,
    step_decimals,
    step_multiple,
    target_tick_count,
)
from forestaxis.types import AxisConfig, Ticks, check_scale


def generate_ticks(domain: tuple[float, float], config: AxisConfig, scale: str, null_value: float) -> Ticks:
    """Ordered, deduplicated tick values for a finalized axis domain.

    Explicit ``tick_values`` win: they are only filtered to the domain and sorted.
    Otherwise ticks are generated for the configured (or default) target count
    and the reference value is inserted when ``null_tick`` is set.
    """
    scale = check_scale(scale)
    lo, hi = float(domain[0]), float(domain[1])

    if config.tick_values:
        return tuple(sorted({v for v in config.tick_values if lo <= v <= hi}))

    if hi <= lo:
        return (lo,)

    target = target_tick_count(config.tick_count)
    if scale == "log":
        ticks = _log_ticks(lo, hi, target)
    else:
        ticks = _linear_ticks(lo, hi, target)

    null = float(null_value)
    if config.null_tick and lo <= null <= hi and (scale == "linear" or null > 0.0):
        ticks = _with_value(ticks, null, span=hi - lo)
    return _dedupe_sorted(ticks, span=hi - lo)


def _linear_ticks(lo: float, hi: float, target: int) -> list[float]:
    step = nice_step(lo, hi, target, inside=True)
    k0 = math.ceil(lo / step - 1e-9)
    k1 = math.floor(hi / step + 1e-9)
    # Rounding to the step precision can nudge an end tick just outside.
    return [min(hi, max(lo, step_multiple(k, step))) for k in range(k0, k1 + 1)]


def _log_ticks(lo: float, hi: float, target: int) -> list[float]:
    k0 = math.floor(math.log10(lo))
    k1 = math.ceil(math.log10(hi))

    decades = [k for k in range(k0, k1 + 1) if _within(scaled(1.0, k), lo, hi)]
    if len(decades) > target:
        stride = math.ceil(len(decades) / target)
        thinned = []
        if decades[0] <= 0 <= decades[-1]:
            thinned = [k for k in decades if k % stride == 0]
        if len(thinned) < 2:
            thinned = decades[::stride]
        decades = thinned
    decade_ticks = [scaled(1.0, k) for k in decades]

    ladder_ticks = [
        scaled(m, k)
        for k in range(k0, k1 + 1)
        for m in LOG_LADDER
        if _within(scaled(m, k), lo, hi)
    ]

    candidates = [t for t in (decade_ticks, ladder_ticks) if len(t) >= 2]
    if candidates:
        best = min(candidates, key=lambda t: (abs(len(t) - target), len(t)))
        return [min(hi, max(lo, v)) for v in best]
    # Less than a decade of room: plain linear steps read better than one tick.
    return [v for v in _linear_ticks(lo, hi, target) if v > 0.0]


def _within(value: float, lo: float, hi: float) -> bool:
    return lo * (1.0 - 1e-12) <= value <= hi * (1.0 + 1e-12)


def _with_value(ticks: list[float], value: float, *, span: float) -> list[float]:
    out = [t for t in ticks if not math.isclose(t, value, rel_tol=1e-9, abs_tol=span * 1e-12)]
    out.append(value)
    return out


def _dedupe_sorted(ticks: Sequence[float], *, span: float) -> Ticks:
    out: list[float] = []
    for value in sorted(ticks):
        if out and math.isclose(value, out[-1], rel_tol=1e-9, abs_tol=span * 1e-12):
            continue
        out.append(value)
    return tuple(out)


def tick_step(ticks: Sequence[float]) -> float | None:
    """Smallest positive spacing between neighbouring ticks."""
    if len(ticks) < 2:
        return None
    diffs = np.diff(np.sort(np.asarray(ticks, dtype=np.float64)))
    diffs = diffs[np.isfinite(diffs) & (diffs > 0)]
    if diffs.size == 0:
        return None
    return float(np.min(diffs))


def format_tick(value: float, *, step: float | None = None) -> str:
    if not math.isfinite(value):
        return str(value)
    if step is not None and math.isfinite(step) and step > 0 and abs(value) <= step * 1e-9:
        value = 0.0
    abs_v = abs(value)
    if abs_v != 0 and (abs_v >= 1e6 or abs_v < 1e-6 or (step is not None and step < 1e-4)):
        return f"{value:.3g}"

    decimals = step_decimals(_round_step(step)) if step is not None else 6
    quant = Decimal("1").scaleb(-decimals)
    try:
        out = format(Decimal(str(value)).quantize(quant), "f")
    except InvalidOperation:
        out = str(value)
    if "." in out:
        out = out.rstrip("0").rstrip(".")
    if out == "-0":
        out = "0"
    return out


def format_ticks_for_axis(ticks: Sequence[float]) -> list[str]:
    """Labels for a tick sequence, with precision taken from the tightest spacing."""
    if len(ticks) == 0:
        return []
    step = tick_step(ticks)
    return [format_tick(float(v), step=step) for v in ticks]


def _round_step(step: float) -> float:
    # Spacing between ticks carries float noise (0.30000000000000004); keep
    # three significant digits before deriving a decimal count from it.
    if step <= 0 or not math.isfinite(step):
        return step
    return float(f"{step:.3g}")
