from __future__ import annotations

from decimal import Decimal
import math


DEFAULT_TICK_COUNT = 5
NICE_MANTISSAS = (1.0, 2.0, 2.5, 5.0)
LOG_LADDER = (1.0, 2.0, 5.0)

# Relative slack for float drift when comparing values against step multiples.
_EPS = 1e-9


def target_tick_count(tick_count: int | None) -> int:
    if tick_count is None:
        return DEFAULT_TICK_COUNT
    return max(2, int(tick_count))


def scaled(mantissa: float, exponent: int) -> float:
    """``mantissa * 10**exponent`` rounded once, so 0.2 is the float 0.2."""
    return float(Decimal(str(mantissa)).scaleb(exponent))


def step_decimals(step: float) -> int:
    """Decimals needed to print multiples of ``step``; labels only."""
    if step <= 0 or not math.isfinite(step):
        return 6
    exp = Decimal(str(step)).normalize().as_tuple().exponent
    return min(12, max(0, -int(exp)))


def step_multiple(k: int, step: float) -> float:
    """``k * step`` rounded once at the step's own decimal exponent.

    Exact for any magnitude, so 6 x 0.2 is 1.2 and 3 x 1e-14 stays 3e-14.
    """
    # Adding 0.0 turns -0.0 into 0.0.
    return float(Decimal(k) * Decimal(repr(step))) + 0.0


def floor_to_step(value: float, step: float) -> float:
    return step_multiple(math.floor(value / step + _EPS), step)


def ceil_to_step(value: float, step: float) -> float:
    return step_multiple(math.ceil(value / step - _EPS), step)


def count_steps(vmin: float, vmax: float, step: float, *, inside: bool) -> int:
    """Number of step multiples covering ``[vmin, vmax]``.

    With ``inside`` only multiples within the interval count; otherwise the
    interval is first widened outward to the enclosing multiples.
    """
    if inside:
        return math.floor(vmax / step + _EPS) - math.ceil(vmin / step - _EPS) + 1
    return math.ceil(vmax / step - _EPS) - math.floor(vmin / step + _EPS) + 1


def nice_step(vmin: float, vmax: float, target: int, *, inside: bool = False) -> float:
    """Pick a 1/2/2.5/5 x 10^n step whose tick count is closest to ``target``.

    Steps giving fewer than two ticks are never picked, and outward steps may
    not exceed the span. On ties, outward snapping keeps the tightest bounds;
    inside the domain the larger step (fewer ticks) wins.
    """
    span = vmax - vmin
    if not span > 0 or not math.isfinite(span):
        raise ValueError("nice_step requires vmin < vmax")
    raw = span / max(target - 1, 1)
    exp = math.floor(math.log10(raw))
    best_step = scaled(1.0, exp - 1)
    best_key: tuple[int, float, float] | None = None
    for e in (exp - 1, exp, exp + 1):
        for mantissa in NICE_MANTISSAS:
            step = scaled(mantissa, e)
            count = count_steps(vmin, vmax, step, inside=inside)
            if count < 2 or (not inside and step > span):
                continue
            extent = 0.0 if inside else ceil_to_step(vmax, step) - floor_to_step(vmin, step)
            key = (abs(count - target), extent, -step)
            if best_key is None or key < best_key:
                best_step = step
                best_key = key
    return best_step


def ladder_floor(value: float) -> float:
    """Largest 1/2/5 x 10^n value not above ``value`` (``value`` > 0)."""
    exp = math.floor(math.log10(value))
    for e in (exp + 1, exp, exp - 1):
        for mantissa in reversed(LOG_LADDER):
            candidate = scaled(mantissa, e)
            if candidate <= value * (1.0 + _EPS):
                return candidate
    return scaled(LOG_LADDER[-1], exp - 2)


def ladder_ceil(value: float) -> float:
    """Smallest 1/2/5 x 10^n value not below ``value`` (``value`` > 0)."""
    exp = math.floor(math.log10(value))
    for e in (exp - 1, exp, exp + 1):
        for mantissa in LOG_LADDER:
            candidate = scaled(mantissa, e)
            if candidate >= value * (1.0 - _EPS):
                return candidate
    return scaled(LOG_LADDER[0], exp + 2)
