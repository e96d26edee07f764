from __future__ import annotations

from collections.abc import Iterable, Sequence
import logging

from forestaxis.config import default_null_value, resolve_columns
from forestaxis.domain import compute_axis_limits
from forestaxis.region import compute_plot_region, marker_margin_fraction
from forestaxis.ticks import generate_ticks
from forestaxis.types import AxisComputation, AxisConfig, EffectRef, Row, check_scale

LOGGER = logging.getLogger(__name__)


def compute_axis(
    *,
    rows: Iterable[Row],
    config: AxisConfig,
    scale: str,
    null_value: float | None = None,
    forest_width: float | None = None,
    point_size: float | None = None,
    point_col: str | None = None,
    lower_col: str | None = None,
    upper_col: str | None = None,
    effects: Sequence[EffectRef] = (),
) -> AxisComputation:
    """Axis limits, plot region and ticks for one render or export pass.

    The plot region and the ticks are both derived from the same finalized
    limits, so every back-end that maps them through the same scale agrees.
    """
    scale = check_scale(scale)
    if null_value is None:
        null_value = default_null_value(scale)
    point_col, lower_col, upper_col = resolve_columns(point_col, lower_col, upper_col, effects)

    axis_limits = compute_axis_limits(
        rows,
        config,
        scale,
        null_value,
        effects,
        point_col,
        lower_col,
        upper_col,
    )
    plot_region = compute_plot_region(
        axis_limits,
        scale,
        marker_margin=config.marker_margin,
        margin_fraction=marker_margin_fraction(forest_width, point_size),
    )
    ticks = generate_ticks(axis_limits, config, scale, null_value)
    LOGGER.debug("axis %s limits=%s region=%s ticks=%s", scale, axis_limits, plot_region, ticks)
    return AxisComputation(axis_limits=axis_limits, plot_region=plot_region, ticks=ticks)
