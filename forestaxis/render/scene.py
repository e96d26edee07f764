from __future__ import annotations

from collections.abc import Iterable, Sequence
from dataclasses import dataclass

from forestaxis.axis import compute_axis
from forestaxis.config import default_null_value
from forestaxis.layout import AxisLayout, build_axis_layout
from forestaxis.render.style import AxisFrame, AxisStyle, axis_frame
from forestaxis.types import AxisComputation, AxisConfig, EffectRef, Row, check_scale


@dataclass(frozen=True)
class AxisScene:
    computation: AxisComputation
    frame: AxisFrame
    layout: AxisLayout


def build_axis_scene(
    *,
    rows: Iterable[Row],
    config: AxisConfig,
    scale: str,
    null_value: float | None,
    point_col: str | None,
    lower_col: str | None,
    upper_col: str | None,
    effects: Sequence[EffectRef],
    width: int,
    height: int,
    point_size: float,
    style: AxisStyle,
) -> AxisScene:
    """Everything a back-end needs to draw the axis, from one set of inputs."""
    scale = check_scale(scale)
    if null_value is None:
        null_value = default_null_value(scale)
    frame = axis_frame(width, height, style)
    computation = compute_axis(
        rows=rows,
        config=config,
        scale=scale,
        null_value=null_value,
        forest_width=frame.width_px,
        point_size=point_size,
        point_col=point_col,
        lower_col=lower_col,
        upper_col=upper_col,
        effects=effects,
    )
    layout = build_axis_layout(
        computation,
        config=config,
        scale=scale,
        null_value=null_value,
        x0_px=frame.x0_px,
        width_px=frame.width_px,
        font_family=style.font_family,
        font_size_px=style.font_size_px,
    )
    return AxisScene(computation=computation, frame=frame, layout=layout)
