from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass, field
import logging
from typing import Any

import numpy as np

from forestaxis.layout import AxisLayout, snap_px
from forestaxis.raster import (
    DirtyState,
    LayerCache,
    draw_dashed_vline,
    draw_hline,
    draw_text,
    draw_vline,
    new_canvas,
)
from forestaxis.render.scene import AxisScene, build_axis_scene
from forestaxis.render.style import AxisStyle, axis_frame
from forestaxis.render.svg_export import render_scene_svg
from forestaxis.types import AxisComputation, AxisConfig, EffectRef, Row, Scale, check_scale

LOGGER = logging.getLogger(__name__)


@dataclass
class InteractiveAxisView:
    """Live axis panel that recomputes on demand after its inputs change.

    Use the setters rather than assigning attributes so cached scenes and
    rasters are invalidated. The view caches results per input revision; the
    axis computation it calls keeps no state of its own.
    """

    rows: Sequence[Row]
    config: AxisConfig = field(default_factory=AxisConfig)
    scale: Scale = "linear"
    null_value: float | None = None
    point_col: str | None = None
    lower_col: str | None = None
    upper_col: str | None = None
    effects: tuple[EffectRef, ...] = ()
    width: int = 480
    height: int = 240
    point_size: float = 8.0
    style: AxisStyle = field(default_factory=AxisStyle)

    def __post_init__(self) -> None:
        check_scale(self.scale)
        axis_frame(self.width, self.height, self.style)
        self.effects = tuple(self.effects)
        self._revision = 0
        self._scene_key: tuple[Any, ...] | None = None
        self._scene: AxisScene | None = None
        self._cache = LayerCache()
        self._dirty = DirtyState()

    def set_rows(self, rows: Sequence[Row]) -> "InteractiveAxisView":
        self.rows = rows
        return self._touch()

    def set_config(self, config: AxisConfig) -> "InteractiveAxisView":
        self.config = config
        return self._touch()

    def set_scale(self, scale: str, *, null_value: float | None = None) -> "InteractiveAxisView":
        self.scale = check_scale(scale)
        self.null_value = null_value
        return self._touch()

    def set_columns(
        self,
        point_col: str | None,
        lower_col: str | None,
        upper_col: str | None,
        *,
        effects: Sequence[EffectRef] | None = None,
    ) -> "InteractiveAxisView":
        self.point_col = point_col
        self.lower_col = lower_col
        self.upper_col = upper_col
        if effects is not None:
            self.effects = tuple(effects)
        return self._touch()

    def set_style(self, style: AxisStyle) -> "InteractiveAxisView":
        axis_frame(self.width, self.height, style)
        self.style = style
        self._cache.invalidate()
        return self._touch()

    def resize(self, width: int, height: int | None = None) -> "InteractiveAxisView":
        height = self.height if height is None else height
        axis_frame(width, height, self.style)
        if (width, height) != (self.width, self.height):
            # The cached raster has the old shape.
            self._cache.invalidate()
        self.width = width
        self.height = height
        return self

    def _touch(self) -> "InteractiveAxisView":
        self._revision += 1
        return self

    def _key(self) -> tuple[Any, ...]:
        return (self._revision, self.width, self.height, self.point_size)

    def scene(self) -> AxisScene:
        key = self._key()
        if self._scene is None or self._scene_key != key:
            self._scene = build_axis_scene(
                rows=self.rows,
                config=self.config,
                scale=self.scale,
                null_value=self.null_value,
                point_col=self.point_col,
                lower_col=self.lower_col,
                upper_col=self.upper_col,
                effects=self.effects,
                width=self.width,
                height=self.height,
                point_size=self.point_size,
                style=self.style,
            )
            self._scene_key = key
            LOGGER.debug("recomputed axis scene at %dx%d (revision %d)", self.width, self.height, self._revision)
        return self._scene

    def computation(self) -> AxisComputation:
        return self.scene().computation

    def layout(self) -> AxisLayout:
        return self.scene().layout

    def to_rgba(self) -> np.ndarray:
        scene = self.scene()
        key = self._scene_key
        if self._cache.axis_key != key or self._cache.axis_template is None:
            self._cache.axis_template = self._draw(scene)
            self._cache.axis_key = key
            self._dirty.mark((0, 0, self.width, self.height))
        return self._cache.axis_template.copy()

    def take_dirty(self) -> tuple[int, int, int, int] | None:
        """Rect redrawn since the last call, or ``None`` if nothing changed."""
        return self._dirty.take()

    def _draw(self, scene: AxisScene) -> np.ndarray:
        frame, layout, style = scene.frame, scene.layout, self.style
        canvas = new_canvas(frame.width, frame.height, color=style.background)
        grid_bottom = frame.axis_y - 1

        pattern = style.dash_pattern(layout.gridline_style)
        if pattern is not None:
            for gx in layout.gridlines:
                draw_dashed_vline(
                    canvas,
                    snap_px(gx),
                    frame.plot_top,
                    grid_bottom,
                    style.gridline_color,
                    dash=pattern[0],
                    gap=pattern[1],
                )
        if layout.null_x_px is not None:
            draw_vline(canvas, snap_px(layout.null_x_px), frame.plot_top, grid_bottom, style.null_line_color)

        draw_hline(canvas, frame.x0_px, frame.x0_px + frame.width_px - 1, frame.axis_y, style.axis_color)
        for tick in layout.ticks:
            x = snap_px(tick.x_px)
            draw_vline(canvas, x, frame.axis_y, frame.tick_bottom, style.axis_color)
            if tick.show_label:
                draw_text(
                    canvas,
                    x - tick.label_width_px // 2,
                    frame.label_top,
                    tick.label,
                    style.label_color,
                    font_family=style.font_family,
                    font_size_px=style.font_size_px,
                )
        return canvas

    def export_svg(self) -> str:
        return render_scene_svg(self.scene(), self.style)
