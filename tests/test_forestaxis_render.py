from __future__ import annotations

import math
from pathlib import Path
import tempfile
import unittest
import xml.etree.ElementTree as ET

import numpy as np

from forestaxis import AxisConfig, AxisConfigError, Row
from forestaxis.layout import build_axis_layout, prune_ticks_for_width, snap_px
from forestaxis.raster import DirtyState, draw_dashed_vline, new_canvas, text_size
from forestaxis.render import AxisStyle, InteractiveAxisView, axis_frame, export_axis_svg, write_axis_svg
from forestaxis.render.svg_export import SVG_NS
from forestaxis.scales import build_axis_transform
from forestaxis.types import AxisComputation


HR_ROWS = [
    Row(id="1", label="Study A", metadata={"hr": 0.65, "lower": 0.45, "upper": 0.85}),
    Row(id="2", label="Study B", metadata={"hr": 0.80, "lower": 0.62, "upper": 1.02}),
    Row(id="3", label="Study C", metadata={"hr": 0.92, "lower": 0.78, "upper": 1.08}),
    Row(id="4", label="Study D", metadata={"hr": 1.15, "lower": 0.89, "upper": 1.48}),
]
HR_COLUMNS = dict(point_col="hr", lower_col="lower", upper_col="upper")


def hr_view(**kwargs) -> InteractiveAxisView:
    return InteractiveAxisView(rows=HR_ROWS, scale="log", width=480, height=120, **HR_COLUMNS, **kwargs)


def svg_lines(markup: str, cls: str | None = None) -> list[ET.Element]:
    root = ET.fromstring(markup)
    lines = root.iter(f"{{{SVG_NS}}}line")
    if cls is None:
        return list(lines)
    return [line for line in lines if line.get("class") == cls]


class TransformTests(unittest.TestCase):
    def test_linear_mapping(self) -> None:
        tf = build_axis_transform((0.0, 10.0), "linear", x0_px=10, width_px=100)
        self.assertAlmostEqual(tf.to_px(5.0), 60.0)
        self.assertAlmostEqual(tf.from_px(60.0), 5.0)

    def test_log_mapping(self) -> None:
        tf = build_axis_transform((0.1, 10.0), "log", x0_px=0, width_px=200)
        self.assertAlmostEqual(tf.to_px(1.0), 100.0)
        mapped = tf.to_px_many([-1.0, 1.0, 10.0])
        self.assertTrue(math.isnan(mapped[0]))
        self.assertAlmostEqual(float(mapped[1]), 100.0)
        self.assertAlmostEqual(float(mapped[2]), 200.0)
        self.assertTrue(math.isnan(tf.to_px(0.0)))

    def test_invalid_regions_raise(self) -> None:
        with self.assertRaises(AxisConfigError):
            build_axis_transform((0.0, 1.0), "linear", x0_px=0, width_px=0)
        with self.assertRaises(AxisConfigError):
            build_axis_transform((1.0, 1.0), "linear", x0_px=0, width_px=100)
        with self.assertRaises(AxisConfigError):
            build_axis_transform((0.0, 10.0), "log", x0_px=0, width_px=100)


class LayoutTests(unittest.TestCase):
    def test_prune_keeps_non_overlapping_labels(self) -> None:
        keep = prune_ticks_for_width([0.0, 10.0, 20.0], [8, 8, 8], min_gap_px=4)
        self.assertEqual(keep, (True, False, True))

    def test_prune_places_priority_label_first(self) -> None:
        keep = prune_ticks_for_width([0.0, 10.0, 20.0], [8, 8, 8], min_gap_px=4, priority=1)
        self.assertEqual(keep, (False, True, False))

    def test_narrow_axis_hides_labels_not_ticks(self) -> None:
        computation = AxisComputation(axis_limits=(0.0, 10.0), plot_region=(0.0, 10.0), ticks=tuple(float(v) for v in range(11)))
        layout = build_axis_layout(
            computation, config=AxisConfig(), scale="linear", null_value=0.0, x0_px=0, width_px=40
        )
        self.assertEqual(len(layout.ticks), 11)
        self.assertLess(len(layout.visible_labels), 11)
        self.assertIn("0", layout.visible_labels)

    def test_gridlines_follow_config(self) -> None:
        computation = AxisComputation(axis_limits=(0.0, 2.0), plot_region=(0.0, 2.0), ticks=(0.0, 1.0, 2.0))
        kwargs = dict(scale="linear", null_value=0.0, x0_px=0, width_px=200)
        off = build_axis_layout(computation, config=AxisConfig(), **kwargs)
        on = build_axis_layout(computation, config=AxisConfig(gridlines=True, gridline_style="dashed"), **kwargs)
        none = build_axis_layout(computation, config=AxisConfig(gridlines=True, gridline_style="none"), **kwargs)
        self.assertEqual(off.gridlines, ())
        self.assertEqual(on.gridlines, on.tick_positions)
        self.assertEqual(none.gridlines, ())

    def test_reference_line_only_inside_region(self) -> None:
        computation = AxisComputation(axis_limits=(1.0, 3.0), plot_region=(1.0, 3.0), ticks=(1.0, 2.0, 3.0))
        layout = build_axis_layout(
            computation, config=AxisConfig(), scale="linear", null_value=0.0, x0_px=0, width_px=200
        )
        self.assertIsNone(layout.null_x_px)

    def test_snap_px(self) -> None:
        self.assertEqual(snap_px(10.49), 10)
        self.assertEqual(snap_px(10.5), 11)
        self.assertEqual(snap_px(-0.4), 0)


class RasterTests(unittest.TestCase):
    def test_dashed_line_alternates(self) -> None:
        canvas = new_canvas(3, 10, color=(0, 0, 0, 0))
        draw_dashed_vline(canvas, 1, 0, 9, (255, 255, 255, 255), dash=2, gap=2)
        column = canvas[:, 1, 3].tolist()
        self.assertEqual(column, [255, 255, 0, 0, 255, 255, 0, 0, 255, 255])

    def test_dirty_state_take_resets(self) -> None:
        state = DirtyState()
        self.assertIsNone(state.take())
        state.mark((0, 0, 4, 4))
        self.assertTrue(state.dirty)
        self.assertEqual(state.take(), (0, 0, 4, 4))
        self.assertIsNone(state.take())

    def test_text_size_is_positive(self) -> None:
        w, h = text_size("0.25", font_size_px=12.0)
        self.assertGreater(w, 0)
        self.assertGreater(h, 0)

    def test_frame_rejects_tiny_views(self) -> None:
        with self.assertRaises(ValueError):
            axis_frame(1, 100, AxisStyle())
        frame = axis_frame(40, 100, AxisStyle())
        self.assertEqual(frame.x0_px, 9)
        self.assertEqual(frame.width_px, 22)


class InteractiveViewTests(unittest.TestCase):
    def test_computation_matches_engine(self) -> None:
        view = hr_view()
        computation = view.computation()
        self.assertEqual(computation.axis_limits, (0.2, 2.0))
        self.assertEqual(computation.ticks, (0.2, 0.5, 1.0, 2.0))
        self.assertIn("1", view.layout().visible_labels)

    def test_rgba_draws_reference_line(self) -> None:
        view = hr_view()
        rgba = view.to_rgba()
        self.assertEqual(rgba.shape, (120, 480, 4))
        self.assertEqual(rgba.dtype, np.uint8)
        x = snap_px(view.layout().null_x_px)
        self.assertEqual(tuple(int(c) for c in rgba[0, x]), view.style.null_line_color)
        frame = view.scene().frame
        self.assertEqual(int(rgba[frame.axis_y, frame.x0_px + 1, 3]), 255)

    def test_rgba_is_deterministic(self) -> None:
        self.assertTrue(np.array_equal(hr_view().to_rgba(), hr_view().to_rgba()))

    def test_dirty_tracking(self) -> None:
        view = hr_view()
        view.to_rgba()
        self.assertEqual(view.take_dirty(), (0, 0, 480, 120))
        view.to_rgba()
        self.assertIsNone(view.take_dirty())
        view.set_config(AxisConfig(gridlines=True))
        view.to_rgba()
        self.assertEqual(view.take_dirty(), (0, 0, 480, 120))

    def test_setters_recompute(self) -> None:
        view = hr_view()
        first = view.computation()
        self.assertIs(view.computation(), first)
        view.set_config(AxisConfig(range_min=0.1, range_max=10.0))
        self.assertEqual(view.computation().axis_limits, (0.1, 10.0))
        view.set_config(AxisConfig()).set_scale("linear")
        self.assertIn(0.0, view.computation().ticks)
        self.assertLessEqual(view.computation().axis_limits[0], 0.0)

    def test_resize_changes_pixels_not_ticks(self) -> None:
        view = hr_view()
        ticks = view.computation().ticks
        positions = view.layout().tick_positions
        view.resize(800, 160)
        self.assertEqual(view.computation().ticks, ticks)
        self.assertNotEqual(view.layout().tick_positions, positions)
        self.assertEqual(view.to_rgba().shape, (160, 800, 4))

    def test_style_change_redraws_the_raster(self) -> None:
        view = hr_view()
        view.to_rgba()
        view.take_dirty()
        view.set_style(AxisStyle(background=(0, 0, 0, 255)))
        rgba = view.to_rgba()
        self.assertEqual(tuple(int(c) for c in rgba[0, 0]), (0, 0, 0, 255))
        self.assertEqual(view.take_dirty(), (0, 0, 480, 120))

    def test_resize_drops_the_cached_raster(self) -> None:
        view = hr_view()
        view.to_rgba()
        view.take_dirty()
        view.resize(480, 120)
        view.to_rgba()
        self.assertIsNone(view.take_dirty())
        view.resize(640)
        self.assertEqual(view.to_rgba().shape, (120, 640, 4))
        self.assertEqual(view.take_dirty(), (0, 0, 640, 120))

    def test_gridlines_are_drawn(self) -> None:
        plain = hr_view().to_rgba()
        gridded = hr_view(config=AxisConfig(gridlines=True, gridline_style="dashed")).to_rgba()
        self.assertFalse(np.array_equal(plain, gridded))

    def test_invalid_inputs_raise(self) -> None:
        with self.assertRaises(AxisConfigError):
            InteractiveAxisView(rows=HR_ROWS, scale="sqrt", **HR_COLUMNS)
        view = hr_view()
        with self.assertRaises(ValueError):
            view.resize(0, 10)


class SvgExportTests(unittest.TestCase):
    def test_tick_positions_match_interactive_view(self) -> None:
        config = AxisConfig(gridlines=True, gridline_style="dashed")
        view = hr_view(config=config)
        markup = export_axis_svg(rows=HR_ROWS, config=config, scale="log", width=480, height=120, **HR_COLUMNS)
        ticks = svg_lines(markup, "tick")
        expected = [snap_px(x) + 0.5 for x in view.layout().tick_positions]
        self.assertEqual([float(line.get("x1")) for line in ticks], expected)
        self.assertEqual(markup, view.export_svg())

    def test_gridlines_use_dash_array(self) -> None:
        config = AxisConfig(gridlines=True, gridline_style="dotted")
        markup = export_axis_svg(rows=HR_ROWS, config=config, scale="log", **HR_COLUMNS)
        dashed = [line for line in svg_lines(markup) if line.get("stroke-dasharray")]
        self.assertEqual(len(dashed), 4)
        self.assertTrue(all(line.get("stroke-dasharray") == "1 3" for line in dashed))

    def test_reference_line_and_labels(self) -> None:
        markup = export_axis_svg(rows=HR_ROWS, scale="log", **HR_COLUMNS)
        self.assertEqual(len(svg_lines(markup, "null-line")), 1)
        root = ET.fromstring(markup)
        labels = [t.text for t in root.iter(f"{{{SVG_NS}}}text")]
        self.assertEqual(labels, ["0.2", "0.5", "1", "2"])
        self.assertEqual(svg_lines(markup, "null-line")[0].get("stroke"), "#910c07")

    def test_tiny_effects_export_every_tick(self) -> None:
        rows = [
            Row(id="0", label="Study 0", metadata={"point": 1e-14, "lower": 0.5e-14, "upper": 2e-14}),
            Row(id="1", label="Study 1", metadata={"point": 3e-14, "lower": 2e-14, "upper": 4e-14}),
        ]
        markup = export_axis_svg(rows=rows, scale="linear", point_col="point", lower_col="lower", upper_col="upper")
        ticks = svg_lines(markup, "tick")
        self.assertEqual(len(ticks), 5)
        xs = [float(line.get("x1")) for line in ticks]
        self.assertTrue(all(b > a for a, b in zip(xs, xs[1:])))

    def test_write_axis_svg_creates_parents(self) -> None:
        with tempfile.TemporaryDirectory() as td:
            out = write_axis_svg(Path(td) / "nested" / "axis.svg", rows=HR_ROWS, scale="log", **HR_COLUMNS)
            self.assertTrue(out.exists())
            self.assertTrue(out.read_text(encoding="utf-8").startswith("<svg"))


if __name__ == "__main__":
    unittest.main()
