from .interactive import InteractiveAxisView
from .scene import AxisScene, build_axis_scene
from .style import AxisFrame, AxisStyle, axis_frame
from .svg_export import export_axis_svg, render_scene_svg, write_axis_svg

__all__ = [
    "AxisFrame",
    "AxisScene",
    "AxisStyle",
    "InteractiveAxisView",
    "axis_frame",
    "build_axis_scene",
    "export_axis_svg",
    "render_scene_svg",
    "write_axis_svg",
]
