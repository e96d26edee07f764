"""Forest plot x-axis engine: domain, ticks and plot region from row data."""

from .axis import compute_axis
from .config import axis_config_from_mapping, default_null_value, load_axis_config, resolve_columns
from .domain import aggregate_domain, compute_axis_limits
from .errors import AxisConfigError
from .layout import AxisLayout, TickMark, build_axis_layout, prune_ticks_for_width
from .normalize import fallback_limits, normalize_domain
from .region import compute_plot_region, marker_margin_fraction
from .render import InteractiveAxisView, export_axis_svg, write_axis_svg
from .scales import AxisTransform, build_axis_transform
from .ticks import format_tick, format_ticks_for_axis, generate_ticks
from .types import AxisComputation, AxisConfig, EffectRef, Row

__all__ = [
    "AxisComputation",
    "AxisConfig",
    "AxisConfigError",
    "AxisLayout",
    "AxisTransform",
    "EffectRef",
    "InteractiveAxisView",
    "Row",
    "TickMark",
    "aggregate_domain",
    "axis_config_from_mapping",
    "build_axis_layout",
    "build_axis_transform",
    "compute_axis",
    "compute_axis_limits",
    "compute_plot_region",
    "default_null_value",
    "export_axis_svg",
    "fallback_limits",
    "format_tick",
    "format_ticks_for_axis",
    "generate_ticks",
    "load_axis_config",
    "marker_margin_fraction",
    "normalize_domain",
    "prune_ticks_for_width",
    "resolve_columns",
    "write_axis_svg",
]
