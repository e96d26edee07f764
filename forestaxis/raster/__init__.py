from .canvas import RGBA, draw_dashed_vline, draw_hline, draw_vline, new_canvas
from .draw_text import draw_text, text_size
from .layers import DirtyState, LayerCache

__all__ = [
    "RGBA",
    "DirtyState",
    "LayerCache",
    "draw_dashed_vline",
    "draw_hline",
    "draw_text",
    "draw_vline",
    "new_canvas",
    "text_size",
]
