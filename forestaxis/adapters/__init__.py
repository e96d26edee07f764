from .normalize import coerce_number, collect_values

__all__ = ["coerce_number", "collect_values"]
