from __future__ import annotations


class AxisConfigError(ValueError):
    """Raised when a caller violates the axis configuration contract."""
