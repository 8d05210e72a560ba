from __future__ import annotations


class AreaError(ValueError):
    """Raised when the simulation area cannot host a flow field."""


def grid_shape(width: int, height: int, cell_size: int) -> tuple[int, int]:
    """Return (cols, rows) for an area, or raise AreaError if it is degenerate."""
    if cell_size <= 0:
        raise AreaError(f"cell size must be positive, got {cell_size}")
    if width <= 0 or height <= 0:
        raise AreaError(f"area must be positive, got {width}x{height}")
    cols = int(width // cell_size)
    rows = int(height // cell_size)
    if cols == 0 or rows == 0:
        raise AreaError(
            f"area {width}x{height} is smaller than one {cell_size}px cell ({cols} cols, {rows} rows)"
        )
    return cols, rows
