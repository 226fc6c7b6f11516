"""Conversions between render, snapped and grid positions.

Render positions are continuous. Snapped positions are render positions
quantized to the cell grid and clamped so the last row and column are the
furthest a voxel can register. Grid positions are integer cell coordinates.

    render --render_to_snapped--> snapped --snapped_to_grid--> grid
    grid --grid_to_snapped--> snapped --snapped_to_render--> render
"""

import math

from .config import GridConfig
from .types import GridPosition, RenderPosition, SnappedPosition

# Absorbs float error when dividing by a fractional cell size
_EPSILON = 1e-9


def _snap_axis(value: float, cell: float, pixel_extent: float) -> float:
    snapped = math.floor(value / cell + _EPSILON) * cell
    return min(max(snapped, 0.0), pixel_extent - cell)


def render_to_snapped(render_pos: RenderPosition, config: GridConfig) -> SnappedPosition:
    """Quantize a render position to its cell corner, clamped inside the grid."""
    cell = config.cell_pixel_size
    return SnappedPosition(
        x=_snap_axis(render_pos.x, cell, config.pixel_width),
        y=_snap_axis(render_pos.y, cell, config.pixel_height),
    )


def snapped_to_grid(snapped_pos: SnappedPosition, config: GridConfig) -> GridPosition:
    """Divide a snapped position down to its cell coordinate."""
    cell = config.cell_pixel_size
    return GridPosition(
        x=math.floor(snapped_pos.x / cell + _EPSILON),
        y=math.floor(snapped_pos.y / cell + _EPSILON),
    )


def grid_to_snapped(grid_pos: GridPosition, config: GridConfig) -> SnappedPosition:
    """Scale a cell coordinate up to its render-space corner."""
    cell = config.cell_pixel_size
    return SnappedPosition(x=grid_pos.x * cell, y=grid_pos.y * cell)


def snapped_to_render(snapped_pos: SnappedPosition) -> RenderPosition:
    """Snapped positions are already in render units."""
    return RenderPosition(x=snapped_pos.x, y=snapped_pos.y)


def screen_to_grid(render_pos: RenderPosition, config: GridConfig) -> GridPosition:
    """Map a pointer or renderable position to the cell it falls in."""
    return snapped_to_grid(render_to_snapped(render_pos, config), config)


def grid_to_screen(grid_pos: GridPosition, config: GridConfig) -> RenderPosition:
    """Map a cell to the render position its renderable should sit at."""
    return snapped_to_render(grid_to_snapped(grid_pos, config))
