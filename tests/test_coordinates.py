"""Tests for render, snapped and grid coordinate conversions."""

import pytest

from sandbase.config import GridConfig
from sandbase.coordinates import (
    grid_to_screen,
    grid_to_snapped,
    render_to_snapped,
    screen_to_grid,
    snapped_to_grid,
    snapped_to_render,
)
from sandbase.types import GridPosition, RenderPosition, SnappedPosition


class TestRenderToGrid:
    """Tests for mapping render positions onto cells."""

    def test_cell_corner(self, wide_config: GridConfig):
        snapped = render_to_snapped(RenderPosition(x=640, y=360), wide_config)
        grid_pos = snapped_to_grid(snapped, wide_config)

        assert snapped == SnappedPosition(x=640.0, y=360.0)
        assert grid_pos == GridPosition(x=64, y=36)
        assert grid_pos.as_index(wide_config.grid_width) == 9280

    def test_inside_cell_floors(self, wide_config: GridConfig):
        snapped = render_to_snapped(RenderPosition(x=117, y=429), wide_config)

        assert snapped == SnappedPosition(x=110.0, y=420.0)
        assert snapped_to_grid(snapped, wide_config) == GridPosition(x=11, y=42)

    def test_past_right_edge_clamps_to_last_column(self):
        config = GridConfig(grid_width=10, grid_height=144, cell_pixel_size=10)

        snapped = render_to_snapped(RenderPosition(x=640, y=360), config)

        assert snapped == SnappedPosition(x=90.0, y=360.0)
        assert snapped_to_grid(snapped, config) == GridPosition(x=9, y=36)

    def test_negative_clamps_to_origin(self, config: GridConfig):
        grid_pos = screen_to_grid(RenderPosition(x=-15, y=-3), config)
        assert grid_pos == GridPosition(x=0, y=0)

    def test_past_top_clamps_to_last_row(self, wide_config: GridConfig):
        grid_pos = screen_to_grid(RenderPosition(x=5, y=5000), wide_config)
        assert grid_pos == GridPosition(x=0, y=143)

    def test_exact_extent_clamps_inside(self, config: GridConfig):
        """The far edge itself belongs to no cell, so it lands in the last one."""
        grid_pos = screen_to_grid(
            RenderPosition(x=config.pixel_width, y=config.pixel_height), config
        )
        assert grid_pos == GridPosition(x=9, y=19)

    def test_snapping_is_idempotent(self, config: GridConfig):
        once = render_to_snapped(RenderPosition(x=37.5, y=81.2), config)
        twice = render_to_snapped(snapped_to_render(once), config)
        assert once == twice


class TestGridToRender:
    def test_cell_corner(self, wide_config: GridConfig):
        assert grid_to_snapped(GridPosition(x=11, y=42), wide_config) == SnappedPosition(
            x=110.0, y=420.0
        )

    def test_snapped_is_already_render_space(self):
        assert snapped_to_render(SnappedPosition(x=1.5, y=2.5)) == RenderPosition(
            x=1.5, y=2.5
        )

    def test_grid_to_screen(self, config: GridConfig):
        assert grid_to_screen(GridPosition(x=5, y=9), config) == RenderPosition(
            x=50.0, y=90.0
        )


class TestRoundTrip:
    """Every cell survives grid -> render -> grid unchanged."""

    @pytest.mark.parametrize("cell_pixel_size", [10, 2.5, 0.1, 7.3])
    def test_every_cell(self, cell_pixel_size: float):
        config = GridConfig(grid_width=30, grid_height=20, cell_pixel_size=cell_pixel_size)

        for y in range(config.grid_height):
            for x in range(config.grid_width):
                position = GridPosition(x=x, y=y)
                assert screen_to_grid(grid_to_screen(position, config), config) == position

    def test_fractional_cell_inside(self):
        config = GridConfig(grid_width=4, grid_height=4, cell_pixel_size=2.5)

        snapped = render_to_snapped(RenderPosition(x=6.0, y=9.9), config)

        assert snapped == SnappedPosition(x=5.0, y=7.5)
        assert snapped_to_grid(snapped, config) == GridPosition(x=2, y=3)
