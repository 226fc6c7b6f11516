"""Tests for the tick driver."""

import random

import pytest

from sandbase.config import GridConfig
from sandbase.coordinates import grid_to_screen, screen_to_grid
from sandbase.driver import (
    RenderUpdate,
    apply_updates,
    process_tick,
    run_ticks,
)
from sandbase.grid import GridStore
from sandbase.types import GridPosition, Material, RenderPosition, TickPolicy
from sandbase.voxels import Voxel


def p(x: int, y: int) -> GridPosition:
    return GridPosition(x=x, y=y)


def r(x: float, y: float) -> RenderPosition:
    return RenderPosition(x=x, y=y)


def live(grid: GridStore, config: GridConfig) -> list[RenderPosition]:
    """Render positions for every voxel on the grid."""
    return [grid_to_screen(position, config) for position, _ in grid.occupied()]


def random_scene(config: GridConfig, seed: int, density: float = 0.35) -> GridStore:
    rng = random.Random(seed)
    grid = GridStore(config)
    for y in range(config.grid_height):
        for x in range(config.grid_width):
            if rng.random() < density:
                material = rng.choice(list(Material))
                grid.set(p(x, y), Voxel.spawn(material, config))
    return grid


class TestRenderUpdates:
    """Tests for what a tick reports to the host."""

    def test_falling_sand(self, grid: GridStore, config: GridConfig, sand: Voxel):
        grid.set(p(5, 10), sand)

        result = process_tick(grid, config, [r(50, 100)])

        assert result.updates == [RenderUpdate(r(50, 100), r(50, 90), sand)]
        assert grid.get(p(5, 9)) == sand
        assert grid.is_empty(p(5, 10))

    def test_swap_reports_both_voxels(
        self, water_in_trough: GridStore, config: GridConfig, sand: Voxel, water: Voxel
    ):
        result = process_tick(water_in_trough, config, live(water_in_trough, config))

        assert result.updates == [
            RenderUpdate(r(50, 0), r(50, 10), water),
            RenderUpdate(r(50, 10), r(50, 0), sand),
        ]
        assert result.moved == 2

    def test_swap_when_only_sinker_is_live(
        self, grid: GridStore, config: GridConfig, sand: Voxel, water: Voxel
    ):
        grid.set(p(5, 10), sand)
        grid.set(p(5, 9), water)

        result = process_tick(grid, config, [r(50, 100)])

        assert grid.get(p(5, 9)) == sand
        assert grid.get(p(5, 10)) == water
        assert {u.voxel.material for u in result.updates} == {
            Material.SAND,
            Material.WATER,
        }

    def test_water_moved_twice_reports_net_move(
        self,
        grid: GridStore,
        config: GridConfig,
        sand: Voxel,
        water: Voxel,
        earth: Voxel,
    ):
        """Water flows right, then sand above its new cell sinks through it."""
        grid.set(p(2, 0), earth)
        grid.set(p(3, 0), water)
        grid.set(p(4, 1), sand)

        result = process_tick(grid, config, live(grid, config))

        assert grid.get(p(4, 0)) == sand
        assert grid.get(p(4, 1)) == water
        assert result.updates == [
            RenderUpdate(r(30, 0), r(40, 10), water),
            RenderUpdate(r(40, 10), r(40, 0), sand),
        ]

    def test_resting_voxels_report_nothing(
        self, grid: GridStore, config: GridConfig, sand: Voxel
    ):
        grid.set(p(5, 0), sand)

        result = process_tick(grid, config, [r(50, 0)])

        assert result.updates == []
        assert result.move_results == []

    def test_live_position_inside_cell(
        self, grid: GridStore, config: GridConfig, sand: Voxel
    ):
        grid.set(p(5, 10), sand)

        result = process_tick(grid, config, [r(57.5, 103.2)])

        assert result.updates == [RenderUpdate(r(50, 100), r(50, 90), sand)]

    def test_stale_live_position_ignored(self, grid: GridStore, config: GridConfig):
        result = process_tick(grid, config, [r(50, 100)])
        assert result.updates == []

    def test_stale_live_position_in_flow_path(
        self, grid: GridStore, config: GridConfig, water: Voxel, earth: Voxel
    ):
        grid.set(p(2, 0), earth)
        grid.set(p(3, 0), water)

        result = process_tick(grid, config, [r(30, 0), r(40, 0)])

        assert result.updates == [RenderUpdate(r(30, 0), r(40, 0), water)]
        assert grid.get(p(4, 0)) == water

    @pytest.mark.parametrize("policy", list(TickPolicy))
    def test_tick_id_recorded(self, grid: GridStore, config: GridConfig, policy):
        result = process_tick(grid, config, [], policy=policy, tick_id=7)
        assert result.tick_id == 7


class TestApplyUpdates:
    def test_moves_matching_positions(self, config: GridConfig, sand: Voxel):
        updates = [RenderUpdate(r(50, 100), r(50, 90), sand)]

        moved = apply_updates([r(50, 100), r(10, 0)], updates, config)

        assert moved == [r(50, 90), r(10, 0)]

    def test_swap_applied_together(self, config: GridConfig, sand: Voxel, water: Voxel):
        updates = [
            RenderUpdate(r(50, 0), r(50, 10), water),
            RenderUpdate(r(50, 10), r(50, 0), sand),
        ]

        moved = apply_updates([r(50, 10), r(50, 0)], updates, config)

        assert moved == [r(50, 0), r(50, 10)]


class TestTickPolicies:
    """Both policies keep the grid and the live list in agreement."""

    @pytest.mark.parametrize("policy", list(TickPolicy))
    @pytest.mark.parametrize("seed", [1, 2, 3])
    def test_voxels_are_conserved(self, config: GridConfig, policy, seed: int):
        grid = random_scene(config, seed)
        counts = grid.material_counts()

        run_ticks(grid, config, live(grid, config), 30, policy)

        assert grid.material_counts() == counts

    @pytest.mark.parametrize("policy", list(TickPolicy))
    def test_carried_live_list_matches_grid(self, config: GridConfig, policy):
        grid = random_scene(config, seed=11)
        positions = live(grid, config)

        for _ in range(25):
            result = process_tick(grid, config, positions, policy)
            positions = apply_updates(positions, result.updates, config)

        assert sorted(
            (screen_to_grid(pos, config) for pos in positions),
            key=lambda g: (g.y, g.x),
        ) == [pos for pos, _ in grid.occupied()]

    @pytest.mark.parametrize("policy", list(TickPolicy))
    def test_input_order_does_not_matter(self, config: GridConfig, policy):
        first = random_scene(config, seed=5)
        second = random_scene(config, seed=5)
        positions = live(first, config)
        shuffled = list(positions)
        random.Random(0).shuffle(shuffled)

        process_tick(first, config, positions, policy)
        process_tick(second, config, shuffled, policy)

        assert (first.to_array() == second.to_array()).all()

    def test_policies_differ_on_stacked_sand(self, config: GridConfig, sand: Voxel):
        sequential = GridStore(config)
        buffered = GridStore(config)
        for grid in (sequential, buffered):
            grid.set(p(5, 6), sand)
            grid.set(p(5, 5), sand)

        process_tick(sequential, config, live(sequential, config), TickPolicy.SEQUENTIAL)
        process_tick(buffered, config, live(buffered, config), TickPolicy.BUFFERED)

        assert [pos for pos, _ in sequential.occupied()] == [p(5, 4), p(5, 5)]
        assert [pos for pos, _ in buffered.occupied()] == [p(5, 4), p(4, 5)]


class TestRunTicks:
    def test_sand_reaches_floor(self, grid: GridStore, config: GridConfig, sand: Voxel):
        grid.set(p(5, 10), sand)

        results = run_ticks(grid, config, [r(50, 100)], 15)

        assert len(results) == 15
        assert [result.tick_id for result in results] == list(range(15))
        assert grid.get(p(5, 0)) == sand
        assert grid.voxel_count() == 1
        assert all(result.moved == 1 for result in results[:10])
        assert all(result.moved == 0 for result in results[10:])

    def test_water_column_flattens(
        self, grid: GridStore, config: GridConfig, water: Voxel
    ):
        column = [p(5, y) for y in range(3)]
        for position in column:
            grid.set(position, water)

        run_ticks(grid, config, live(grid, config), 10)

        assert {pos.y for pos, _ in grid.occupied()} == {0}
        assert grid.voxel_count() == 3
