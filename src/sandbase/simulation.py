"""Host-facing API: grid setup, placement and ticking."""

from typing import Iterable

import structlog

from .config import Config, GridConfig, config_to_placements
from .coordinates import grid_to_screen, screen_to_grid
from .driver import RenderUpdate, TickResult, apply_updates, process_tick
from .grid import GridStore
from .types import GridPosition, Material, RenderPosition, TickPolicy
from .voxels import Voxel

logger = structlog.get_logger()


def initialize(config: GridConfig) -> GridStore:
    """Create an empty grid sized by config."""
    grid = GridStore(config)
    logger.info(
        "grid_initialized",
        grid_width=config.grid_width,
        grid_height=config.grid_height,
        cell_pixel_size=config.cell_pixel_size,
        pixel_width=config.pixel_width,
        pixel_height=config.pixel_height,
    )
    return grid


def place_voxel(
    grid: GridStore, position: GridPosition, material: Material
) -> Voxel | None:
    """Create and store a voxel of material at position.

    Placing onto an occupied cell does nothing and returns None.

    Raises:
        OutOfRangeError: If position is off the grid.
    """
    if not grid.is_empty(position):
        logger.debug("placement_skipped_occupied", position=str(position))
        return None
    voxel = Voxel.spawn(material, grid.config)
    grid.set(position, voxel)
    logger.debug("voxel_placed", position=str(position), material=material.value)
    return voxel


def tick(
    grid: GridStore,
    config: GridConfig,
    live_voxel_positions: Iterable[RenderPosition],
    policy: TickPolicy = TickPolicy.SEQUENTIAL,
) -> list[RenderUpdate]:
    """Run one simulation step and return the renderable updates to apply."""
    return process_tick(grid, config, live_voxel_positions, policy).updates


class Simulation:
    """
    Stateful wrapper that plays the host's part for headless runs.

    Tracks live voxel render positions the way a renderer tracks its
    drawables, the tick counter, and the material used by placement.

    Usage:
        sim = Simulation(GridConfig(grid_width=64, grid_height=48))
        sim.place(GridPosition(x=10, y=40))
        sim.run(100)
    """

    def __init__(
        self,
        config: GridConfig,
        policy: TickPolicy = TickPolicy.SEQUENTIAL,
        mode: Material = Material.SAND,
    ):
        self.config = config
        self.policy = policy
        self.mode = mode
        self.grid = initialize(config)
        self.tick_id = 0
        self._live: list[RenderPosition] = []

    @classmethod
    def from_config(cls, config: Config) -> "Simulation":
        """Build a simulation and place the scene's voxels."""
        sim = cls(
            config.grid,
            policy=config.simulation.policy,
            mode=config.simulation.mode,
        )
        placed = 0
        for position, material in config_to_placements(config):
            if sim.place(position, material) is not None:
                placed += 1
        logger.info("scene_loaded", placed=placed, policy=sim.policy.value)
        return sim

    def _to_grid(self, position: GridPosition | RenderPosition) -> GridPosition:
        if isinstance(position, RenderPosition):
            return screen_to_grid(position, self.config)
        return position

    def place(
        self,
        position: GridPosition | RenderPosition,
        material: Material | None = None,
    ) -> Voxel | None:
        """Place a voxel, defaulting to the current mode.

        Render positions (a pointer, say) are snapped into the grid first.
        Returns None if the cell was already occupied.
        """
        grid_pos = self._to_grid(position)
        voxel = place_voxel(self.grid, grid_pos, material or self.mode)
        if voxel is not None:
            self._live.append(grid_to_screen(grid_pos, self.config))
        return voxel

    def remove(self, position: GridPosition | RenderPosition) -> Voxel | None:
        """Clear a cell and drop its renderable. Returns the removed voxel."""
        grid_pos = self._to_grid(position)
        voxel = self.grid.get(grid_pos)
        if not isinstance(voxel, Voxel):
            return None
        self.grid.clear(grid_pos)
        render_pos = grid_to_screen(grid_pos, self.config)
        self._live = [p for p in self._live if p != render_pos]
        logger.debug("voxel_removed", position=str(grid_pos))
        return voxel

    def cycle_mode(self) -> Material:
        """Switch placement to the next material and return it."""
        self.mode = self.mode.next()
        logger.info("mode_changed", mode=self.mode.value)
        return self.mode

    def live_positions(self) -> list[RenderPosition]:
        """Render positions of every live voxel."""
        return list(self._live)

    def step(self) -> TickResult:
        """Advance the simulation by one tick."""
        result = process_tick(
            self.grid, self.config, self._live, self.policy, tick_id=self.tick_id
        )
        self._live = apply_updates(self._live, result.updates, self.config)
        self.tick_id += 1
        return result

    def run(self, num_ticks: int) -> list[TickResult]:
        """Advance the simulation by num_ticks ticks."""
        return [self.step() for _ in range(num_ticks)]

    def is_settled(self) -> bool:
        """Whether a tick would move nothing, judged without mutating the grid."""
        probe = self.grid.copy()
        result = process_tick(probe, self.config, self._live, self.policy)
        return not result.updates
