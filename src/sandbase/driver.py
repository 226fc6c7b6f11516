"""Tick driver: one simulation step over every live voxel."""

import time
from dataclasses import dataclass, field
from typing import Iterable

import structlog

from .config import GridConfig
from .coordinates import grid_to_screen, screen_to_grid
from .grid import GridStore
from .movement import (
    MoveResult,
    order_key,
    process_buffered_moves,
    process_sequential_moves,
)
from .types import GridPosition, RenderPosition, TickPolicy
from .voxels import Voxel

logger = structlog.get_logger()


@dataclass(frozen=True)
class RenderUpdate:
    """A renderable the host must move from old_position to new_position."""

    old_position: RenderPosition
    new_position: RenderPosition
    voxel: Voxel


@dataclass
class TickResult:
    """Result of a completed tick."""

    tick_id: int
    updates: list[RenderUpdate] = field(default_factory=list)
    move_results: list[MoveResult] = field(default_factory=list)
    duration_ms: float = 0.0

    @property
    def moved(self) -> int:
        """Number of voxels that changed cell, swap partners included."""
        return len(self.updates)


def net_displacements(
    results: list[MoveResult],
) -> dict[GridPosition, tuple[GridPosition, Voxel]]:
    """Replay moves in the order applied and track where each voxel started.

    In a sequential tick a voxel can move on its own turn and then be pushed
    up again as a later swap partner, so only its net displacement is useful
    to a host.

    Returns:
        Mapping of final cell -> (cell at tick start, voxel) for every voxel
        touched by a successful move.
    """
    placed: dict[GridPosition, tuple[GridPosition, Voxel]] = {}
    for result in results:
        if not result.success:
            continue
        mover_origin, _ = placed.pop(result.from_pos, (result.from_pos, result.voxel))
        if result.swapped_with is not None:
            partner_origin, _ = placed.pop(
                result.to_pos, (result.to_pos, result.swapped_with)
            )
            placed[result.from_pos] = (partner_origin, result.swapped_with)
        placed[result.to_pos] = (mover_origin, result.voxel)
    return placed


def updates_for(results: list[MoveResult], config: GridConfig) -> list[RenderUpdate]:
    """Translate successful moves into render-space updates.

    One update per voxel that ended the tick in a different cell; a swap
    therefore yields one for each occupant. Updates are keyed by old
    position, so hosts apply a tick's updates together.
    """
    moved = [
        (origin, final, voxel)
        for final, (origin, voxel) in net_displacements(results).items()
        if origin != final
    ]
    moved.sort(key=lambda m: order_key(m[0]))
    return [
        RenderUpdate(
            grid_to_screen(origin, config), grid_to_screen(final, config), voxel
        )
        for origin, final, voxel in moved
    ]


def process_tick(
    grid: GridStore,
    config: GridConfig,
    live_positions: Iterable[RenderPosition],
    policy: TickPolicy = TickPolicy.SEQUENTIAL,
    tick_id: int = 0,
) -> TickResult:
    """
    Run one simulation step and report what moved.

    Args:
        grid: Grid store, mutated in place
        config: Grid configuration used for coordinate conversion
        live_positions: Render positions of every live voxel
        policy: SEQUENTIAL (in place, bottom-to-top) or BUFFERED (snapshot)
        tick_id: Tick number recorded in the result

    Returns:
        TickResult with render updates and per-voxel move results
    """
    start = time.time()

    positions = [screen_to_grid(p, config) for p in live_positions]

    if policy is TickPolicy.BUFFERED:
        move_results = process_buffered_moves(grid, positions)
    else:
        move_results = process_sequential_moves(grid, positions)

    updates = updates_for(move_results, config)

    elapsed_ms = (time.time() - start) * 1000

    logger.debug(
        "tick_processed",
        tick_id=tick_id,
        policy=policy.value,
        live=len(positions),
        moves_decided=len(move_results),
        moves_succeeded=sum(1 for r in move_results if r.success),
        duration_ms=elapsed_ms,
    )

    return TickResult(
        tick_id=tick_id,
        updates=updates,
        move_results=move_results,
        duration_ms=elapsed_ms,
    )


def apply_updates(
    live_positions: Iterable[RenderPosition],
    updates: list[RenderUpdate],
    config: GridConfig,
) -> list[RenderPosition]:
    """Move live render positions the way a host moves its renderables.

    Positions are matched by the cell they fall in; positions that did not
    move are returned unchanged.
    """
    relocated = {u.old_position: u.new_position for u in updates}
    return [
        relocated.get(grid_to_screen(screen_to_grid(p, config), config), p)
        for p in live_positions
    ]


def run_ticks(
    grid: GridStore,
    config: GridConfig,
    live_positions: Iterable[RenderPosition],
    num_ticks: int,
    policy: TickPolicy = TickPolicy.SEQUENTIAL,
) -> list[TickResult]:
    """
    Run a fixed number of ticks (useful for testing).

    Live positions are carried from tick to tick using each tick's updates.

    Args:
        grid: Grid store, mutated in place
        config: Grid configuration
        live_positions: Render positions of every live voxel
        num_ticks: Number of ticks to run
        policy: Tick policy

    Returns:
        List of TickResults
    """
    positions = list(live_positions)
    results: list[TickResult] = []

    for tick_id in range(num_ticks):
        result = process_tick(grid, config, positions, policy, tick_id=tick_id)
        positions = apply_updates(positions, result.updates, config)
        results.append(result)

    return results
