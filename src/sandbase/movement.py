"""Move application and conflict resolution."""

from dataclasses import dataclass

import structlog

from .grid import GridStore
from .rules import Displace, Move, RuleEngine, Swap
from .types import GridPosition
from .voxels import Voxel

logger = structlog.get_logger()


@dataclass(frozen=True)
class MoveClaim:
    """A move decided against the tick's snapshot, awaiting resolution."""

    from_pos: GridPosition
    voxel: Voxel
    move: Move

    @property
    def to_pos(self) -> GridPosition:
        return self.move.target


@dataclass
class MoveResult:
    """Result of a decided move for a single voxel."""

    voxel: Voxel
    success: bool
    from_pos: GridPosition
    to_pos: GridPosition  # Same as from_pos if failed
    swapped_with: Voxel | None = None  # Occupant sent back to from_pos by a swap
    failure_reason: str | None = None


def order_key(position: GridPosition) -> tuple[int, int]:
    """Row-major, bottom row first."""
    return (position.y, position.x)


def apply_move(
    grid: GridStore, from_pos: GridPosition, voxel: Voxel, move: Move
) -> MoveResult:
    """Write a move into the grid.

    Displace empties the source and fills the target. Swap relocates both
    occupants: the mover takes the target and the target's occupant takes the
    source.
    """
    target = move.target
    if isinstance(move, Swap):
        displaced = grid.get(target)
        if not isinstance(displaced, Voxel):
            raise ValueError(f"Swap target {target} holds no voxel")
        grid.set(target, voxel)
        grid.set(from_pos, displaced)
        return MoveResult(
            voxel=voxel,
            success=True,
            from_pos=from_pos,
            to_pos=target,
            swapped_with=displaced,
        )

    grid.clear(from_pos)
    grid.set(target, voxel)
    return MoveResult(voxel=voxel, success=True, from_pos=from_pos, to_pos=target)


class MovementResolver:
    """
    Resolves simultaneous moves using claim-resolve-enact.

    Every voxel decides against a snapshot taken when the resolver is
    created, so decisions do not depend on processing order. Conflicts are
    then settled before anything is written.

    Conflict resolution rules:
    - Same destination: the claimant lowest in the grid (then leftmost) wins,
      losers stay
    - Swap whose target occupant also moves: the swap fails
    """

    def __init__(self, grid: GridStore):
        self.grid = grid
        self.snapshot = grid.copy()
        self.engine = RuleEngine(self.snapshot)

    def claim(self, position: GridPosition) -> MoveClaim | None:
        """
        Decide the move for the voxel at position in the snapshot.
        Returns None if the cell is empty or the voxel stays put.
        """
        voxel = self.snapshot.get(position)
        if not isinstance(voxel, Voxel):
            logger.debug("claim_skipped_empty", position=str(position))
            return None
        move = self.engine.decide_for(voxel, position)
        if move is None:
            return None
        return MoveClaim(from_pos=position, voxel=voxel, move=move)

    def resolve_conflicts(self, claims: list[MoveClaim]) -> list[MoveResult]:
        """
        Resolve movement conflicts and return results in claim order.

        Algorithm:
        1. Build destination -> claimants mapping
        2. Keep the first claimant per destination
        3. Fail swaps whose target occupant won its own move
        4. Return results
        """
        if not claims:
            return []

        ordered = sorted(claims, key=lambda c: order_key(c.from_pos))

        dest_to_claims: dict[GridPosition, list[MoveClaim]] = {}
        for claim in ordered:
            dest_to_claims.setdefault(claim.to_pos, []).append(claim)

        failed: dict[GridPosition, str] = {}  # from_pos -> reason

        # Phase 1: same-destination conflicts
        for dest, dest_claims in dest_to_claims.items():
            if len(dest_claims) == 1:
                continue
            winner, losers = dest_claims[0], dest_claims[1:]
            for loser in losers:
                failed[loser.from_pos] = "same_destination_conflict"
            logger.debug(
                "same_dest_conflict",
                dest=str(dest),
                winner=str(winner.from_pos),
                losers=[str(c.from_pos) for c in losers],
            )

        # Phase 2: swaps into a cell whose occupant is leaving
        moving_from = {c.from_pos for c in ordered if c.from_pos not in failed}
        for claim in ordered:
            if claim.from_pos in failed or not isinstance(claim.move, Swap):
                continue
            if claim.to_pos in moving_from:
                failed[claim.from_pos] = "swap_target_moving"
                logger.debug(
                    "swap_target_moving",
                    from_pos=str(claim.from_pos),
                    to_pos=str(claim.to_pos),
                )

        results: list[MoveResult] = []
        for claim in ordered:
            if claim.from_pos in failed:
                results.append(
                    MoveResult(
                        voxel=claim.voxel,
                        success=False,
                        from_pos=claim.from_pos,
                        to_pos=claim.from_pos,  # Stay in place
                        failure_reason=failed[claim.from_pos],
                    )
                )
            else:
                results.append(
                    MoveResult(
                        voxel=claim.voxel,
                        success=True,
                        from_pos=claim.from_pos,
                        to_pos=claim.to_pos,
                    )
                )
        return results

    def enact_moves(self, results: list[MoveResult]) -> list[MoveResult]:
        """Apply successful moves to the live grid.

        Destinations are distinct and never another mover's source, so the
        moves can be written one after another. A destination that still
        holds a voxel is a swap partner.

        Returns:
            The enacted results, with swap partners filled in.
        """
        enacted = []
        for result in results:
            if not result.success:
                enacted.append(result)
                continue
            target = result.to_pos
            move: Move = (
                Swap(target)
                if isinstance(self.grid.get(target), Voxel)
                else Displace(target)
            )
            enacted.append(apply_move(self.grid, result.from_pos, result.voxel, move))
        return enacted


def process_buffered_moves(
    grid: GridStore, positions: list[GridPosition]
) -> list[MoveResult]:
    """
    Process one buffered tick.

    Args:
        grid: The grid, updated in place once all moves are resolved
        positions: Live voxel positions

    Returns:
        List of MoveResults for every voxel that decided to move
    """
    resolver = MovementResolver(grid)

    # Phase A: Decide against the snapshot
    claims: list[MoveClaim] = []
    for position in sorted(set(positions), key=order_key):
        claim = resolver.claim(position)
        if claim:
            claims.append(claim)

    # Phase B: Resolve conflicts
    results = resolver.resolve_conflicts(claims)

    # Phase C: Enact moves
    return resolver.enact_moves(results)


def process_sequential_moves(
    grid: GridStore, positions: list[GridPosition]
) -> list[MoveResult]:
    """
    Process one single-buffer tick.

    Voxels are visited row by row from the bottom, each deciding against the
    grid as already updated by the voxels before it. Only cells occupied when
    the tick starts are visited, so a voxel that moves into a stale live
    position is not visited again there.

    Returns:
        List of MoveResults for every voxel that moved
    """
    engine = RuleEngine(grid)
    visits: list[tuple[GridPosition, Voxel]] = []
    for position in sorted(set(positions), key=order_key):
        voxel = grid.get(position)
        if not isinstance(voxel, Voxel):
            logger.debug("live_position_empty", position=str(position))
            continue
        visits.append((position, voxel))

    results: list[MoveResult] = []
    for position, voxel in visits:
        move = engine.decide_for(voxel, position)
        if move is None:
            continue
        results.append(apply_move(grid, position, voxel, move))
    return results
