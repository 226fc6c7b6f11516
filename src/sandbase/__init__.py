"""Voxel falling-sand simulation core."""

from .config import Config, GridConfig, PlacementConfig, SimulationConfig, load_config
from .coordinates import (
    grid_to_screen,
    grid_to_snapped,
    render_to_snapped,
    screen_to_grid,
    snapped_to_grid,
    snapped_to_render,
)
from .driver import RenderUpdate, TickResult, process_tick, run_ticks
from .exceptions import ConfigNotFoundError, OutOfRangeError, SandbaseError
from .grid import MATERIAL_CODES, GridStore
from .movement import MoveClaim, MoveResult, MovementResolver
from .neighbors import Neighbor, NeighborResolver
from .rules import (
    RULES,
    Displace,
    Move,
    MovementRule,
    RuleEngine,
    Swap,
    decide_move,
    falling_solid,
    liquid,
)
from .simulation import Simulation, initialize, place_voxel, tick
from .types import (
    DIRECTION_DELTAS,
    Direction,
    GridPosition,
    Kind,
    Material,
    RenderPosition,
    SnappedPosition,
    TickPolicy,
)
from .voxels import ABSENT, OUT_OF_BOUNDS, Occupant, Sentinel, Voxel

__all__ = [
    # Types
    "Direction",
    "DIRECTION_DELTAS",
    "GridPosition",
    "Kind",
    "Material",
    "RenderPosition",
    "SnappedPosition",
    "TickPolicy",
    # Config
    "Config",
    "GridConfig",
    "PlacementConfig",
    "SimulationConfig",
    "load_config",
    # Coordinates
    "render_to_snapped",
    "snapped_to_grid",
    "grid_to_snapped",
    "snapped_to_render",
    "screen_to_grid",
    "grid_to_screen",
    # Voxels
    "ABSENT",
    "OUT_OF_BOUNDS",
    "Occupant",
    "Sentinel",
    "Voxel",
    # Grid
    "GridStore",
    "MATERIAL_CODES",
    # Neighbors
    "Neighbor",
    "NeighborResolver",
    # Rules
    "Displace",
    "Swap",
    "Move",
    "MovementRule",
    "RULES",
    "RuleEngine",
    "decide_move",
    "falling_solid",
    "liquid",
    # Movement
    "MoveClaim",
    "MoveResult",
    "MovementResolver",
    # Driver
    "RenderUpdate",
    "TickResult",
    "process_tick",
    "run_ticks",
    # Simulation
    "Simulation",
    "initialize",
    "place_voxel",
    "tick",
    # Exceptions
    "SandbaseError",
    "OutOfRangeError",
    "ConfigNotFoundError",
]
