"""Core types for the voxel simulation."""

from enum import Enum

from pydantic import BaseModel, Field


class Kind(str, Enum):
    """Physical kind of a voxel, which decides how it meets other voxels."""

    SOLID = "solid"
    LIQUID = "liquid"


class Material(str, Enum):
    """Voxel materials with their physical kind."""

    SAND = "sand"
    WATER = "water"
    EARTH = "earth"

    @property
    def kind(self) -> Kind:
        """Physical kind derived from the material."""
        return _MATERIAL_KINDS[self]

    def next(self) -> "Material":
        """Next material in the placement cycle (sand -> water -> earth)."""
        members = list(Material)
        return members[(members.index(self) + 1) % len(members)]


_MATERIAL_KINDS: dict[Material, Kind] = {
    Material.SAND: Kind.SOLID,
    Material.WATER: Kind.LIQUID,
    Material.EARTH: Kind.SOLID,
}


class Direction(str, Enum):
    """Neighbor offsets consulted by the movement rules."""

    LEFT = "left"
    RIGHT = "right"
    BOTTOM = "bottom"
    BOTTOM_LEFT = "bottom_left"
    BOTTOM_RIGHT = "bottom_right"
    BOTTOM2_LEFT = "bottom2_left"
    BOTTOM2_RIGHT = "bottom2_right"


# Direction deltas for neighbor lookup
# Coordinate system: +X is right, +Y is up, row 0 is the bottom of the grid
DIRECTION_DELTAS: dict[Direction, tuple[int, int]] = {
    Direction.LEFT: (-1, 0),
    Direction.RIGHT: (1, 0),
    Direction.BOTTOM: (0, -1),
    Direction.BOTTOM_LEFT: (-1, -1),
    Direction.BOTTOM_RIGHT: (1, -1),
    Direction.BOTTOM2_LEFT: (-1, -2),
    Direction.BOTTOM2_RIGHT: (1, -2),
}


class GridPosition(BaseModel, frozen=True):
    """Immutable integer cell coordinate."""

    x: int
    y: int

    def as_index(self, width: int) -> int:
        """Flat store index for a grid of the given width."""
        return self.y * width + self.x

    @classmethod
    def from_index(cls, index: int, width: int) -> "GridPosition":
        """Inverse of as_index."""
        return cls(x=index % width, y=index // width)

    def __hash__(self) -> int:
        return hash((self.x, self.y))

    def __str__(self) -> str:
        return f"({self.x}, {self.y})"

    def __repr__(self) -> str:
        return f"GridPosition(x={self.x}, y={self.y})"


class RenderPosition(BaseModel, frozen=True):
    """Continuous coordinate in render/screen space."""

    x: float = Field(allow_inf_nan=False)
    y: float = Field(allow_inf_nan=False)

    def __hash__(self) -> int:
        return hash((self.x, self.y))

    def __str__(self) -> str:
        return f"({self.x}, {self.y})"

    def __repr__(self) -> str:
        return f"RenderPosition(x={self.x}, y={self.y})"


class SnappedPosition(BaseModel, frozen=True):
    """Render-space coordinate quantized to the cell grid and clamped to it."""

    x: float = Field(allow_inf_nan=False)
    y: float = Field(allow_inf_nan=False)

    def __hash__(self) -> int:
        return hash((self.x, self.y))

    def __str__(self) -> str:
        return f"({self.x}, {self.y})"

    def __repr__(self) -> str:
        return f"SnappedPosition(x={self.x}, y={self.y})"


class TickPolicy(str, Enum):
    """How a tick orders its reads and writes of the grid."""

    # Single buffer, mutated in place, row-major bottom-to-top order
    SEQUENTIAL = "sequential"
    # Decide against a snapshot, commit all moves at tick end
    BUFFERED = "buffered"
