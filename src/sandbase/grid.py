"""Grid store: flat fixed-size cell storage."""

from collections import Counter
from typing import Iterator

import numpy as np
from numpy.typing import NDArray

from .config import GridConfig
from .exceptions import OutOfRangeError
from .types import GridPosition, Material
from .voxels import ABSENT, Sentinel, Voxel

# Material -> code in exported arrays; 0 is an empty cell
MATERIAL_CODES: dict[Material, int] = {
    Material.SAND: 1,
    Material.WATER: 2,
    Material.EARTH: 3,
}


class GridStore:
    """
    Mutable mapping from grid position to cell contents.

    Cells live in one list indexed by ``y * width + x``. Off-grid access is a
    caller error and raises OutOfRangeError; wraparound and the out-of-bounds
    sentinel belong to the neighbor resolver, not the store.
    """

    def __init__(self, config: GridConfig):
        self.config = config
        self._cells: list[Voxel | Sentinel] = [ABSENT] * config.cell_count

    @property
    def width(self) -> int:
        return self.config.grid_width

    @property
    def height(self) -> int:
        return self.config.grid_height

    def in_bounds(self, position: GridPosition) -> bool:
        """Check if position is within grid bounds."""
        return self.config.contains(position)

    def _index(self, position: GridPosition) -> int:
        if not self.in_bounds(position):
            raise OutOfRangeError(
                f"Position {position} outside {self.width}x{self.height} grid"
            )
        return position.as_index(self.width)

    def get(self, position: GridPosition) -> Voxel | Sentinel:
        """Get the voxel at position, or ABSENT.

        Raises:
            OutOfRangeError: If position is off the grid.
        """
        return self._cells[self._index(position)]

    def set(self, position: GridPosition, voxel: Voxel) -> None:
        """Store voxel at position, replacing whatever was there.

        Raises:
            OutOfRangeError: If position is off the grid.
            TypeError: If given a sentinel instead of a voxel.
        """
        if not isinstance(voxel, Voxel):
            raise TypeError(f"Only voxels can be stored, got {voxel!r}")
        self._cells[self._index(position)] = voxel

    def clear(self, position: GridPosition) -> None:
        """Empty the cell at position.

        Raises:
            OutOfRangeError: If position is off the grid.
        """
        self._cells[self._index(position)] = ABSENT

    def is_empty(self, position: GridPosition) -> bool:
        """Check if the cell at position holds nothing."""
        return self.get(position) is ABSENT

    def occupied(self) -> Iterator[tuple[GridPosition, Voxel]]:
        """Yield occupied cells row by row, bottom row first."""
        for index, cell in enumerate(self._cells):
            if isinstance(cell, Voxel):
                yield GridPosition.from_index(index, self.width), cell

    def voxel_count(self) -> int:
        """Return number of occupied cells."""
        return sum(1 for cell in self._cells if isinstance(cell, Voxel))

    def material_counts(self) -> dict[Material, int]:
        """Count occupied cells per material."""
        counts = Counter(
            cell.material for cell in self._cells if isinstance(cell, Voxel)
        )
        return {material: counts.get(material, 0) for material in Material}

    def copy(self) -> "GridStore":
        """Return an independent snapshot of the store."""
        snapshot = GridStore(self.config)
        snapshot._cells = list(self._cells)
        return snapshot

    def to_array(self) -> NDArray[np.uint8]:
        """Export material codes as a (height, width) array.

        Row 0 of the array is grid row 0, the bottom of the grid. Empty cells
        are 0, occupied cells use MATERIAL_CODES.
        """
        codes = np.zeros(self.config.cell_count, dtype=np.uint8)
        for index, cell in enumerate(self._cells):
            if isinstance(cell, Voxel):
                codes[index] = MATERIAL_CODES[cell.material]
        return codes.reshape((self.height, self.width))
