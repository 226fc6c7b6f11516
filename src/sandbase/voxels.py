"""Cell contents: occupied voxels and the two sentinels.

A cell read through the neighbor resolver is exactly one of:

- ``ABSENT``: nothing there, the only legal move target
- a ``Voxel``: an occupied cell
- ``OUT_OF_BOUNDS``: the location is not part of the grid

The grid store only ever holds ``ABSENT`` or a ``Voxel``.
"""

from enum import Enum
from typing import Any

from pydantic import BaseModel, model_validator

from .config import GridConfig
from .types import Kind, Material


class Sentinel(Enum):
    """Non-voxel cell markers."""

    ABSENT = "absent"
    OUT_OF_BOUNDS = "out_of_bounds"

    def __repr__(self) -> str:
        return self.name


ABSENT = Sentinel.ABSENT
OUT_OF_BOUNDS = Sentinel.OUT_OF_BOUNDS


class Voxel(BaseModel, frozen=True):
    """Immutable occupant of one grid cell.

    ``kind`` is derived from ``material`` when omitted and must agree with it
    when given.
    """

    material: Material
    kind: Kind
    size: float = 1.0
    fall_speed: float = 1.0

    @model_validator(mode="before")
    @classmethod
    def _derive_kind(cls, data: Any) -> Any:
        if not isinstance(data, dict) or "material" not in data:
            return data
        expected = Material(data["material"]).kind
        given = data.get("kind")
        if given is not None and Kind(given) is not expected:
            raise ValueError(
                f"{Material(data['material']).value} voxels are "
                f"{expected.value}, not {Kind(given).value}"
            )
        return {**data, "kind": expected}

    @classmethod
    def spawn(cls, material: Material, config: GridConfig) -> "Voxel":
        """Create a voxel sized for the configured cell."""
        return cls(
            material=material,
            size=config.cell_pixel_size,
            fall_speed=config.cell_pixel_size,
        )

    @property
    def is_liquid(self) -> bool:
        return self.kind is Kind.LIQUID

    @property
    def is_solid(self) -> bool:
        return self.kind is Kind.SOLID


# What a neighbor lookup can see
Occupant = Voxel | Sentinel
