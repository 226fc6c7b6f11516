"""Grid configuration and scene loading from TOML files."""

import tomllib
from pathlib import Path

from pydantic import BaseModel, Field, model_validator

from .exceptions import ConfigNotFoundError
from .types import GridPosition, Material, TickPolicy


class GridConfig(BaseModel, frozen=True):
    """Immutable grid dimensions and the render size of one cell."""

    grid_width: int = Field(default=128, gt=0, description="Grid width in cells")
    grid_height: int = Field(default=72, gt=0, description="Grid height in cells")
    cell_pixel_size: float = Field(
        default=10.0, gt=0, description="Render units covered by one cell"
    )

    @property
    def pixel_width(self) -> float:
        """Grid width in render units."""
        return self.grid_width * self.cell_pixel_size

    @property
    def pixel_height(self) -> float:
        """Grid height in render units."""
        return self.grid_height * self.cell_pixel_size

    @property
    def cell_count(self) -> int:
        """Total number of cells in the grid."""
        return self.grid_width * self.grid_height

    def contains(self, position: GridPosition) -> bool:
        """Check if a grid position lies on the grid."""
        return 0 <= position.x < self.grid_width and 0 <= position.y < self.grid_height


class SimulationConfig(BaseModel):
    """Tick settings for a scene run."""

    policy: TickPolicy = TickPolicy.SEQUENTIAL
    ticks: int = Field(default=100, ge=0, description="Ticks to run from the CLI")
    mode: Material = Field(
        default=Material.SAND, description="Initial placement material"
    )


class PlacementConfig(BaseModel):
    """A rectangle of voxels placed when the scene loads."""

    material: Material
    x: int = Field(ge=0)
    y: int = Field(ge=0)
    width: int = Field(default=1, gt=0)
    height: int = Field(default=1, gt=0)


class Config(BaseModel):
    """Complete configuration for a scene."""

    grid: GridConfig = Field(default_factory=GridConfig)
    simulation: SimulationConfig = Field(default_factory=SimulationConfig)
    placements: list[PlacementConfig] = Field(default_factory=list)

    @model_validator(mode="after")
    def _placements_fit_grid(self) -> "Config":
        for placement in self.placements:
            right = placement.x + placement.width
            top = placement.y + placement.height
            if right > self.grid.grid_width or top > self.grid.grid_height:
                raise ValueError(
                    f"{placement.material.value} placement at "
                    f"({placement.x}, {placement.y}) size "
                    f"{placement.width}x{placement.height} does not fit a "
                    f"{self.grid.grid_width}x{self.grid.grid_height} grid"
                )
        return self


def load_config(config_path: Path) -> Config:
    """Load configuration from a TOML file.

    Args:
        config_path: Path to the TOML config file.

    Returns:
        Parsed Config object.

    Raises:
        FileNotFoundError: If config file doesn't exist.
        tomllib.TOMLDecodeError: If TOML is malformed.
        pydantic.ValidationError: If values are missing or out of range.
    """
    with open(config_path, "rb") as f:
        data = tomllib.load(f)
    return Config.model_validate(data)


def find_config(name: str) -> Path:
    """Find a config file by name.

    Searches in the following order:
    1. Exact path if name contains path separator or ends in .toml
    2. configs/{name}.toml
    3. configs/{name}

    Args:
        name: Config name or path.

    Returns:
        Path to the config file.

    Raises:
        ConfigNotFoundError: If config file is not found.
    """
    if "/" in name or name.endswith(".toml"):
        path = Path(name)
        if path.exists():
            return path
        raise ConfigNotFoundError(f"Config file not found: {name}")

    configs_dir = _configs_dir()

    config_path = configs_dir / f"{name}.toml"
    if config_path.exists():
        return config_path

    config_path = configs_dir / name
    if config_path.exists():
        return config_path

    raise ConfigNotFoundError(
        f"Config '{name}' not found in {configs_dir}. "
        f"Available configs: {list_configs()}"
    )


def list_configs() -> list[str]:
    """List available config names."""
    configs_dir = _configs_dir()
    if not configs_dir.exists():
        return []
    return sorted(p.stem for p in configs_dir.glob("*.toml"))


def _configs_dir() -> Path:
    # Shipped as package data beside this module
    return Path(__file__).parent / "configs"


def config_to_placements(config: Config) -> list[tuple[GridPosition, Material]]:
    """Expand placement rectangles into one entry per cell.

    Each rectangle is listed row by row from the bottom. Where rectangles
    overlap, the one listed first keeps the cell because placement skips
    occupied cells.
    """
    placements = []
    for placement in config.placements:
        for y in range(placement.y, placement.y + placement.height):
            for x in range(placement.x, placement.x + placement.width):
                placements.append((GridPosition(x=x, y=y), placement.material))
    return placements
