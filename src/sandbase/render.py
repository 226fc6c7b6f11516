"""Headless frame rendering for the CLI host.

Draws the grid as ASCII for terminals or as a PNG, one block of pixels per
cell. The simulation core never calls into this module.
"""

from pathlib import Path

from PIL import Image

from .grid import MATERIAL_CODES, GridStore
from .types import Material

EMPTY_CODE = 0

MATERIAL_CHARS: dict[Material, str] = {
    Material.SAND: "s",
    Material.WATER: "~",
    Material.EARTH: "#",
}
EMPTY_CHAR = "."

# Colors for each material (RGB)
MATERIAL_COLORS: dict[Material, tuple[int, int, int]] = {
    Material.SAND: (194, 178, 0),    # Sandy yellow
    Material.WATER: (0, 191, 255),   # Sky blue
    Material.EARTH: (139, 69, 19),   # Brown
}
BACKGROUND_COLOR = (24, 24, 24)

# Material code -> color, as read from GridStore.to_array()
CODE_COLORS: dict[int, tuple[int, int, int]] = {
    EMPTY_CODE: BACKGROUND_COLOR,
    **{code: MATERIAL_COLORS[m] for m, code in MATERIAL_CODES.items()},
}


def render_ascii(grid: GridStore) -> str:
    """Draw the grid top row first, one character per cell."""
    chars = {code: MATERIAL_CHARS[m] for m, code in MATERIAL_CODES.items()}
    chars[EMPTY_CODE] = EMPTY_CHAR
    codes = grid.to_array()
    return "\n".join(
        "".join(chars[int(code)] for code in row) for row in codes[::-1]
    )


def generate_frame_image(grid: GridStore, scale: int = 1) -> Image.Image:
    """Generate an RGB frame with scale x scale pixels per cell.

    Args:
        grid: Grid to draw.
        scale: Pixels per cell along each axis.

    Returns:
        PIL Image, top grid row at the top of the image.
    """
    if scale < 1:
        raise ValueError(f"scale must be at least 1, got {scale}")

    codes = grid.to_array()
    height, width = codes.shape

    img = Image.new("RGB", (width, height))
    pixels = img.load()

    # Grid row 0 is the bottom; image row 0 is the top
    for y in range(height):
        for x in range(width):
            pixels[x, height - 1 - y] = CODE_COLORS[int(codes[y, x])]

    if scale > 1:
        img = img.resize((width * scale, height * scale), Image.Resampling.NEAREST)
    return img


def render_image(grid: GridStore, output_path: Path, scale: int = 4) -> Path:
    """Write the grid to a PNG file.

    Args:
        grid: Grid to draw.
        output_path: Destination file; parent directories are created.
        scale: Pixels per cell along each axis.

    Returns:
        The path written.
    """
    output_path.parent.mkdir(parents=True, exist_ok=True)
    generate_frame_image(grid, scale).save(output_path)
    return output_path
