"""Text and PNG views of a patch.

Both views put row ``N - 1`` at the top (y grows north) and show identities
rather than raw planted bits, so merged regions read as blocks of one value
or one colour.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from PIL import Image, ImageDraw

if TYPE_CHECKING:
    from .patch import Patch

BACKGROUND = (240, 234, 214)
BORDER = (60, 40, 20)


def render_text(patch: Patch) -> str:
    """Identity grid, 0 for empty cells, one ``{:3} `` column per cell."""
    grid = patch.ids_grid()
    lines = []
    for y in range(patch.size - 1, -1, -1):
        lines.append("".join(f"{int(v):3} " for v in grid[y]))
    return "\n".join(lines) + "\n"


def identity_color(identity: int) -> tuple[int, int, int]:
    """Stable pumpkin-ish colour for an identity (Knuth multiplicative hash)."""
    h = (identity * 2654435761) & 0xFFFFFFFF
    r = 180 + (h & 0x3F)
    g = 60 + ((h >> 8) & 0x7F)
    b = (h >> 16) & 0x3F
    return (r, g, b)


def render_png(patch: Patch, cell_px: int = 16) -> Image.Image:
    """Draw one block per cell, with borders between different regions."""
    n = patch.size
    grid = patch.ids_grid()
    img = Image.new("RGB", (n * cell_px, n * cell_px), BACKGROUND)
    draw = ImageDraw.Draw(img)

    for y in range(n):
        # Image row 0 is the top of the grid (y = n - 1)
        top = (n - 1 - y) * cell_px
        for x in range(n):
            ident = int(grid[y, x])
            if ident == 0:
                continue
            left = x * cell_px
            draw.rectangle(
                (left, top, left + cell_px - 1, top + cell_px - 1),
                fill=identity_color(ident),
            )

    for y in range(n):
        top = (n - 1 - y) * cell_px
        for x in range(n):
            ident = int(grid[y, x])
            left = x * cell_px
            if x + 1 < n and int(grid[y, x + 1]) != ident:
                edge = left + cell_px - 1
                draw.line((edge, top, edge, top + cell_px - 1), fill=BORDER)
            if y + 1 < n and int(grid[y + 1, x]) != ident:
                draw.line((left, top, left + cell_px - 1, top), fill=BORDER)
    return img


def save_png(patch: Patch, path: str, cell_px: int = 16) -> None:
    render_png(patch, cell_px).save(path)
