"""Smart rounding: which corners of a pixel-grid cell render rounded.

A corner is rounded only when BOTH orthogonal neighbours bounding it are
empty. Cells outside the grid count as empty. A filled diagonal neighbour
alone does not keep a corner sharp (orthogonal-only rule).
"""

from __future__ import annotations

from typing import NamedTuple

from emblemic.models.document import PixelGrid


class CornerFlags(NamedTuple):
    top_left: bool
    top_right: bool
    bottom_left: bool
    bottom_right: bool

    @property
    def any(self) -> bool:
        return self.top_left or self.top_right or self.bottom_left or self.bottom_right


SHARP = CornerFlags(False, False, False, False)


def smart_corners(grid: PixelGrid, index: int) -> CornerFlags:
    """Corner flags for the cell at row-major ``index``."""
    row, col = divmod(index, grid.cols)

    has_top = grid.is_filled(row - 1, col)
    has_bottom = grid.is_filled(row + 1, col)
    has_left = grid.is_filled(row, col - 1)
    has_right = grid.is_filled(row, col + 1)

    return CornerFlags(
        top_left=not has_top and not has_left,
        top_right=not has_top and not has_right,
        bottom_left=not has_bottom and not has_left,
        bottom_right=not has_bottom and not has_right,
    )


def corner_map(grid: PixelGrid) -> dict[int, CornerFlags]:
    """Corner flags for every filled cell."""
    return {i: smart_corners(grid, i) for i in grid.filled_indices()}
