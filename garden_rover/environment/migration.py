"""
Grid Migration Module
=====================

The single conversion boundary between the legacy flat-array layout
(index = row * n + col, row 0 at the top) and logical coordinates.
Nothing else in the package works with flat indices.
"""

from typing import List, Sequence, Mapping, Any, Optional

from ..exceptions import InvalidCoordinateError
from .coordinates import Coord, bounds, validate_grid_size, validate_logical, _as_int
from .world import OccupancyGrid


def index_to_coordinate(index, n: int) -> Coord:
    """Flat index to logical coordinate; top-left of the grid is (min, max)"""
    n = validate_grid_size(n)
    index = _as_int(index, 'index')
    if not 0 <= index < n * n:
        raise InvalidCoordinateError(f"Index {index} outside 0..{n * n - 1}")
    b = bounds(n)
    row, col = divmod(index, n)
    return (b.min + col, b.max - row)


def coordinate_to_index(x, y, n: int) -> int:
    """Logical coordinate to flat index; inverse of index_to_coordinate"""
    n = validate_grid_size(n)
    x, y = validate_logical(x, y)
    b = bounds(n)
    if not b.contains(x, y):
        raise InvalidCoordinateError(f"({x}, {y}) outside bounds for grid size {n}")
    row = b.max - y
    col = x - b.min
    return row * n + col


def array_to_grid(cells: Sequence[Optional[Mapping[str, Any]]], n: int,
                  grid: Optional[OccupancyGrid] = None) -> OccupancyGrid:
    """
    Build (or refill) an OccupancyGrid from a legacy flat cell list.

    Empty or missing entries stay absent from the sparse map. Entries
    past n * n are ignored.
    """
    n = validate_grid_size(n)
    if grid is None:
        grid = OccupancyGrid(n)
    sparse = {}
    for index, cell in enumerate(cells[:n * n]):
        if not cell or cell.get('type', 'empty') == 'empty':
            continue
        sparse[index_to_coordinate(index, n)] = cell
    return grid.load(n, sparse)


def grid_to_array(grid: OccupancyGrid) -> List[dict]:
    """Legacy flat list (one dict per cell, empties included)"""
    n = grid.grid_size
    return [dict(cell.to_dict(), id=coordinate_to_index(x, y, n))
            for (x, y), cell in grid.enumerate()]


def path_to_coordinates(indices: Sequence[int], n: int) -> List[Coord]:
    """Legacy index path to a waypoint list, order preserved"""
    return [index_to_coordinate(i, n) for i in indices]


def coordinates_to_path(waypoints: Sequence[Coord], n: int) -> List[int]:
    return [coordinate_to_index(x, y, n) for x, y in waypoints]
