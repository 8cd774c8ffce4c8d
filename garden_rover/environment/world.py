"""
Occupancy Grid Module
=====================

Sparse world state for the garden: one Cell per logical coordinate,
absent keys read as empty.
"""

import logging
import numpy as np
from typing import Tuple, Optional, Dict, List, Any, Iterator, Mapping

from ..garden.types import CellType, Cell, DEFAULT_CELL
from .coordinates import (
    CoordinateSystem, GridBounds, Coord, bounds, as_coord,
    validate_logical, coord_key,
)

logger = logging.getLogger(__name__)


class OccupancyGrid:
    """
    Sparse occupancy map keyed by logical coordinate.

    Contains:
    - Cell records for non-default coordinates
    - The coordinate system that defines current bounds

    Provides:
    - Bounds-checked mutation (out-of-bounds writes are logged and dropped)
    - Deterministic enumeration (rows from max y down, columns min x up)
    - Export/import of grid size plus the sparse map
    """

    def __init__(self, grid_size: int = 5,
                 coordinates: Optional[CoordinateSystem] = None):
        """
        Initialize grid.

        Args:
            grid_size: Initial size n (n x n cells); ignored if coordinates given
            coordinates: Shared coordinate system (optional)
        """
        self.coordinates = coordinates or CoordinateSystem(grid_size)
        self._cells: Dict[Coord, Cell] = {}

    @classmethod
    def from_config(cls, config) -> 'OccupancyGrid':
        return cls(coordinates=CoordinateSystem.from_config(config))

    # ==================== Property Access ====================

    @property
    def grid_size(self) -> int:
        return self.coordinates.grid_size

    @property
    def bounds(self) -> GridBounds:
        return self.coordinates.bounds

    def __len__(self) -> int:
        """Number of stored (non-default) entries"""
        return len(self._cells)

    def __contains__(self, coord) -> bool:
        return tuple(coord) in self._cells

    # ==================== Cell Queries ====================

    def is_in_bounds(self, x, y) -> bool:
        return self.coordinates.contains(x, y)

    def get(self, x, y) -> Cell:
        """Cell at coordinate, or the default empty cell"""
        x, y = validate_logical(x, y)
        return self._cells.get((x, y), DEFAULT_CELL)

    def get_type(self, x, y) -> CellType:
        return self.get(x, y).type

    def is_traversable(self, x, y) -> bool:
        """In bounds and not an obstacle"""
        x, y = validate_logical(x, y)
        if not self.is_in_bounds(x, y):
            return False
        return self.get(x, y).type.is_traversable()

    # ==================== Mutation ====================

    def set(self, x, y, data: Optional[Mapping[str, Any]] = None, **fields) -> bool:
        """
        Merge fields into the cell at (x, y).

        Args:
            x, y: Logical coordinate
            data: Field mapping (e.g. {'type': 'plant', 'moisture': 45})
            **fields: Additional fields, applied after ``data``

        Returns:
            True if stored, False if the coordinate is out of bounds or a
            field value is rejected
        """
        x, y = validate_logical(x, y)
        if not self.is_in_bounds(x, y):
            logger.warning("Coordinate (%d, %d) is out of bounds for grid size %d",
                           x, y, self.grid_size)
            return False

        updates = dict(data or {})
        updates.update(fields)
        cell = _merge_cell(self._cells.get((x, y), DEFAULT_CELL), updates, (x, y))
        if cell is None:
            return False
        self._cells[(x, y)] = cell
        return True

    def remove(self, x, y) -> Optional[Cell]:
        """Drop any stored data at (x, y); returns what was removed"""
        x, y = validate_logical(x, y)
        return self._cells.pop((x, y), None)

    def mark_explored(self, x, y) -> bool:
        """Flag a visited cell; the only grid mutation made during a tick"""
        x, y = validate_logical(x, y)
        if not self.is_in_bounds(x, y):
            return False
        if self.get(x, y).explored:
            return True
        return self.set(x, y, explored=True)

    def clear(self):
        self._cells.clear()

    def resize(self, n: int) -> int:
        """
        Change grid size, pruning entries that fall outside the new bounds.

        Existing in-bounds entries keep their coordinates.

        Returns:
            Number of pruned entries
        """
        new_bounds = self.coordinates.resize(n)
        stale = [c for c in self._cells if not new_bounds.contains(*c)]
        for c in stale:
            del self._cells[c]
        if stale:
            logger.info("Resize to %d pruned %d out-of-bounds cells", n, len(stale))
        return len(stale)

    def load(self, grid_size: int, cells: Mapping) -> 'OccupancyGrid':
        """
        Replace size and contents wholesale (template load / import).

        Every key is parsed before anything is replaced, so a malformed key
        leaves the grid untouched. Out-of-bounds entries and rejected cell
        values are logged and skipped.
        """
        new_bounds = bounds(grid_size)
        staged: Dict[Coord, Cell] = {}
        for key, data in cells.items():
            x, y = as_coord(key)
            if not new_bounds.contains(x, y):
                logger.warning("Coordinate (%d, %d) is out of bounds for grid size %d",
                               x, y, grid_size)
                continue
            if isinstance(data, Cell):
                data = data.to_dict()
            cell = _merge_cell(staged.get((x, y), DEFAULT_CELL), data or {}, (x, y))
            if cell is not None:
                staged[(x, y)] = cell

        self.coordinates.resize(grid_size)
        self._cells = staged
        return self

    # ==================== Enumeration ====================

    def coordinates_in_order(self) -> Iterator[Coord]:
        """Every in-bounds coordinate, max y to min y, then min x to max x"""
        b = self.bounds
        for y in range(b.max, b.min - 1, -1):
            for x in range(b.min, b.max + 1):
                yield (x, y)

    def enumerate(self) -> List[Tuple[Coord, Cell]]:
        """Every in-bounds coordinate with its cell, including empties"""
        return [(c, self._cells.get(c, DEFAULT_CELL)) for c in self.coordinates_in_order()]

    def stored_cells(self) -> Dict[Coord, Cell]:
        """Copy of the sparse map"""
        return dict(self._cells)

    def cells_of_type(self, cell_type) -> List[Coord]:
        """Coordinates of a given type, in enumeration order"""
        cell_type = CellType.from_name(cell_type)
        if cell_type == CellType.EMPTY:
            return [c for c, cell in self.enumerate() if cell.type == cell_type]
        return [c for c in self.coordinates_in_order()
                if c in self._cells and self._cells[c].type == cell_type]

    def to_array(self) -> np.ndarray:
        """
        Cell-type codes as an n x n matrix.

        Row 0 is max y and column 0 is min x, so ``arr.ravel()[i]`` is the
        cell at legacy flat index i.
        """
        n = self.grid_size
        arr = np.zeros((n, n), dtype=np.int8)
        b = self.bounds
        for (x, y), cell in self._cells.items():
            arr[b.max - y, x - b.min] = cell.type.code
        return arr

    # ==================== Statistics ====================

    def stats(self) -> Dict[str, Any]:
        """Counts per cell type plus explored coverage"""
        arr = self.to_array()
        total = arr.size
        counts = {}
        for t in CellType:
            count = int(np.sum(arr == t.code))
            counts[t.value] = {
                'count': count,
                'percentage': float(count / total * 100)
            }
        explored = sum(1 for cell in self._cells.values() if cell.explored)
        return {
            'grid_size': self.grid_size,
            'bounds': {'min': self.bounds.min, 'max': self.bounds.max},
            'total_cells': total,
            'stored_cells': len(self._cells),
            'cell_distribution': counts,
            'explored_cells': explored,
        }

    # ==================== Persistence boundary ====================

    def export(self) -> Dict[str, Any]:
        """Grid size plus sparse cells keyed 'x,y'"""
        return {
            'grid_size': self.grid_size,
            'cells': {coord_key(x, y): cell.to_dict()
                      for (x, y), cell in self._cells.items()},
        }

    @classmethod
    def from_export(cls, data: Mapping[str, Any],
                    coordinates: Optional[CoordinateSystem] = None) -> 'OccupancyGrid':
        grid = cls(coordinates=coordinates or CoordinateSystem(data['grid_size']))
        return grid.load(data['grid_size'], data.get('cells', {}))

    def import_data(self, data: Mapping[str, Any]) -> 'OccupancyGrid':
        """In-place counterpart of from_export"""
        return self.load(data['grid_size'], data.get('cells', {}))

    def clone(self) -> 'OccupancyGrid':
        """Independent copy with its own coordinate system"""
        cs = self.coordinates
        grid = OccupancyGrid(coordinates=CoordinateSystem(
            cs.grid_size, cs.cell_scale, cs.pixels_per_unit, cs.viewport))
        grid._cells = dict(self._cells)
        return grid

    def __repr__(self) -> str:
        return f"OccupancyGrid(grid_size={self.grid_size}, stored={len(self._cells)})"


def _merge_cell(current: Cell, updates: Mapping[str, Any], coord: Coord) -> Optional[Cell]:
    """Merged cell, or None (logged) when a field value is invalid"""
    try:
        return current.merged(updates)
    except ValueError as e:
        logger.warning("Rejected cell data at %s: %s", coord, e)
        return None
