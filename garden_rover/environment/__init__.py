"""
Environment Module
==================

Coordinate spaces, the sparse occupancy grid and the legacy
flat-index conversion boundary.
"""

from .coordinates import (
    Coord,
    GridBounds,
    CoordinateSystem,
    bounds,
    to_physical,
    from_physical,
    validate_logical,
    validate_physical,
    as_coord,
    coord_key,
    parse_coord_key,
)
from .world import OccupancyGrid
from .migration import (
    index_to_coordinate,
    coordinate_to_index,
    array_to_grid,
    grid_to_array,
    path_to_coordinates,
    coordinates_to_path,
)

__all__ = [
    'Coord',
    'GridBounds',
    'CoordinateSystem',
    'bounds',
    'to_physical',
    'from_physical',
    'validate_logical',
    'validate_physical',
    'as_coord',
    'coord_key',
    'parse_coord_key',
    'OccupancyGrid',
    'index_to_coordinate',
    'coordinate_to_index',
    'array_to_grid',
    'grid_to_array',
    'path_to_coordinates',
    'coordinates_to_path',
]
