"""
Coordinate System Module
========================

Bidirectional mapping between the three coordinate spaces:

- logical:  integer (x, y) grid cell, origin at the grid centre, y up
- physical: continuous (x, z) used for motion integration, z = -y
- display:  pixel position in a viewport, origin at the top-left

One simulation unit (``cell_scale`` meters) is one grid cell. The pixel
scale is a separate parameter; neither a grid resize nor a change of
pixel scale touches anything stored in physical coordinates.
"""

import math
import numbers
from dataclasses import dataclass
from typing import Tuple, Dict, Any, Optional

from ..exceptions import InvalidCoordinateError, InvalidGridSizeError


Coord = Tuple[int, int]


@dataclass(frozen=True)
class GridBounds:
    """Inclusive logical range, identical on both axes"""
    min: int
    max: int

    @property
    def size(self) -> int:
        return self.max - self.min + 1

    def contains(self, x, y) -> bool:
        """False for anything that is not an in-range integral coordinate"""
        if not (_is_integral(x) and _is_integral(y)):
            return False
        return self.min <= x <= self.max and self.min <= y <= self.max


def _is_integral(value) -> bool:
    if isinstance(value, bool) or not isinstance(value, numbers.Real):
        return False
    if isinstance(value, numbers.Integral):
        return True
    return math.isfinite(value) and float(value).is_integer()


# ==================== Validation ====================

def validate_grid_size(n) -> int:
    """Grid sizes are positive integers"""
    if isinstance(n, bool) or not isinstance(n, numbers.Integral) or n < 1:
        raise InvalidGridSizeError(f"Grid size must be a positive integer, got {n!r}")
    return int(n)


def _as_int(value, axis: str) -> int:
    if not _is_integral(value):
        raise InvalidCoordinateError(f"Logical {axis} must be an integer, got {value!r}")
    return int(value)


def validate_logical(x, y) -> Coord:
    """Coerce a logical coordinate to ints, rejecting anything non-integral"""
    return _as_int(x, 'x'), _as_int(y, 'y')


def as_coord(value) -> Coord:
    """Accept an (x, y) pair, a {'x', 'y'} mapping or an 'x,y' key"""
    if isinstance(value, str):
        return parse_coord_key(value)
    if isinstance(value, dict):
        try:
            return validate_logical(value['x'], value['y'])
        except KeyError as e:
            raise InvalidCoordinateError(f"Coordinate mapping missing {e}") from e
    try:
        x, y = value
    except (TypeError, ValueError) as e:
        raise InvalidCoordinateError(f"Not a coordinate pair: {value!r}") from e
    return validate_logical(x, y)


def validate_physical(px, pz) -> Tuple[float, float]:
    """Physical coordinates must be finite reals"""
    for axis, value in (('x', px), ('z', pz)):
        if isinstance(value, bool) or not isinstance(value, numbers.Real) or not math.isfinite(value):
            raise InvalidCoordinateError(f"Physical {axis} must be a finite number, got {value!r}")
    return float(px), float(pz)


def coord_key(x: int, y: int) -> str:
    """Storage key used by exported grids"""
    return f"{x},{y}"


def parse_coord_key(key: str) -> Coord:
    """Parse an 'x,y' key back to a coordinate"""
    parts = key.split(',')
    if len(parts) != 2:
        raise InvalidCoordinateError(f"Malformed coordinate key: {key!r}")
    try:
        return validate_logical(float(parts[0]), float(parts[1]))
    except ValueError as e:
        if isinstance(e, InvalidCoordinateError):
            raise
        raise InvalidCoordinateError(f"Malformed coordinate key: {key!r}") from e


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


# ==================== Pure conversions ====================

def bounds(n: int) -> GridBounds:
    """
    Logical range for an n x n grid.

    Odd sizes are symmetric (5 -> -2..2); even sizes lean negative
    (6 -> -3..2) so the origin stays a cell centre.
    """
    n = validate_grid_size(n)
    half = n // 2
    return GridBounds(min=-half, max=n - half - 1)


def to_physical(x, y, cell_scale: float) -> Tuple[float, float]:
    """Logical (x, y) to physical (x, z); the second axis flips sign"""
    x, y = validate_logical(x, y)
    return x * cell_scale, -y * cell_scale


def from_physical(px, pz, cell_scale: float) -> Coord:
    """Physical (x, z) to the nearest logical cell"""
    px, pz = validate_physical(px, pz)
    return _round_half_up(px / cell_scale), _round_half_up(-pz / cell_scale)


class CoordinateSystem:
    """
    Grid-size-aware coordinate conversions.

    Holds the current grid size (for bounds), the simulation cell scale,
    the display pixel scale and the default viewport size. Bounds queries
    never raise for out-of-range or malformed coordinates; they answer
    ``False``.
    """

    def __init__(self, grid_size: int = 5, cell_scale: float = 2.0,
                 pixels_per_unit: float = 30.0,
                 viewport: Tuple[float, float] = (600.0, 600.0)):
        if not (cell_scale > 0 and math.isfinite(cell_scale)):
            raise ValueError(f"cell_scale must be positive, got {cell_scale!r}")
        self.cell_scale = float(cell_scale)
        self.pixels_per_unit = float(pixels_per_unit)
        self.viewport = (float(viewport[0]), float(viewport[1]))
        self.grid_size = validate_grid_size(grid_size)
        self._bounds = bounds(self.grid_size)

    @classmethod
    def from_config(cls, config) -> 'CoordinateSystem':
        display = config.display
        return cls(grid_size=config.grid.grid_size,
                   cell_scale=config.grid.cell_scale,
                   pixels_per_unit=display.pixels_per_unit,
                   viewport=(display.viewport_width, display.viewport_height))

    # ==================== Bounds ====================

    @property
    def bounds(self) -> GridBounds:
        return self._bounds

    def resize(self, n: int) -> GridBounds:
        """Update bounds only; stored cells are pruned by the grid"""
        self.grid_size = validate_grid_size(n)
        self._bounds = bounds(self.grid_size)
        return self._bounds

    def contains(self, x, y) -> bool:
        return self._bounds.contains(x, y)

    # ==================== Logical <-> physical ====================

    def to_physical(self, x, y) -> Tuple[float, float]:
        return to_physical(x, y, self.cell_scale)

    def from_physical(self, px, pz) -> Coord:
        return from_physical(px, pz, self.cell_scale)

    # ==================== Physical <-> display ====================

    def set_pixels_per_unit(self, pixels_per_unit: float):
        """Render scale only"""
        if pixels_per_unit <= 0:
            raise ValueError("pixels_per_unit must be positive")
        self.pixels_per_unit = float(pixels_per_unit)

    def _viewport(self, width: Optional[float], height: Optional[float]) -> Tuple[float, float]:
        return (self.viewport[0] if width is None else width,
                self.viewport[1] if height is None else height)

    def world_to_display(self, px: float, pz: float,
                         width: Optional[float] = None,
                         height: Optional[float] = None) -> Tuple[float, float]:
        """Physical (x, z) to pixels; the viewport centre is the origin"""
        width, height = self._viewport(width, height)
        return (px * self.pixels_per_unit + width / 2.0,
                pz * self.pixels_per_unit + height / 2.0)

    def display_to_world(self, sx: float, sy: float,
                         width: Optional[float] = None,
                         height: Optional[float] = None) -> Tuple[float, float]:
        width, height = self._viewport(width, height)
        return ((sx - width / 2.0) / self.pixels_per_unit,
                (sy - height / 2.0) / self.pixels_per_unit)

    def logical_to_display(self, x, y, width: Optional[float] = None,
                           height: Optional[float] = None) -> Tuple[float, float]:
        return self.world_to_display(*self.to_physical(x, y), width, height)

    def display_to_logical(self, sx: float, sy: float,
                           width: Optional[float] = None,
                           height: Optional[float] = None) -> Coord:
        return self.from_physical(*self.display_to_world(sx, sy, width, height))

    # ==================== Cell geometry ====================

    def snap_to_grid(self, px: float, pz: float) -> Tuple[float, float]:
        """Physical position of the nearest cell centre"""
        return self.to_physical(*self.from_physical(px, pz))

    def cell_bounds(self, x: int, y: int) -> Dict[str, float]:
        """Physical extent of a cell"""
        cx, cz = self.to_physical(x, y)
        half = self.cell_scale / 2.0
        return {
            'min_x': cx - half,
            'max_x': cx + half,
            'min_z': cz - half,
            'max_z': cz + half,
        }

    def is_in_cell(self, px: float, pz: float, x: int, y: int) -> bool:
        b = self.cell_bounds(x, y)
        return b['min_x'] <= px <= b['max_x'] and b['min_z'] <= pz <= b['max_z']

    def cell_at(self, px: float, pz: float) -> Coord:
        """Alias of from_physical used by debug overlays"""
        return self.from_physical(px, pz)

    @staticmethod
    def distance(x1: float, z1: float, x2: float, z2: float) -> float:
        return math.hypot(x2 - x1, z2 - z1)

    @staticmethod
    def angle(x1: float, z1: float, x2: float, z2: float) -> float:
        """Heading from point 1 to point 2 in the physical plane"""
        return math.atan2(z2 - z1, x2 - x1)

    def export(self) -> Dict[str, Any]:
        """State summary for debug overlays"""
        return {
            'grid_size': self.grid_size,
            'cell_scale': self.cell_scale,
            'pixels_per_unit': self.pixels_per_unit,
            'viewport': {'width': self.viewport[0], 'height': self.viewport[1]},
            'bounds': {'min': self._bounds.min, 'max': self._bounds.max},
        }

    def __repr__(self) -> str:
        return (f"CoordinateSystem(grid_size={self.grid_size}, "
                f"cell_scale={self.cell_scale}, pixels_per_unit={self.pixels_per_unit})")
