"""
Cell Types Module
=================

Defines cell type enumeration and the per-coordinate cell record.
"""

from enum import Enum
from dataclasses import dataclass, fields, replace, asdict
from typing import Dict, Any, Optional, Mapping, Tuple
import logging

logger = logging.getLogger(__name__)


class CellType(str, Enum):
    """
    Cell type enumeration.

    String values match the keys used by exported grids and templates.
    """
    EMPTY = 'empty'
    OBSTACLE = 'obstacle'
    PLANT = 'plant'

    @classmethod
    def from_name(cls, name) -> 'CellType':
        """Get cell type from string name (or pass through a CellType)"""
        if isinstance(name, CellType):
            return name
        return cls(str(name).lower())

    @property
    def code(self) -> int:
        """Integer code for numpy array storage"""
        return _TYPE_CODES[self]

    def is_traversable(self) -> bool:
        """Obstacles are the only type the planner must avoid"""
        return self != CellType.OBSTACLE


_TYPE_CODES = {
    CellType.EMPTY: 0,
    CellType.OBSTACLE: 1,
    CellType.PLANT: 2,
}


@dataclass(frozen=True)
class Cell:
    """Static per-coordinate world data"""
    type: CellType = CellType.EMPTY
    moisture: Optional[float] = None  # percent
    temperature: Optional[float] = None  # °C
    explored: bool = False
    plant_type: Optional[str] = None

    @property
    def is_plant(self) -> bool:
        return self.type == CellType.PLANT

    @property
    def is_obstacle(self) -> bool:
        return self.type == CellType.OBSTACLE

    def merged(self, data: Mapping[str, Any]) -> 'Cell':
        """Return a copy with the given fields overwritten"""
        updates = normalize_cell_fields(data)
        return replace(self, **updates) if updates else self

    def to_dict(self) -> Dict[str, Any]:
        d = asdict(self)
        d['type'] = self.type.value
        return d

    @classmethod
    def from_dict(cls, d: Mapping[str, Any]) -> 'Cell':
        return cls().merged(d)


CELL_FIELDS: Tuple[str, ...] = tuple(f.name for f in fields(Cell))
DEFAULT_CELL = Cell()

# Field spellings used by legacy template data
_FIELD_ALIASES = {
    'temp': 'temperature',
    'plantType': 'plant_type',
}

# Legacy keys that carry no cell state
_IGNORED_FIELDS = frozenset({'id', 'x', 'y', 'key'})


def normalize_cell_fields(data: Mapping[str, Any]) -> Dict[str, Any]:
    """
    Map raw cell data onto Cell field names.

    Aliased legacy keys are renamed, positional keys are dropped and
    unknown keys are logged and dropped.
    """
    updates = {}
    for key, value in data.items():
        name = _FIELD_ALIASES.get(key, key)
        if name in _IGNORED_FIELDS:
            continue
        if name not in CELL_FIELDS:
            logger.warning("Ignoring unknown cell field %r", key)
            continue
        if name == 'type':
            value = CellType.from_name(value)
        elif name == 'explored':
            value = bool(value)
        updates[name] = value
    return updates
