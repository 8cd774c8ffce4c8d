"""
Garden Templates Module
=======================

Built-in garden scenarios. Each template is stored in the legacy
flat-index layout (cell id = row * n + col, row 0 at the top) and is
converted to logical coordinates only when loaded.
"""

from dataclasses import dataclass, field
from typing import Dict, List, Tuple, Any

from ..exceptions import UnknownTemplateError


@dataclass(frozen=True)
class GardenTemplate:
    """A named garden layout plus its suggested patrol route"""
    id: str
    name: str
    description: str
    grid_size: int
    difficulty: str
    cells: Dict[int, Dict[str, Any]] = field(default_factory=dict)
    default_path: Tuple[int, ...] = ()

    def flat_cells(self) -> List[Dict[str, Any]]:
        """Dense legacy cell list, empties filled in"""
        n = self.grid_size
        return [dict(self.cells.get(i, {'type': 'empty'}), id=i) for i in range(n * n)]

    def summary(self) -> Dict[str, Any]:
        plants = sum(1 for c in self.cells.values() if c['type'] == 'plant')
        obstacles = sum(1 for c in self.cells.values() if c['type'] == 'obstacle')
        return {
            'id': self.id,
            'name': self.name,
            'difficulty': self.difficulty,
            'grid_size': self.grid_size,
            'plants': plants,
            'obstacles': obstacles,
            'waypoints': len(self.default_path),
        }


def _plant(moisture: float, plant_type: str, temp: float) -> Dict[str, Any]:
    return {'type': 'plant', 'moisture': moisture, 'plantType': plant_type, 'temp': temp}


_OBSTACLE = {'type': 'obstacle'}


TEMPLATES: Dict[str, GardenTemplate] = {t.id: t for t in (
    GardenTemplate(
        id='small_home',
        name='Small Home Garden',
        description='Perfect for residential automation testing',
        grid_size=5,
        difficulty='Beginner',
        cells={
            1: _plant(45, 'tomato', 24),
            3: _plant(65, 'lettuce', 22),
            5: _plant(35, 'pepper', 26),
            7: _OBSTACLE,
            9: _plant(55, 'basil', 25),
            11: _plant(25, 'tomato', 27),
            13: _plant(70, 'cucumber', 23),
            15: _plant(40, 'spinach', 21),
            18: _OBSTACLE,
            19: _plant(50, 'mint', 24),
            21: _plant(30, 'parsley', 22),
            23: _plant(60, 'kale', 23),
        },
        default_path=(0, 1, 6, 11, 16, 21, 22, 23),
    ),
    GardenTemplate(
        id='commercial',
        name='Commercial Greenhouse',
        description='High-density commercial operation',
        grid_size=5,
        difficulty='Advanced',
        cells={
            1: _plant(55, 'strawberry', 23),
            2: _plant(48, 'strawberry', 24),
            3: _plant(62, 'strawberry', 22),
            6: _OBSTACLE,
            8: _OBSTACLE,
            10: _plant(28, 'tomato', 28),
            11: _plant(35, 'tomato', 27),
            13: _plant(45, 'tomato', 26),
            14: _plant(52, 'tomato', 25),
            16: _OBSTACLE,
            18: _OBSTACLE,
            20: _plant(41, 'pepper', 25),
            21: _plant(38, 'pepper', 26),
            22: _plant(55, 'pepper', 24),
            23: _plant(60, 'pepper', 23),
        },
        default_path=(0, 5, 10, 15, 20, 21, 22, 23, 24, 19, 14, 9, 4, 3, 2, 1),
    ),
    GardenTemplate(
        id='research',
        name='Research Laboratory',
        description='Precision agriculture research setup',
        grid_size=5,
        difficulty='Expert',
        cells={
            2: _plant(75, 'experimental_A', 20),
            6: _plant(22, 'experimental_B', 30),
            7: _OBSTACLE,
            8: _plant(80, 'experimental_C', 18),
            10: _plant(15, 'drought_test', 32),
            12: _OBSTACLE,
            14: _plant(95, 'hydro_test', 21),
            16: _plant(50, 'control_A', 24),
            17: _OBSTACLE,
            18: _plant(50, 'control_B', 24),
            22: _plant(42, 'experimental_D', 26),
        },
        # The legacy route crosses the centre obstacles; kept as shipped.
        default_path=(0, 1, 2, 7, 12, 17, 22, 23, 24, 19, 14, 9, 4),
    ),
    GardenTemplate(
        id='obstacle_course',
        name='Navigation Challenge',
        description='Test pathfinding algorithms',
        grid_size=5,
        difficulty='Intermediate',
        cells={
            1: _OBSTACLE,
            2: _plant(33, 'test_plant', 24),
            3: _OBSTACLE,
            7: _OBSTACLE,
            9: _plant(58, 'test_plant', 23),
            10: _OBSTACLE,
            11: _plant(41, 'test_plant', 25),
            13: _OBSTACLE,
            15: _plant(27, 'test_plant', 26),
            17: _OBSTACLE,
            21: _OBSTACLE,
            22: _plant(65, 'test_plant', 22),
            23: _OBSTACLE,
        },
        default_path=(0, 5, 6, 11, 16, 15, 20, 19, 14, 9, 4),
    ),
    GardenTemplate(
        id='vertical',
        name='Vertical Farm Layout',
        description='High-efficiency vertical farming',
        grid_size=5,
        difficulty='Intermediate',
        cells={
            0: _plant(68, 'lettuce_tier1', 21),
            1: _plant(72, 'lettuce_tier1', 21),
            3: _plant(65, 'lettuce_tier1', 22),
            4: _plant(70, 'lettuce_tier1', 21),
            7: _OBSTACLE,
            10: _plant(44, 'herbs_tier2', 23),
            11: _plant(48, 'herbs_tier2', 23),
            13: _plant(52, 'herbs_tier2', 22),
            14: _plant(46, 'herbs_tier2', 23),
            17: _OBSTACLE,
            20: _plant(38, 'microgreens', 20),
            21: _plant(42, 'microgreens', 20),
            23: _plant(40, 'microgreens', 21),
            24: _plant(36, 'microgreens', 20),
        },
        default_path=(2, 1, 0, 5, 10, 15, 20, 21, 22, 23, 24, 19, 14, 9, 4, 3),
    ),
)}


def get_template(template_id: str) -> GardenTemplate:
    try:
        return TEMPLATES[template_id]
    except KeyError:
        raise UnknownTemplateError(template_id) from None


def all_templates() -> List[GardenTemplate]:
    return list(TEMPLATES.values())


def load_template(template_id: str, grid=None):
    """
    Load a template into a grid (replacing its contents).

    Args:
        template_id: Registered template id
        grid: Existing OccupancyGrid to refill (optional)

    Returns:
        (grid, waypoints) with waypoints as logical coordinates
    """
    from ..environment.migration import array_to_grid, path_to_coordinates

    template = get_template(template_id)
    grid = array_to_grid(template.flat_cells(), template.grid_size, grid=grid)
    waypoints = path_to_coordinates(template.default_path, template.grid_size)
    return grid, waypoints
