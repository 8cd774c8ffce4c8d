"""
Garden Generator Module
=======================

Seeded random gardens for batch runs.
Single Responsibility: Only produces cell layouts; planning happens elsewhere.
"""

import numpy as np
from typing import Dict, Tuple, Optional, List, Any
from dataclasses import dataclass, field

from .types import CellType
from ..environment.coordinates import Coord, bounds


PLANT_VARIETIES = ('tomato', 'lettuce', 'pepper', 'basil', 'cucumber',
                   'spinach', 'mint', 'parsley', 'kale', 'strawberry')


@dataclass
class GeneratedGarden:
    """Container for a generated layout"""
    grid_size: int
    cells: Dict[Coord, Dict[str, Any]] = field(default_factory=dict)
    start: Coord = (0, 0)

    @property
    def plants(self) -> List[Coord]:
        return sorted((c for c, d in self.cells.items() if d['type'] == CellType.PLANT.value),
                      key=lambda c: (-c[1], c[0]))

    @property
    def obstacles(self) -> List[Coord]:
        return sorted((c for c, d in self.cells.items() if d['type'] == CellType.OBSTACLE.value),
                      key=lambda c: (-c[1], c[0]))


class GardenGenerator:
    """
    Procedural garden generator.

    Creates:
    - Scattered obstacles (rocks, planters)
    - Plants with moisture and temperature readings
    - A clear start cell in the bottom-left corner
    """

    def __init__(self, grid_size: int = 5, seed: Optional[int] = None,
                 plant_density: float = 0.3, obstacle_density: float = 0.15):
        if not 0.0 <= plant_density + obstacle_density <= 1.0:
            raise ValueError("plant_density + obstacle_density must be within [0, 1]")
        self.grid_size = grid_size
        self.seed = seed
        self.rng = np.random.default_rng(seed)
        self.plant_density = plant_density
        self.obstacle_density = obstacle_density
        self.bounds = bounds(grid_size)

    def generate(self) -> GeneratedGarden:
        """Generate a complete layout"""
        n = self.grid_size
        b = self.bounds
        start = (b.min, b.min)

        draw = self.rng.random((n, n))
        garden = GeneratedGarden(grid_size=n, start=start)

        for row in range(n):
            for col in range(n):
                coord = (b.min + col, b.max - row)
                if coord == start:
                    continue
                u = draw[row, col]
                if u < self.obstacle_density:
                    garden.cells[coord] = {'type': CellType.OBSTACLE.value}
                elif u < self.obstacle_density + self.plant_density:
                    garden.cells[coord] = self._plant()

        return garden

    def _plant(self) -> Dict[str, Any]:
        """Plant with plausible sensor readings"""
        return {
            'type': CellType.PLANT.value,
            'moisture': float(np.round(self.rng.uniform(15, 95), 1)),
            'temperature': float(np.round(self.rng.normal(23.0, 2.5), 1)),
            'plant_type': str(self.rng.choice(PLANT_VARIETIES)),
        }


def generate_garden(grid_size: int, seed: Optional[int] = None,
                    **kwargs) -> Tuple[GeneratedGarden, Coord]:
    """Generate a garden and return it with its start cell"""
    garden = GardenGenerator(grid_size, seed, **kwargs).generate()
    return garden, garden.start
