"""
Garden Rover Simulation
=======================

Grid-world simulation of a garden inspection rover.

The rover patrols an origin-centred occupancy grid of plants and
obstacles, plans 4-connected routes with A*, drives them with a
rate-limited kinematic model and scans every plant it stops on.

Key Features:
- Logical, physical and display coordinate spaces with exact round trips
- Sparse coordinate-keyed occupancy grid that survives resizing
- Deterministic A* with fixed tie-breaking
- Tick-driven mission sequencer with arrival/scan/complete events
- Built-in garden templates and seeded random gardens

Version: 1.0.0
"""

__version__ = "1.0.0"

from .config import Config
from .exceptions import (
    GardenRoverError,
    InvalidCoordinateError,
    InvalidGridSizeError,
    EmptyPathError,
    UnknownTemplateError,
)
from .garden import CellType, Cell, load_template
from .environment import CoordinateSystem, OccupancyGrid
from .motion import MotionModel, Pose
from .planning import AStarPlanner, MissionSequencer, MissionStatus
from .metrics import RunResult, RunStatus
from .pipeline import SimulationRunner, SimulationSession

__all__ = [
    'Config',
    'GardenRoverError', 'InvalidCoordinateError', 'InvalidGridSizeError',
    'EmptyPathError', 'UnknownTemplateError',
    'CellType', 'Cell', 'load_template',
    'CoordinateSystem', 'OccupancyGrid',
    'MotionModel', 'Pose',
    'AStarPlanner', 'MissionSequencer', 'MissionStatus',
    'RunResult', 'RunStatus',
    'SimulationRunner', 'SimulationSession',
]
