import pytest

from garden_rover.config import Config
from garden_rover.environment import CoordinateSystem, OccupancyGrid
from garden_rover.motion import MotionModel
from garden_rover.planning import AStarPlanner


@pytest.fixture
def coords():
    return CoordinateSystem(grid_size=5, cell_scale=2.0, pixels_per_unit=30.0)


@pytest.fixture
def grid(coords):
    return OccupancyGrid(coordinates=coords)


@pytest.fixture
def planner(grid):
    return AStarPlanner(grid)


@pytest.fixture
def motion(coords):
    return MotionModel(coords, Config().motion)
