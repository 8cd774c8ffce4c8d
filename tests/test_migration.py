import pytest

from garden_rover.environment import (
    OccupancyGrid,
    index_to_coordinate,
    coordinate_to_index,
    array_to_grid,
    grid_to_array,
    path_to_coordinates,
    coordinates_to_path,
)
from garden_rover.exceptions import InvalidCoordinateError, UnknownTemplateError
from garden_rover.garden import CellType, TEMPLATES, get_template, load_template


@pytest.mark.parametrize("n", range(1, 9))
def test_index_coordinate_inverse(n):
    seen = set()
    for i in range(n * n):
        coord = index_to_coordinate(i, n)
        assert coordinate_to_index(*coord, n) == i
        seen.add(coord)
    assert len(seen) == n * n


def test_index_layout():
    assert index_to_coordinate(0, 5) == (-2, 2)
    assert index_to_coordinate(4, 5) == (2, 2)
    assert index_to_coordinate(12, 5) == (0, 0)
    assert index_to_coordinate(24, 5) == (2, -2)
    assert index_to_coordinate(0, 6) == (-3, 2)


def test_out_of_range_index():
    with pytest.raises(InvalidCoordinateError):
        index_to_coordinate(25, 5)
    with pytest.raises(InvalidCoordinateError):
        index_to_coordinate(-1, 5)
    with pytest.raises(InvalidCoordinateError):
        coordinate_to_index(3, 0, 5)


def test_array_to_grid_keeps_only_non_empty():
    cells = [{'type': 'empty'}] * 9
    cells[1] = {'type': 'plant', 'moisture': 40, 'plantType': 'basil', 'temp': 21}
    cells[4] = {'type': 'obstacle'}
    grid = array_to_grid(cells, 3)
    assert len(grid) == 2
    plant = grid.get(0, 1)
    assert plant.type == CellType.PLANT
    assert plant.plant_type == 'basil'
    assert plant.temperature == 21
    assert grid.get(0, 0).type == CellType.OBSTACLE


def test_grid_to_array_layout():
    grid = OccupancyGrid(3)
    grid.set(1, -1, type='obstacle')
    flat = grid_to_array(grid)
    assert len(flat) == 9
    assert flat[8]['type'] == 'obstacle'
    assert flat[8]['id'] == 8
    assert all(c['type'] == 'empty' for c in flat[:8])


def test_path_conversion():
    path = path_to_coordinates([0, 1, 6, 11], 5)
    assert path == [(-2, 2), (-1, 2), (-1, 1), (-1, 0)]
    assert coordinates_to_path(path, 5) == [0, 1, 6, 11]


def test_small_home_template_cells():
    grid, waypoints = load_template('small_home')
    assert grid.grid_size == 5

    tomato = grid.get(-1, 2)
    assert tomato.type == CellType.PLANT
    assert tomato.plant_type == 'tomato'
    assert tomato.moisture == 45
    assert tomato.temperature == 24

    assert grid.get(0, 1).type == CellType.OBSTACLE
    assert grid.get(1, -1).type == CellType.OBSTACLE
    assert grid.get(-2, 2).type == CellType.EMPTY

    assert waypoints[0] == (-2, 2)
    assert waypoints[-1] == (1, -2)
    assert len(waypoints) == 8


def test_load_template_refills_existing_grid():
    grid = OccupancyGrid(9)
    grid.set(4, 4, type='plant')
    same, _ = load_template('vertical', grid=grid)
    assert same is grid
    assert grid.grid_size == 5
    assert (4, 4) not in grid
    assert len(grid.cells_of_type('plant')) == 12


@pytest.mark.parametrize("template_id", sorted(TEMPLATES))
def test_templates_round_trip_through_flat_layout(template_id):
    template = get_template(template_id)
    grid, waypoints = load_template(template_id)
    flat = grid_to_array(grid)
    for index, data in template.cells.items():
        assert flat[index]['type'] == data['type']
    assert coordinates_to_path(waypoints, template.grid_size) == list(template.default_path)


def test_unknown_template():
    with pytest.raises(UnknownTemplateError):
        get_template('rooftop')
    with pytest.raises(KeyError):
        load_template('rooftop')
