import pytest

from garden_rover.environment import bounds
from garden_rover.garden import (
    Cell,
    CellType,
    GardenGenerator,
    all_templates,
    generate_garden,
    normalize_cell_fields,
)


def test_cell_type_from_name():
    assert CellType.from_name('PLANT') == CellType.PLANT
    assert CellType.from_name(CellType.OBSTACLE) == CellType.OBSTACLE
    with pytest.raises(ValueError):
        CellType.from_name('water')


def test_legacy_field_aliases():
    fields = normalize_cell_fields({'type': 'plant', 'temp': 22, 'plantType': 'mint', 'id': 3})
    assert fields == {'type': CellType.PLANT, 'temperature': 22, 'plant_type': 'mint'}


def test_cell_dict_round_trip():
    cell = Cell(type=CellType.PLANT, moisture=55.0, temperature=25.0, plant_type='basil')
    assert Cell.from_dict(cell.to_dict()) == cell
    assert cell.to_dict()['type'] == 'plant'


def test_template_summaries():
    summaries = {t.id: t.summary() for t in all_templates()}
    assert set(summaries) == {'small_home', 'commercial', 'research', 'obstacle_course', 'vertical'}
    assert summaries['small_home']['plants'] == 10
    assert summaries['small_home']['obstacles'] == 2
    assert all(s['grid_size'] == 5 for s in summaries.values())


def test_generator_is_seeded():
    a, _ = generate_garden(7, seed=11)
    b, _ = generate_garden(7, seed=11)
    assert a.cells == b.cells


def test_generated_cells_in_bounds_and_start_clear():
    garden, start = generate_garden(6, seed=3)
    b = bounds(6)
    assert start == (b.min, b.min)
    assert start not in garden.cells
    for x, y in garden.cells:
        assert b.contains(x, y)
    for coord in garden.plants:
        assert garden.cells[coord]['plant_type']


def test_generator_densities():
    empty = GardenGenerator(5, seed=0, plant_density=0.0, obstacle_density=0.0).generate()
    assert empty.cells == {}
    full = GardenGenerator(5, seed=0, plant_density=1.0, obstacle_density=0.0).generate()
    assert len(full.plants) == 24
    with pytest.raises(ValueError):
        GardenGenerator(5, plant_density=0.8, obstacle_density=0.5)
