import json

import pytest

from garden_rover.config import Config
from garden_rover.garden import TEMPLATES
from garden_rover.metrics import RunStatus, is_connected
from garden_rover.motion import Pose
from garden_rover.pipeline import SimulationRunner, SimulationSession


@pytest.fixture
def runner():
    return SimulationRunner(Config())


@pytest.mark.parametrize("template_id", sorted(TEMPLATES))
def test_templates_complete_as_shipped(runner, template_id):
    result = runner.run_template(template_id)
    assert result.status == RunStatus.SUCCESS
    assert result.waypoints_reached == len(TEMPLATES[template_id].default_path)
    assert result.distance_traveled_m > 0


def test_small_home_scans_plants_on_route(runner):
    result = runner.run_template('small_home')
    assert result.scanned == [(-1, 2), (-1, 0), (-1, -2), (1, -2)]
    assert result.to_dict()['plants_scanned'] == 4


@pytest.mark.parametrize("template_id", ['small_home', 'commercial', 'vertical'])
def test_replanned_routes_are_connected(runner, template_id):
    result = runner.run_template(template_id, replan=True)
    assert result.is_success
    assert is_connected(result.waypoints)


def test_sessions_are_independent():
    config = Config()
    a = SimulationSession(config)
    b = SimulationSession(config)
    a.load_template('small_home')
    assert len(b.grid) == 0
    a.resize(9)
    assert b.grid.grid_size == 5
    assert a.sequencer.grid is a.grid
    assert a.planner.grid is a.grid


def test_execute_empty_path(runner):
    result = runner.execute(runner.new_session(), [])
    assert result.status == RunStatus.EMPTY_PATH


def test_execute_timeout(runner):
    session = runner.new_session()
    result = runner.execute(session, [(2, 2)], pose=Pose(x=-4.0, z=4.0), max_ticks=5)
    assert result.status == RunStatus.TIMEOUT
    assert result.ticks == 5


def test_generated_run(runner):
    result = runner.run_generated(seed=5)
    assert result.status in (RunStatus.SUCCESS, RunStatus.NO_PATH)
    assert result.info['seed'] == 5
    if result.is_success:
        assert is_connected(result.waypoints)
        assert result.trajectory.num_ticks == result.ticks + 1


def test_suite_writes_results(runner, tmp_path):
    agg = runner.run_suite(num_scenarios=3, seed_base=100, output_dir=str(tmp_path), verbose=False)
    assert agg.num_scenarios == 3
    assert agg.summary['n_total'] == 3
    assert (tmp_path / 'aggregated_results.json').exists()
    with open(tmp_path / 'seed_00100.json') as f:
        data = json.load(f)
    assert data['name'] == 'seed_00100'


def test_route_lengths_reported(runner):
    result = runner.run_template('small_home')
    assert result.info['route_cells'] == 7
    assert result.info['route_length_m'] == pytest.approx(14.0)


def test_verbose_follows_config(capsys):
    SimulationRunner(Config()).run_template('small_home')
    assert capsys.readouterr().out == ''

    SimulationRunner(Config(verbose=True)).run_template('small_home')
    assert '[small_home] 8 waypoints' in capsys.readouterr().out

    SimulationRunner(Config(verbose=True)).run_template('small_home', verbose=False)
    assert capsys.readouterr().out == ''
