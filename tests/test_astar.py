from garden_rover.environment import OccupancyGrid
from garden_rover.metrics import is_connected
from garden_rover.planning import AStarPlanner, find_path, manhattan


def test_open_grid_path_is_manhattan_length(planner):
    start, goal = (-2, -2), (2, 2)
    path = planner.find_path(start, goal)
    assert len(path) == manhattan(start, goal)
    assert path[0] != start
    assert path[-1] == goal
    assert is_connected(path, start=start)
    assert planner.last_stats.success
    assert planner.last_stats.reason == 'success'


def test_path_never_enters_obstacles(grid, planner):
    for y in (-1, 0, 1, 2):
        grid.set(0, y, type='obstacle')
    grid.set(1, 1, type='obstacle')
    start = (-2, 0)
    path = planner.find_path(start, (2, 0))
    assert path
    assert is_connected(path, start=start)
    for cell in path:
        assert grid.is_traversable(*cell)
    assert (0, -2) in path


def test_obstacle_forces_detour(grid, planner):
    grid.set(0, 0, type='obstacle')
    start, goal = (-2, 0), (2, 0)
    path = planner.find_path(start, goal)
    assert len(path) > manhattan(start, goal)
    assert len(path) == 6
    assert (0, 0) not in path


def test_plants_are_traversable(grid, planner):
    for y in range(-2, 3):
        grid.set(0, y, type='plant')
    assert len(planner.find_path((-2, 0), (2, 0))) == 4


def test_enclosed_goal_has_no_path(grid, planner):
    grid.set(1, 2, type='obstacle')
    grid.set(2, 1, type='obstacle')
    assert planner.find_path((-2, -2), (2, 2)) == []
    assert planner.last_stats.reason == 'no_path_found'
    assert not planner.last_stats.success


def test_blocked_goal(grid, planner):
    grid.set(2, 2, type='obstacle')
    assert planner.find_path((0, 0), (2, 2)) == []
    assert planner.last_stats.reason == 'goal_blocked'


def test_start_equals_goal(planner):
    assert planner.find_path((1, 1), (1, 1)) == []
    assert planner.last_stats.reason == 'start_is_goal'


def test_out_of_bounds_endpoints(planner):
    assert planner.find_path((5, 0), (0, 0)) == []
    assert planner.last_stats.reason == 'invalid_start'
    assert planner.find_path((0, 0), (0, -3)) == []
    assert planner.last_stats.reason == 'invalid_goal'


def test_blocked_start_is_allowed(grid, planner):
    grid.set(0, 0, type='obstacle')
    assert planner.find_path((0, 0), (2, 0)) == [(1, 0), (2, 0)]


def test_exclusions_are_impassable(planner):
    path = planner.find_path((-2, 0), (2, 0), exclusions=[(0, 0)])
    assert len(path) == 6
    assert (0, 0) not in path
    assert planner.find_path((-2, 0), (2, 0), exclusions=['2,0']) == []


def test_tie_breaking_is_fixed():
    grid = OccupancyGrid(3)
    planner = AStarPlanner(grid)
    expected = [(0, -1), (1, -1), (1, 0), (1, 1)]
    assert planner.find_path((-1, -1), (1, 1)) == expected
    assert planner.find_path((-1, -1), (1, 1)) == expected


def test_max_expansions():
    planner = AStarPlanner(OccupancyGrid(5), max_expansions=1)
    assert planner.find_path((-2, -2), (2, 2)) == []
    assert planner.last_stats.reason == 'max_expansions'


def test_plan_route_chains_legs(planner):
    route = planner.plan_route([(-2, -2), (2, -2), (2, -2), (2, 2)])
    assert route[0] == (-2, -2)
    assert route[-1] == (2, 2)
    assert len(route) == 9
    assert is_connected(route)


def test_plan_route_fails_on_unreachable_leg(grid, planner):
    grid.set(1, 2, type='obstacle')
    grid.set(2, 1, type='obstacle')
    assert planner.plan_route([(-2, -2), (0, 0), (2, 2)]) == []
    assert planner.plan_route([]) == []


def test_find_nearest_accessible(grid, planner):
    grid.set(0, 0, type='obstacle')
    assert planner.find_nearest_accessible((0, 0), (-2, 0)) == (-1, 0)
    assert planner.find_nearest_accessible((0, 0), (2, 2)) == (1, 1)


def test_find_nearest_accessible_falls_back_to_current(grid, planner):
    for x in (1, 2):
        for y in (1, 2):
            grid.set(x, y, type='obstacle')
    assert planner.find_nearest_accessible((2, 2), (-2, -2)) == (-2, -2)


def test_planner_reads_grid_at_plan_time(grid, planner):
    assert len(planner.find_path((-2, 0), (2, 0))) == 4
    grid.set(0, 0, type='obstacle')
    assert len(planner.find_path((-2, 0), (2, 0))) == 6


def test_functional_shortcut(grid):
    assert find_path(grid, (0, 0), (0, 2)) == [(0, 1), (0, 2)]
