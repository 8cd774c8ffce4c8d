"""
A* Planner Module
=================

Grid A* over 4-connected neighbours with unit step cost and a Manhattan
heuristic (admissible and consistent for this cost model, so the first
time the goal is popped the path is optimal).

Tie-breaking is fixed for reproducibility: the open set is a heap keyed
on (f, h, insertion order). Among equal f, the node closer to the goal
wins; remaining ties go to the node discovered first. Neighbours are
expanded in the order +x, -x, +y, -y.
"""

import heapq
import itertools
import logging
from typing import List, Optional, Dict, Iterable, Set
from dataclasses import dataclass

from ..environment import OccupancyGrid, Coord, as_coord
from ..garden import CellType

logger = logging.getLogger(__name__)

NEIGHBOR_OFFSETS = ((1, 0), (-1, 0), (0, 1), (0, -1))
DIAGONAL_OFFSETS = ((1, 1), (1, -1), (-1, 1), (-1, -1))


@dataclass
class PlannerStats:
    """Statistics from a planning run"""
    nodes_expanded: int = 0
    nodes_generated: int = 0
    path_length: int = 0
    success: bool = False
    reason: str = ''


def manhattan(a: Coord, b: Coord) -> int:
    return abs(a[0] - b[0]) + abs(a[1] - b[1])


class AStarPlanner:
    """
    A* path planner over an OccupancyGrid.

    Returned paths exclude the start cell and include the goal. An empty
    list means "no route" (start/goal out of bounds, start == goal, goal
    blocked, or goal unreachable); the reason is kept in ``last_stats``.
    """

    def __init__(self, grid: OccupancyGrid, max_expansions: Optional[int] = None):
        """
        Initialize A* planner.

        Args:
            grid: Occupancy grid (bounds and obstacles are read at plan time)
            max_expansions: Maximum node expansions (None for unlimited)
        """
        self.grid = grid
        self.max_expansions = max_expansions
        self.last_stats: Optional[PlannerStats] = None

    def _blocked(self, cell: Coord, exclusions: Set[Coord]) -> bool:
        return cell in exclusions or not self.grid.is_traversable(*cell)

    def _finish(self, stats: PlannerStats, reason: str,
                path: Optional[List[Coord]] = None) -> List[Coord]:
        stats.reason = reason
        stats.success = path is not None
        stats.path_length = len(path) if path else 0
        self.last_stats = stats
        return path or []

    def find_path(self, start, goal,
                  exclusions: Iterable = ()) -> List[Coord]:
        """
        Find a shortest 4-connected path from start to goal.

        Args:
            start: Start cell (x, y); may itself be blocked
            goal: Goal cell (x, y)
            exclusions: Extra cells to treat as impassable

        Returns:
            Cells strictly after start through goal, or [] if no route
        """
        start = as_coord(start)
        goal = as_coord(goal)
        excluded = {as_coord(c) for c in exclusions}
        stats = PlannerStats()

        if not self.grid.is_in_bounds(*start):
            return self._finish(stats, 'invalid_start')
        if not self.grid.is_in_bounds(*goal):
            return self._finish(stats, 'invalid_goal')
        if start == goal:
            return self._finish(stats, 'start_is_goal')
        if self._blocked(goal, excluded):
            logger.warning("Goal %s is blocked", goal)
            return self._finish(stats, 'goal_blocked')

        counter = itertools.count()
        h0 = manhattan(start, goal)
        open_set = [(h0, h0, next(counter), start)]
        came_from: Dict[Coord, Coord] = {}
        g_score = {start: 0}
        closed = set()

        while open_set:
            _, _, _, current = heapq.heappop(open_set)

            if current in closed:
                continue
            closed.add(current)
            stats.nodes_expanded += 1

            if current == goal:
                path = self._reconstruct_path(came_from, current)
                return self._finish(stats, 'success', path[1:])

            if self.max_expansions is not None and stats.nodes_expanded >= self.max_expansions:
                return self._finish(stats, 'max_expansions')

            for dx, dy in NEIGHBOR_OFFSETS:
                neighbor = (current[0] + dx, current[1] + dy)
                if neighbor in closed:
                    continue
                if not self.grid.is_in_bounds(*neighbor):
                    continue
                if self._blocked(neighbor, excluded):
                    continue

                tentative_g = g_score[current] + 1
                if neighbor not in g_score or tentative_g < g_score[neighbor]:
                    came_from[neighbor] = current
                    g_score[neighbor] = tentative_g
                    h = manhattan(neighbor, goal)
                    heapq.heappush(open_set, (tentative_g + h, h, next(counter), neighbor))
                    stats.nodes_generated += 1

        logger.warning("No path found from %s to %s", start, goal)
        return self._finish(stats, 'no_path_found')

    def plan_route(self, stops: Iterable, exclusions: Iterable = ()) -> List[Coord]:
        """
        Chain shortest paths through an ordered list of stops.

        The first stop is the starting cell and is included in the result.
        Consecutive duplicate stops are skipped. Any unreachable leg makes
        the whole route empty.
        """
        stops = [as_coord(s) for s in stops]
        if not stops:
            return []
        excluded = [as_coord(c) for c in exclusions]

        route = [stops[0]]
        for stop in stops[1:]:
            if stop == route[-1]:
                continue
            leg = self.find_path(route[-1], stop, excluded)
            if not leg:
                logger.warning("Route leg %s -> %s is unreachable", route[-1], stop)
                return []
            route.extend(leg)
        return route

    def find_nearest_accessible(self, target, current) -> Coord:
        """
        Fallback goal next to a blocked target.

        Picks the empty 8-neighbour of ``target`` closest (Manhattan) to
        ``current``; returns ``current`` when none exists.
        """
        target = as_coord(target)
        current = as_coord(current)
        best = None
        best_dist = None
        for dx, dy in NEIGHBOR_OFFSETS + DIAGONAL_OFFSETS:
            cell = (target[0] + dx, target[1] + dy)
            if not self.grid.is_in_bounds(*cell):
                continue
            if self.grid.get(*cell).type != CellType.EMPTY:
                continue
            d = manhattan(current, cell)
            if best_dist is None or d < best_dist:
                best, best_dist = cell, d
        return best if best is not None else current

    def _reconstruct_path(self, came_from: Dict[Coord, Coord], current: Coord) -> List[Coord]:
        """Reconstruct path from came_from dict"""
        path = [current]
        while current in came_from:
            current = came_from[current]
            path.append(current)
        path.reverse()
        return path


def find_path(grid: OccupancyGrid, start, goal, exclusions: Iterable = ()) -> List[Coord]:
    """Functional shortcut for a one-off query"""
    return AStarPlanner(grid).find_path(start, goal, exclusions)
