"""
Path Metrics Module
===================

Metrics for planned waypoint lists and executed trajectories.
"""

import numpy as np
from typing import Dict, List, Optional, Tuple, Sequence
from dataclasses import dataclass, field

from ..environment import Coord


@dataclass
class TrajectoryMetrics:
    """
    Per-tick samples of an executed mission.

    Tracks:
    - Physical positions and velocities
    - Distance travelled
    - Arrival ticks per waypoint
    """

    dt: float = 1.0 / 60.0
    positions: List[Tuple[float, float]] = field(default_factory=list)
    velocities: List[float] = field(default_factory=list)
    arrival_ticks: List[int] = field(default_factory=list)

    def add_sample(self, x: float, z: float, velocity: float, arrived: bool = False):
        """Record one tick"""
        self.positions.append((x, z))
        self.velocities.append(velocity)
        if arrived:
            self.arrival_ticks.append(len(self.positions))

    @property
    def num_ticks(self) -> int:
        return len(self.positions)

    @property
    def total_distance(self) -> float:
        """Distance between consecutive samples (meters)"""
        if len(self.positions) < 2:
            return 0.0
        pts = np.asarray(self.positions, dtype=float)
        return float(np.sum(np.hypot(*np.diff(pts, axis=0).T)))

    @property
    def total_time(self) -> float:
        return self.num_ticks * self.dt

    @property
    def avg_velocity(self) -> float:
        """Average velocity (m/s)"""
        return float(np.mean(self.velocities)) if self.velocities else 0.0

    @property
    def max_velocity(self) -> float:
        return float(np.max(self.velocities)) if self.velocities else 0.0

    def to_dict(self) -> Dict:
        """Convert to dictionary for serialization"""
        return {
            'num_ticks': self.num_ticks,
            'total_time_s': self.total_time,
            'sampled_distance_m': self.total_distance,
            'avg_velocity_ms': self.avg_velocity,
            'max_velocity_ms': self.max_velocity,
            'arrival_ticks': list(self.arrival_ticks),
        }


def manhattan_length(path: Sequence[Coord]) -> int:
    """Sum of 4-connected step lengths along a waypoint list"""
    return int(sum(abs(b[0] - a[0]) + abs(b[1] - a[1]) for a, b in zip(path, path[1:])))


def euclidean_length(path: Sequence[Coord], cell_scale: float = 1.0) -> float:
    """Straight-line length between consecutive waypoints (meters)"""
    if len(path) < 2:
        return 0.0
    pts = np.asarray(path, dtype=float)
    return float(np.sum(np.hypot(*np.diff(pts, axis=0).T)) * cell_scale)


def is_connected(path: Sequence[Coord], start: Optional[Coord] = None) -> bool:
    """True if every step moves exactly one cell in x or y"""
    cells = ([start] if start is not None else []) + list(path)
    return all(abs(b[0] - a[0]) + abs(b[1] - a[1]) == 1 for a, b in zip(cells, cells[1:]))


def count_turns(path: Sequence[Coord]) -> int:
    """Heading changes along the path"""
    turns = 0
    for a, b, c in zip(path, path[1:], path[2:]):
        if (b[0] - a[0], b[1] - a[1]) != (c[0] - b[0], c[1] - b[1]):
            turns += 1
    return turns


class RunStatus:
    """Enumeration of run status types"""
    SUCCESS = 'success'
    NO_PATH = 'no_path'
    TIMEOUT = 'timeout'
    EMPTY_PATH = 'empty_path'


@dataclass
class RunResult:
    """Complete result of a simulated mission"""
    status: str
    waypoints: List[Coord] = field(default_factory=list)

    ticks: int = 0
    distance_traveled_m: float = 0.0
    waypoints_reached: int = 0
    scanned: List[Coord] = field(default_factory=list)

    trajectory: Optional[TrajectoryMetrics] = None
    info: Dict = field(default_factory=dict)

    @property
    def is_success(self) -> bool:
        return self.status == RunStatus.SUCCESS

    def to_dict(self) -> Dict:
        return {
            'status': self.status,
            'waypoints': [list(w) for w in self.waypoints],
            'path_length': len(self.waypoints),
            'ticks': self.ticks,
            'distance_traveled_m': self.distance_traveled_m,
            'waypoints_reached': self.waypoints_reached,
            'plants_scanned': len(self.scanned),
            'scanned': [list(c) for c in self.scanned],
            'trajectory': self.trajectory.to_dict() if self.trajectory else None,
            'info': self.info,
        }
