"""
Motion Model Module
===================

Per-tick kinematic update of the rover pose toward a single target cell.
Heading is rotation-rate limited and speed ramps linearly, so the rover
turns in place before it accelerates along a new leg.
"""

import math
from enum import Enum
from dataclasses import dataclass
from typing import Optional, Tuple

from ..config import MotionConfig
from ..environment.coordinates import CoordinateSystem, Coord, validate_logical


class MotionState(str, Enum):
    APPROACHING = 'approaching'
    ARRIVED = 'arrived'


@dataclass
class Pose:
    """Physical pose; owned by the caller and mutated in place each tick"""
    x: float = 0.0
    z: float = 0.0
    heading: float = 0.0  # radians, atan2(dz, dx)
    velocity: float = 0.0

    @classmethod
    def snapped_to(cls, coord: Coord, coordinates: CoordinateSystem,
                   heading: float = 0.0) -> 'Pose':
        """Stationary pose at a cell centre"""
        x, z = coordinates.to_physical(*coord)
        return cls(x=x, z=z, heading=heading, velocity=0.0)

    @property
    def position(self) -> Tuple[float, float]:
        return (self.x, self.z)

    def copy(self) -> 'Pose':
        return Pose(self.x, self.z, self.heading, self.velocity)

    def to_dict(self) -> dict:
        return {'x': self.x, 'z': self.z, 'heading': self.heading, 'velocity': self.velocity}


@dataclass
class MotionUpdate:
    """Outcome of one tick"""
    arrived: bool
    state: MotionState
    distance_moved: float
    distance_to_target: float
    cell: Coord


def normalize_angle(angle: float) -> float:
    """Wrap into [-pi, pi]"""
    while angle > math.pi:
        angle -= 2 * math.pi
    while angle < -math.pi:
        angle += 2 * math.pi
    return angle


class MotionModel:
    """
    Single-target kinematic controller.

    States:
    - APPROACHING: rotate toward the target, ramp speed, integrate position
    - ARRIVED: pose held at the target with zero velocity

    The state machine restarts whenever the target changes or ``reset`` is
    called. Arrival is reported (``arrived=True``) on exactly one tick per
    target; translation arrival is accepted even if the heading has not
    finished turning.
    """

    def __init__(self, coordinates: CoordinateSystem,
                 config: Optional[MotionConfig] = None):
        """
        Initialize motion model.

        Args:
            coordinates: Coordinate system used to place targets
            config: Kinematic limits (defaults if None)
        """
        self.coordinates = coordinates
        self.config = config or MotionConfig()
        self.target: Optional[Coord] = None
        self.state = MotionState.APPROACHING

    def reset(self):
        """Forget the current target; the next update starts a fresh approach"""
        self.target = None
        self.state = MotionState.APPROACHING

    def update(self, pose: Pose, target) -> MotionUpdate:
        """
        Advance ``pose`` by one tick toward ``target``.

        Args:
            pose: Pose to mutate in place
            target: Logical target cell (x, y)

        Returns:
            MotionUpdate describing the tick
        """
        target = validate_logical(*target)
        if target != self.target:
            self.target = target
            self.state = MotionState.APPROACHING

        tx, tz = self.coordinates.to_physical(*target)
        start_x, start_z = pose.x, pose.z

        if self.state == MotionState.ARRIVED:
            pose.x, pose.z, pose.velocity = tx, tz, 0.0
            return self._result(False, pose, start_x, start_z, 0.0)

        distance = math.hypot(tx - pose.x, tz - pose.z)
        if distance < self.config.arrival_threshold:
            return self._arrive(pose, tx, tz, start_x, start_z)

        self._step(pose, tx, tz)

        distance = math.hypot(tx - pose.x, tz - pose.z)
        if distance < self.config.arrival_threshold:
            return self._arrive(pose, tx, tz, start_x, start_z)

        return self._result(False, pose, start_x, start_z, distance)

    def _step(self, pose: Pose, tx: float, tz: float):
        cfg = self.config
        dt = cfg.dt
        mult = cfg.speed_multiplier

        desired = math.atan2(tz - pose.z, tx - pose.x)
        diff = normalize_angle(desired - pose.heading)

        max_rotation = cfg.angular_velocity * mult * dt
        pose.heading = normalize_angle(
            pose.heading + math.copysign(min(abs(diff), max_rotation), diff))

        if abs(diff) < cfg.alignment_tolerance:
            pose.velocity = min(pose.velocity + cfg.acceleration * mult * dt,
                                cfg.max_velocity * mult)
        else:
            pose.velocity = max(pose.velocity - cfg.deceleration * dt, 0.0)

        pose.x += math.cos(pose.heading) * pose.velocity * dt
        pose.z += math.sin(pose.heading) * pose.velocity * dt

    def _arrive(self, pose: Pose, tx: float, tz: float,
                start_x: float, start_z: float) -> MotionUpdate:
        pose.x, pose.z, pose.velocity = tx, tz, 0.0
        self.state = MotionState.ARRIVED
        return self._result(True, pose, start_x, start_z, 0.0)

    def _result(self, arrived: bool, pose: Pose, start_x: float, start_z: float,
                distance_to_target: float) -> MotionUpdate:
        return MotionUpdate(
            arrived=arrived,
            state=self.state,
            distance_moved=math.hypot(pose.x - start_x, pose.z - start_z),
            distance_to_target=distance_to_target,
            cell=self.coordinates.from_physical(pose.x, pose.z),
        )
