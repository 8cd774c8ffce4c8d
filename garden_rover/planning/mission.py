"""
Mission Sequencer Module
========================

Drives the rover through an ordered waypoint list one externally paced
tick at a time, tracking the waypoint cursor, distance travelled and
plant scans.
"""

import math
import logging
from enum import Enum
from typing import List, Dict, Optional, Set, Callable, Iterable
from dataclasses import dataclass, field

from ..config import Config
from ..environment import OccupancyGrid, Coord, as_coord
from ..exceptions import EmptyPathError
from ..garden import Cell, CellType
from ..motion import MotionModel, Pose

logger = logging.getLogger(__name__)


class MissionStatus(str, Enum):
    IDLE = 'idle'
    RUNNING = 'running'
    PAUSED = 'paused'
    COMPLETE = 'complete'


class EventKind(str, Enum):
    ARRIVAL = 'arrival'
    SCAN = 'scan'
    COMPLETE = 'complete'


@dataclass
class MissionEvent:
    """Something mission control may want to show or log"""
    kind: EventKind
    tick: int
    waypoint_index: int
    coordinate: Optional[Coord] = None
    cell: Optional[Cell] = None


@dataclass
class MissionState:
    """Mutable progress of the current mission"""
    waypoint_index: int = 0
    distance_traveled: float = 0.0
    visited_cell_keys: Set[Coord] = field(default_factory=set)
    status: MissionStatus = MissionStatus.IDLE

    # Counters
    tick: int = 0
    waypoints_reached: int = 0
    scan_events: List[MissionEvent] = field(default_factory=list)


@dataclass
class TickResult:
    """What a single tick did"""
    status: MissionStatus
    events: List[MissionEvent] = field(default_factory=list)
    distance_moved: float = 0.0
    target: Optional[Coord] = None

    @property
    def arrived(self) -> bool:
        return any(e.kind == EventKind.ARRIVAL for e in self.events)


class MissionSequencer:
    """
    Waypoint mission state machine.

    States:
    - IDLE: path loaded (or not); no pose
    - RUNNING: each tick moves the rover toward the current waypoint
    - PAUSED: ticks are ignored until ``resume``
    - COMPLETE: every waypoint reached; ticks are ignored

    On arrival the target cell is marked explored and, if it holds a plant
    not yet scanned this mission, a scan event is recorded. Waypoint order
    is never changed.
    """

    def __init__(self,
                 grid: OccupancyGrid,
                 motion_model: MotionModel,
                 waypoints: Optional[Iterable] = None,
                 config: Optional[Config] = None):
        """
        Initialize sequencer.

        Args:
            grid: Occupancy grid queried for scans
            motion_model: Kinematic model advancing the pose
            waypoints: Initial waypoint list (optional)
            config: Configuration object (mission limits)
        """
        self.grid = grid
        self.motion_model = motion_model
        self.config = config or Config()

        self.waypoints: List[Coord] = []
        self.state = MissionState()
        self.pose: Optional[Pose] = None
        self._subscribers: Dict[EventKind, List[Callable[[MissionEvent], None]]] = {
            kind: [] for kind in EventKind
        }

        if waypoints is not None:
            self.set_path(waypoints)

    # ==================== Configuration ====================

    @property
    def status(self) -> MissionStatus:
        return self.state.status

    @property
    def current_target(self) -> Optional[Coord]:
        if self.state.waypoint_index < len(self.waypoints):
            return self.waypoints[self.state.waypoint_index]
        return None

    @property
    def remaining_waypoints(self) -> List[Coord]:
        return self.waypoints[self.state.waypoint_index:]

    def set_path(self, waypoints: Iterable) -> List[Coord]:
        """Load a waypoint list (planner output or explicit); resets the mission"""
        path = [as_coord(w) for w in waypoints]
        for w in path:
            if not self.grid.is_in_bounds(*w):
                logger.warning("Waypoint %s is outside the current grid", w)
            elif self.grid.get(*w).type == CellType.OBSTACLE:
                logger.warning("Waypoint %s is on an obstacle", w)
        self.waypoints = path
        self.reset()
        return path

    def subscribe(self, kind, callback: Callable[[MissionEvent], None]):
        """Register a callback for 'arrival', 'scan' or 'complete' events"""
        self._subscribers[EventKind(kind)].append(callback)

    def unsubscribe(self, kind, callback: Callable[[MissionEvent], None]):
        self._subscribers[EventKind(kind)].remove(callback)

    # ==================== Lifecycle ====================

    def start(self, pose: Optional[Pose] = None) -> Pose:
        """
        Begin the mission.

        Args:
            pose: Initial pose; if None the rover is placed, stationary, on
                the first waypoint

        Returns:
            The pose the mission will mutate

        Raises:
            EmptyPathError: if no waypoints are loaded (status stays IDLE)
        """
        if not self.waypoints:
            raise EmptyPathError("Cannot start a mission without waypoints")

        self.state = MissionState(status=MissionStatus.RUNNING)
        self.motion_model.reset()
        if pose is None:
            pose = Pose.snapped_to(self.waypoints[0], self.grid.coordinates)
        self.pose = pose
        logger.debug("Mission started with %d waypoints at (%.2f, %.2f)",
                     len(self.waypoints), pose.x, pose.z)
        return pose

    def pause(self):
        if self.state.status == MissionStatus.RUNNING:
            self.state.status = MissionStatus.PAUSED

    def resume(self):
        if self.state.status == MissionStatus.PAUSED:
            self.state.status = MissionStatus.RUNNING

    def reset(self):
        """Back to IDLE; counters cleared and pose discarded"""
        self.state = MissionState()
        self.pose = None
        self.motion_model.reset()

    # ==================== Tick ====================

    def tick(self) -> TickResult:
        """Advance the mission by one step"""
        if self.state.status != MissionStatus.RUNNING:
            return TickResult(status=self.state.status)

        state = self.state
        state.tick += 1
        target = self.waypoints[state.waypoint_index]
        pose = self.pose

        prev_x, prev_z = pose.x, pose.z
        update = self.motion_model.update(pose, target)
        moved = math.hypot(pose.x - prev_x, pose.z - prev_z)
        state.distance_traveled += moved

        result = TickResult(status=state.status, distance_moved=moved, target=target)
        if update.arrived:
            self._on_arrival(target, result)
        result.status = state.status
        return result

    def _on_arrival(self, target: Coord, result: TickResult):
        state = self.state
        index = state.waypoint_index
        state.waypoints_reached += 1

        cell = self.grid.get(*target)
        self.grid.mark_explored(*target)
        events = [MissionEvent(EventKind.ARRIVAL, state.tick, index, target, cell)]

        if cell.type == CellType.PLANT and target not in state.visited_cell_keys:
            state.visited_cell_keys.add(target)
            scan = MissionEvent(EventKind.SCAN, state.tick, index, target, cell)
            state.scan_events.append(scan)
            logger.info("Plant scanned at %s | moisture: %s", target, cell.moisture)
            events.append(scan)

        state.waypoint_index += 1
        self.motion_model.reset()

        if state.waypoint_index >= len(self.waypoints):
            state.status = MissionStatus.COMPLETE
            logger.info("Mission complete after %d ticks, %.2f m",
                        state.tick, state.distance_traveled)
            events.append(MissionEvent(EventKind.COMPLETE, state.tick, index))
        else:
            logger.debug("Waypoint %d/%d reached", state.waypoint_index, len(self.waypoints))

        # Callbacks run after the cursor and status are settled
        result.events.extend(events)
        result.status = state.status
        for event in events:
            for callback in list(self._subscribers[event.kind]):
                callback(event)

    # ==================== Convenience ====================

    def run(self, max_ticks: Optional[int] = None) -> MissionStatus:
        """
        Tick until the mission leaves RUNNING or the tick budget runs out.

        Starts the mission first if it is IDLE.
        """
        if max_ticks is None:
            max_ticks = self.config.mission.max_ticks
        if self.state.status == MissionStatus.IDLE:
            self.start()
        for _ in range(max_ticks):
            if self.state.status != MissionStatus.RUNNING:
                break
            self.tick()
        return self.state.status

    def summary(self) -> Dict:
        """Counters for mission-control displays"""
        state = self.state
        return {
            'status': state.status.value,
            'tick': state.tick,
            'waypoint_index': state.waypoint_index,
            'waypoints_total': len(self.waypoints),
            'waypoints_reached': state.waypoints_reached,
            'distance_traveled_m': state.distance_traveled,
            'plants_scanned': len(state.visited_cell_keys),
            'pose': self.pose.to_dict() if self.pose else None,
        }
