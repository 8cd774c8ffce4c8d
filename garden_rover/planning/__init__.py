"""
Planning Module
===============

A* path planning and waypoint mission sequencing.
"""

from .astar import AStarPlanner, PlannerStats, find_path, manhattan
from .mission import (
    MissionSequencer,
    MissionState,
    MissionStatus,
    MissionEvent,
    EventKind,
    TickResult,
)

__all__ = [
    'AStarPlanner',
    'PlannerStats',
    'find_path',
    'manhattan',
    'MissionSequencer',
    'MissionState',
    'MissionStatus',
    'MissionEvent',
    'EventKind',
    'TickResult',
]
