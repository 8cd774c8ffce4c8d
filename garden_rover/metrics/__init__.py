"""
Metrics Module
==============

Path and trajectory metrics, and run results.
"""

from .path_metrics import (
    TrajectoryMetrics,
    manhattan_length,
    euclidean_length,
    is_connected,
    count_turns,
    RunStatus,
    RunResult,
)

__all__ = [
    'TrajectoryMetrics',
    'manhattan_length',
    'euclidean_length',
    'is_connected',
    'count_turns',
    'RunStatus',
    'RunResult',
]
