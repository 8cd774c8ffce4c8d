"""
Pipeline Module
===============

Simulation sessions and headless mission runs.
"""

from .runner import SimulationSession, SimulationRunner, ScenarioResult, AggregatedResults

__all__ = [
    'SimulationSession',
    'SimulationRunner',
    'ScenarioResult',
    'AggregatedResults',
]
