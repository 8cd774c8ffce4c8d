"""
Configuration Module
====================

Centralized configuration management for the garden rover simulation.
"""

from .settings import (
    Config,
    GridConfig,
    MotionConfig,
    DisplayConfig,
    MissionConfig,
    default_config,
)

__all__ = [
    'Config',
    'GridConfig',
    'MotionConfig',
    'DisplayConfig',
    'MissionConfig',
    'default_config',
]
