"""
Configuration Settings Module
==============================

Dataclass-based configuration with validation and defaults.
Follows Single Responsibility Principle - only handles configuration.
"""

from dataclasses import dataclass, field, asdict
from typing import Dict, Optional, Any
import math


@dataclass
class GridConfig:
    """Logical grid and simulation unit"""
    grid_size: int = 5
    cell_scale: float = 2.0  # meters per grid cell


@dataclass
class MotionConfig:
    """Rover kinematic limits"""
    max_velocity: float = 2.0  # m/s
    acceleration: float = 0.5  # m/s²
    deceleration: float = 0.5  # m/s²
    angular_velocity: float = 1.5  # rad/s

    arrival_threshold: float = 0.3  # meters
    alignment_tolerance: float = 0.5  # radians

    dt: float = 1.0 / 60.0  # seconds per tick
    speed_multiplier: float = 1.0

    @property
    def max_rotation_step(self) -> float:
        """Largest heading change allowed in one tick"""
        return self.angular_velocity * self.speed_multiplier * self.dt


@dataclass
class DisplayConfig:
    """Render scale, kept independent of the simulation unit"""
    pixels_per_unit: float = 30.0  # 60 px per 2 m cell
    viewport_width: int = 600
    viewport_height: int = 600


@dataclass
class MissionConfig:
    """Mission execution limits"""
    max_ticks: int = 100000
    default_template: str = 'small_home'


@dataclass
class Config:
    """
    Master configuration class combining all sub-configurations.

    Usage:
        config = Config()
        config = Config(motion=MotionConfig(speed_multiplier=1.5))
    """
    grid: GridConfig = field(default_factory=GridConfig)
    motion: MotionConfig = field(default_factory=MotionConfig)
    display: DisplayConfig = field(default_factory=DisplayConfig)
    mission: MissionConfig = field(default_factory=MissionConfig)

    verbose: bool = False

    def __post_init__(self):
        self.validate()

    def validate(self):
        """Reject settings the simulation cannot run with"""
        if self.grid.grid_size < 1:
            raise ValueError(f"grid_size must be >= 1, got {self.grid.grid_size}")
        if not (self.grid.cell_scale > 0 and math.isfinite(self.grid.cell_scale)):
            raise ValueError(f"cell_scale must be positive, got {self.grid.cell_scale}")
        if self.display.pixels_per_unit <= 0:
            raise ValueError("pixels_per_unit must be positive")
        if self.display.viewport_width <= 0 or self.display.viewport_height <= 0:
            raise ValueError("viewport dimensions must be positive")
        for name in ('dt', 'arrival_threshold', 'speed_multiplier', 'max_velocity',
                     'acceleration', 'angular_velocity'):
            value = getattr(self.motion, name)
            if not (value > 0 and math.isfinite(value)):
                raise ValueError(f"{name} must be positive, got {value}")
        if self.motion.deceleration < 0:
            raise ValueError("deceleration must be non-negative")

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> 'Config':
        """Create Config from (possibly nested) dictionary"""
        sections = {
            'grid': GridConfig,
            'motion': MotionConfig,
            'display': DisplayConfig,
            'mission': MissionConfig,
        }
        kwargs = {}
        for key, value in d.items():
            if key in sections and isinstance(value, dict):
                kwargs[key] = sections[key](**value)
            elif key in sections or key == 'verbose':
                kwargs[key] = value
        return cls(**kwargs)

    def to_dict(self) -> Dict[str, Any]:
        """Export config to dictionary"""
        return asdict(self)


def default_config(grid_size: Optional[int] = None) -> Config:
    """Default configuration, optionally with a different grid size"""
    config = Config()
    if grid_size is not None:
        config.grid.grid_size = grid_size
        config.validate()
    return config
