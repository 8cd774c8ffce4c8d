"""
Motion Module
=============

Rover pose and per-tick kinematics.
"""

from .model import Pose, MotionModel, MotionState, MotionUpdate, normalize_angle

__all__ = [
    'Pose',
    'MotionModel',
    'MotionState',
    'MotionUpdate',
    'normalize_angle',
]
