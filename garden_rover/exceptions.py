"""
Exceptions Module
=================

Errors surfaced to callers. Everything else degrades gracefully
(defaults, no-ops, empty results) so a live editing session keeps running.
"""


class GardenRoverError(ValueError):
    """Base class for errors raised by the rover core"""


class InvalidCoordinateError(GardenRoverError):
    """Coordinate is non-integer (logical) or non-finite (physical)"""


class InvalidGridSizeError(GardenRoverError):
    """Grid size is not a positive integer"""


class EmptyPathError(GardenRoverError):
    """Mission started without any waypoints"""


class UnknownTemplateError(KeyError):
    """No garden template registered under the requested id"""
