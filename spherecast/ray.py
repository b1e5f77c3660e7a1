"""
Ray class: a half-line P(t) = origin + t * direction.

Rays carry a time stamp so a camera with an open shutter can spread
samples over an interval. Directions are not required to be unit length.
"""

from __future__ import annotations
from .vec3 import Vec3, Point3


class Ray:
    """A ray with origin, direction and sample time."""

    __slots__ = ('origin', 'direction', 'time')

    def __init__(self, origin: Point3, direction: Vec3, time: float = 0.0):
        self.origin = origin
        self.direction = direction
        self.time = time

    def at(self, t: float) -> Point3:
        """Return the point reached after travelling t direction-lengths."""
        return self.origin + self.direction * t

    def __repr__(self) -> str:
        return f"Ray(origin={self.origin}, direction={self.direction}, time={self.time:.4f})"
