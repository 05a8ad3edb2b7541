"""Toolpath geometry package."""

from .base import Bounds, MotionMode, MoveType, Point3, Segment

__all__ = ["Bounds", "MotionMode", "MoveType", "Point3", "Segment"]
