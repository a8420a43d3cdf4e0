"""Rigid body transformations between sensor frames."""

from .transformation import Transformation

__all__ = ["Transformation"]
