"""
galaxyscope: procedural galaxy morphologies and cosmic events as animated particle fields.

This package generates particle clouds for galaxy types and cosmic events,
animates them frame by frame and manages their lifecycle for a render surface.
"""

__version__ = "0.1.0"
__author__ = "galaxyscope developers"

__all__ = []
