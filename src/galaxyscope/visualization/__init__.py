"""
Visualization components for galaxyscope.

This module contains color handling and the matplotlib render surface.
"""

__all__ = ['color_system', 'render_surface']
