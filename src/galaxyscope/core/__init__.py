"""
Core modules for galaxyscope.

This module contains the configuration value, the galaxy type definitions and
the scene lifecycle that owns the active buffers.
"""

__all__ = ['galaxy_params', 'lifecycle']
