"""
Physics components for galaxyscope.

This module contains the particle buffers, the procedural generator and the
per-frame kinematics.
"""

__all__ = ['particle_system', 'generator', 'kinematics']
