"""
Particle system module for galaxyscope.

This module defines the buffers shared by the generator, the kinematics driver
and the render surface: a structure-of-arrays ParticleSystem holding the main
particle cloud, and AuxiliaryObjects for the secondary visual layers (jets,
glows, disks, collision centers), each tagged with a kind from a closed set.
"""

from enum import Enum

import numpy as np
from scipy.spatial.transform import Rotation


class AuxiliaryKind(Enum):
    """Kind tags shared by the generator and the kinematics driver."""

    CORE_GLOW = 'core-glow'
    BLACK_HOLE = 'black-hole'
    GLOW_HALO = 'glow-halo'
    ACCRETION_DISK = 'accretion-disk'
    JET = 'jet'
    COLLISION_POPULATION = 'collision-population'


def _empty(width=3):
    return np.zeros((0, width))


def apply_transform(positions, rotation=0.0, scale=1.0, offset=None):
    """
    Rotate positions about the vertical (+Y) axis, scale them and translate.

    Args:
        positions (np.ndarray): Local positions, shape (N, 3)
        rotation (float): Angle in radians about +Y
        scale (float): Uniform scale factor
        offset (np.ndarray, optional): Translation, shape (3,)

    Returns:
        np.ndarray: Transformed copy, shape (N, 3)
    """
    if len(positions) == 0:
        return np.array(positions, dtype=float).reshape(0, 3)
    world = Rotation.from_euler('y', rotation).apply(positions) * scale
    if offset is not None:
        world += offset
    return world


class ParticleSystem:
    """
    Owner of the main particle buffers.

    All per-particle arrays share the same particle index. Optional metadata
    (velocities, local positions, group ids, ...) is None when the
    morphology does not need it.
    """

    def __init__(self, count, velocities=False, initial_positions=False,
                 group_ids=False, base_colors=False, radii=False):
        self.positions = np.zeros((count, 3))
        self.colors = np.zeros((count, 3))
        self.velocities = np.zeros((count, 3)) if velocities else None
        self.initial_positions = np.zeros((count, 3)) if initial_positions else None
        self.base_colors = np.zeros((count, 3)) if base_colors else None
        self.radii = np.zeros(count) if radii else None
        self.group_ids = np.zeros(count, dtype=np.int8) if group_ids else None

        # Whole-object transform, applied by the render surface
        self.rotation = 0.0
        self.scale = 1.0
        self.opacity = 1.0
        self.disposed = False

    def __len__(self):
        return len(self.positions)

    @property
    def count(self):
        return len(self.positions)

    @property
    def position_buffer(self):
        """Flat view of the positions, length 3 * count."""
        return self.positions.reshape(-1)

    @property
    def color_buffer(self):
        """Flat view of the colors, length 3 * count."""
        return self.colors.reshape(-1)

    def freeze_groups(self):
        """Make group ids read-only once generation has assigned them."""
        if self.group_ids is not None:
            self.group_ids.flags.writeable = False

    def world_positions(self):
        return apply_transform(self.positions, self.rotation, self.scale)

    def dispose(self):
        """Release all buffers. Safe to call more than once."""
        self.positions = _empty()
        self.colors = _empty()
        for name in ('velocities', 'initial_positions', 'base_colors'):
            if getattr(self, name) is not None:
                setattr(self, name, _empty())
        if self.radii is not None:
            self.radii = np.zeros(0)
        if self.group_ids is not None:
            self.group_ids = np.zeros(0, dtype=np.int8)
        self.disposed = True


class AuxiliaryObject:
    """
    A secondary visual entity with its own small buffer and motion law.

    Objects whose motion is a whole-body transform (glows, disk layer) never
    touch ``positions`` and only change ``rotation``, ``scale`` and
    ``opacity``; fountains (jets) mutate ``positions``.
    """

    def __init__(self, kind, name, positions, colors, direction=1, group_id=None,
                 center=None, rng=None):
        self.kind = AuxiliaryKind(kind)
        self.name = name
        self.positions = np.asarray(positions, dtype=float).reshape(-1, 3)
        self.colors = np.asarray(colors, dtype=float).reshape(-1, 3)
        self.direction = direction
        self.group_id = group_id
        self.center = np.zeros(3) if center is None else np.asarray(center, dtype=float)
        self.rng = rng

        self.rotation = 0.0
        self.scale = 1.0
        self.opacity = 1.0
        self.disposed = False

    def __repr__(self):
        return f"AuxiliaryObject(kind={self.kind.value!r}, name={self.name!r}, count={len(self.positions)})"

    @property
    def count(self):
        return len(self.positions)

    def world_positions(self):
        return apply_transform(self.positions, self.rotation, self.scale, self.center)

    def dispose(self):
        """Release all buffers. Safe to call more than once."""
        self.positions = _empty()
        self.colors = _empty()
        self.rng = None
        self.disposed = True
