"""
Particle generator module for galaxyscope.

Synthesizes the particle cloud and auxiliary objects for every galaxy
morphology and cosmic event. Sampling is vectorized with numpy: each generator
draws its random numbers in a few batched calls and writes straight into the
ParticleSystem buffers, so generation stays O(N) even at 2e5 particles.
"""

import logging
import math

import numpy as np

from .. import config
from ..core.galaxy_params import ALL_TYPES, CosmicEvent, GalaxyType
from ..visualization.color_system import hsl_colors, lerp_colors, parse_color, radial_fraction
from .particle_system import AuxiliaryKind, AuxiliaryObject, ParticleSystem

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Sampling helpers
# ---------------------------------------------------------------------------

def random_signs(rng, shape):
    """Independent +1 / -1 per entry."""
    return np.where(rng.random(shape) < 0.5, -1.0, 1.0)


def branch_angles(count, branches):
    """Angle of the arm each particle belongs to: (i mod branches) / branches * 2pi."""
    return (np.arange(count) % branches) / branches * 2.0 * math.pi


def spherical_directions(rng, count):
    """
    Isotropic unit vectors.

    Uses theta uniform in [0, 2pi) and phi = acos(2u - 1) so directions are
    uniform over the sphere rather than bunched at the poles.
    """
    theta = rng.random(count) * 2.0 * math.pi
    phi = np.arccos(2.0 * rng.random(count) - 1.0)
    return np.column_stack((
        np.sin(phi) * np.cos(theta),
        np.sin(phi) * np.sin(theta),
        np.cos(phi),
    ))


def fibonacci_sphere(count, radius=1.0):
    """Evenly spread points on a sphere, used for small solid-looking objects."""
    if count == 0:
        return np.zeros((0, 3))
    i = np.arange(count)
    golden = math.pi * (3.0 - math.sqrt(5.0))
    y = 1.0 - (i / max(count - 1, 1)) * 2.0
    ring = np.sqrt(np.maximum(0.0, 1.0 - y * y))
    return np.column_stack((np.cos(golden * i) * ring, y, np.sin(golden * i) * ring)) * radius


def _spiral_positions(rng, count, params, radius=None):
    """
    Arm-structured disk sampling shared by the spiral family and collisions.

    Returns:
        tuple: (positions (N, 3), planar radii (N,))
    """
    radius = params.radius if radius is None else radius
    r = radius * rng.random(count) ** config.RADIAL_EXPONENT
    angle = r * params.spin + branch_angles(count, params.branches)

    jitter = rng.random((count, 3)) ** params.randomness_power
    jitter *= random_signs(rng, (count, 3)) * params.randomness * r[:, None]

    positions = np.empty((count, 3))
    positions[:, 0] = np.cos(angle) * r + jitter[:, 0]
    positions[:, 1] = jitter[:, 1] * config.VERTICAL_FLATTENING
    positions[:, 2] = np.sin(angle) * r + jitter[:, 2]
    return positions, r


# ---------------------------------------------------------------------------
# Morphologies
# ---------------------------------------------------------------------------

def _generate_spiral(params, colors, rng):
    system = ParticleSystem(params.stars_count, radii=True)
    system.positions[:], system.radii[:] = _spiral_positions(rng, params.stars_count, params)
    lerp_colors(*colors, radial_fraction(system.radii, params.radius), out=system.colors)
    return system, []


def _generate_elliptical(params, colors, rng):
    count = params.stars_count
    system = ParticleSystem(count, radii=True)
    r = params.radius * rng.random(count) ** config.RADIAL_EXPONENT
    system.positions[:] = spherical_directions(rng, count) * r[:, None]
    # Oblate: flatten the two minor axes
    system.positions[:, 1] *= config.ELLIPTICAL_Y_FACTOR
    system.positions[:, 2] *= config.ELLIPTICAL_Z_FACTOR
    system.radii[:] = r
    lerp_colors(*colors, radial_fraction(r, params.radius), out=system.colors)
    return system, []


def _generate_lenticular(params, colors, rng):
    count = params.stars_count
    bulge = int(round(count * config.LENTICULAR_BULGE_FRACTION))
    disk = count - bulge
    system = ParticleSystem(count, radii=True)

    # Dense central bulge
    bulge_r = params.radius * config.LENTICULAR_BULGE_RADIUS * rng.random(bulge) ** config.LENTICULAR_BULGE_EXPONENT
    system.positions[:bulge] = spherical_directions(rng, bulge) * bulge_r[:, None]
    system.radii[:bulge] = bulge_r

    # Flat disk without arms
    disk_r = params.radius * rng.random(disk) ** config.RADIAL_EXPONENT
    angle = rng.random(disk) * 2.0 * math.pi
    thickness = params.radius * config.LENTICULAR_DISK_THICKNESS
    system.positions[bulge:, 0] = np.cos(angle) * disk_r
    system.positions[bulge:, 1] = (rng.random(disk) - 0.5) * thickness
    system.positions[bulge:, 2] = np.sin(angle) * disk_r
    system.radii[bulge:] = disk_r

    lerp_colors(*colors, radial_fraction(system.radii, params.radius), out=system.colors)
    return system, []


def _generate_supernova(params, colors, rng):
    count = params.stars_count
    system = ParticleSystem(count, velocities=True, base_colors=True)

    system.positions[:] = (rng.random((count, 3)) - 0.5) * config.SUPERNOVA_ORIGIN_JITTER

    # Heavy-tailed speeds, plus a fast shock front
    speed = config.SUPERNOVA_BASE_SPEED + rng.random(count) ** config.SUPERNOVA_SPEED_EXPONENT * config.SUPERNOVA_SPEED_SCALE
    shock = rng.random(count) < config.SUPERNOVA_SHOCK_FRACTION
    speed[shock] *= config.SUPERNOVA_SHOCK_BOOST
    system.velocities[:] = spherical_directions(rng, count) * speed[:, None]

    low, high = config.SUPERNOVA_HUE_RANGE
    hues = low + rng.random(count) * (high - low)
    system.base_colors[:] = hsl_colors(hues, 1.0, config.SUPERNOVA_LIGHTNESS)
    system.colors[:] = system.base_colors

    core = AuxiliaryObject(
        AuxiliaryKind.CORE_GLOW, 'supernova_core',
        fibonacci_sphere(config.CORE_GLOW_POINTS, config.CORE_GLOW_RADIUS),
        np.tile(parse_color(config.CORE_GLOW_COLOR), (config.CORE_GLOW_POINTS, 1)),
    )
    return system, [core]


def _jet(rng, name, direction):
    count = config.JET_POINTS
    positions = np.empty((count, 3))
    positions[:, 0] = (rng.random(count) - 0.5) * config.JET_WIDTH
    positions[:, 1] = rng.random(count) * config.JET_HEIGHT * direction
    positions[:, 2] = (rng.random(count) - 0.5) * config.JET_WIDTH
    colors = np.tile(parse_color(config.JET_COLOR), (count, 1))
    # Each column recycles with its own random stream
    return AuxiliaryObject(AuxiliaryKind.JET, name, positions, colors, direction=direction,
                           rng=np.random.default_rng(rng.integers(2**32)))


def _generate_quasar(params, colors, rng):
    count = params.stars_count
    system = ParticleSystem(count, initial_positions=True, radii=True)

    r = config.QUASAR_INNER_RADIUS + params.radius * rng.random(count) ** config.QUASAR_RADIAL_EXPONENT
    angle = rng.random(count) * 2.0 * math.pi
    # Turbulence concentrates near the center
    scatter = config.QUASAR_TURBULENCE / (r + config.QUASAR_EPSILON)
    system.positions[:, 0] = np.cos(angle) * r
    system.positions[:, 1] = (rng.random(count) - 0.5) * scatter
    system.positions[:, 2] = np.sin(angle) * r
    system.initial_positions[:] = system.positions
    system.radii[:] = r
    lerp_colors(*colors, radial_fraction(r, params.radius), out=system.colors)

    black_hole = AuxiliaryObject(
        AuxiliaryKind.BLACK_HOLE, 'event_horizon',
        fibonacci_sphere(config.BLACK_HOLE_POINTS, config.BLACK_HOLE_RADIUS),
        np.zeros((config.BLACK_HOLE_POINTS, 3)),
    )
    halo = AuxiliaryObject(
        AuxiliaryKind.GLOW_HALO, 'glow_halo',
        spherical_directions(rng, config.GLOW_HALO_POINTS)
        * (config.GLOW_HALO_RADIUS * rng.random(config.GLOW_HALO_POINTS) ** 0.5)[:, None],
        np.tile(parse_color(config.GLOW_HALO_COLOR), (config.GLOW_HALO_POINTS, 1)),
    )

    disk_count = config.ACCRETION_DISK_POINTS
    disk_r = rng.random(disk_count) ** 0.5 * config.ACCRETION_DISK_RADIUS + config.QUASAR_INNER_RADIUS
    disk_a = rng.random(disk_count) * 2.0 * math.pi
    disk_positions = np.column_stack((
        np.cos(disk_a) * disk_r,
        (rng.random(disk_count) - 0.5) * 0.02,
        np.sin(disk_a) * disk_r,
    ))
    disk_colors = lerp_colors(
        parse_color(config.ACCRETION_DISK_INNER), parse_color(config.ACCRETION_DISK_OUTER),
        radial_fraction(disk_r, config.ACCRETION_DISK_RADIUS),
    )
    disk = AuxiliaryObject(AuxiliaryKind.ACCRETION_DISK, 'accretion_disk', disk_positions, disk_colors)

    return system, [black_hole, halo, disk, _jet(rng, 'jet_top', 1), _jet(rng, 'jet_bottom', -1)]


def _generate_collision(params, colors, rng):
    count = params.stars_count
    sizes = (count - count // 2, count // 2)
    system = ParticleSystem(count, initial_positions=True, group_ids=True, radii=True)
    auxiliaries = []

    start = 0
    for group, size in enumerate(sizes):
        end = start + size
        spin_dir = config.COLLISION_SPIN_DIRECTIONS[group]
        local, r = _spiral_positions(rng, size, params.replace(spin=params.spin * spin_dir))

        # Outer stars are stretched more by the other galaxy
        if params.radius > 0:
            tidal = (r / params.radius) ** 3 * config.COLLISION_TIDAL_STRETCH
        else:
            tidal = np.zeros(size)
        local[:, 1] += (rng.random(size) - 0.5) * config.COLLISION_DISK_THICKNESS * (1.0 + tidal)

        offset = config.COLLISION_SEPARATION / 2.0 * (-1.0 if group == 0 else 1.0)
        system.initial_positions[start:end] = local
        system.positions[start:end] = local
        system.positions[start:end, 0] += offset
        system.radii[start:end] = r
        system.group_ids[start:end] = group

        inside, outside = (parse_color(c) for c in config.COLLISION_PALETTES[group])
        lerp_colors(inside, outside, radial_fraction(r, params.radius), out=system.colors[start:end])

        auxiliaries.append(AuxiliaryObject(
            AuxiliaryKind.COLLISION_POPULATION, f'collision_center_{group}',
            np.zeros((1, 3)), inside.reshape(1, 3),
            direction=spin_dir, group_id=group, center=(offset, 0.0, 0.0),
        ))
        start = end

    system.freeze_groups()
    return system, auxiliaries


# Dispatch table, one entry per galaxy type and cosmic event
_GENERATORS = {
    GalaxyType.SPIRAL: _generate_spiral,
    GalaxyType.BARRED_SPIRAL: _generate_spiral,
    GalaxyType.IRREGULAR: _generate_spiral,
    GalaxyType.ELLIPTICAL: _generate_elliptical,
    GalaxyType.LENTICULAR: _generate_lenticular,
    CosmicEvent.SUPERNOVA: _generate_supernova,
    CosmicEvent.QUASAR: _generate_quasar,
    CosmicEvent.COLLISION: _generate_collision,
}

_missing = set(ALL_TYPES) - set(_GENERATORS)
if _missing:
    raise NotImplementedError(f"No generator for: {sorted(m.value for m in _missing)}")


def generate(params, seed=None):
    """
    Build the particle system and auxiliary objects for a configuration.

    Colors are resolved before any buffer is allocated, so a malformed color
    raises without leaving partially written buffers behind.

    Args:
        params (GalaxyParams): Configuration to render
        seed (int, optional): Seed for reproducible sampling

    Returns:
        tuple: (ParticleSystem, list of AuxiliaryObject)

    Raises:
        ConfigurationError: If a color cannot be parsed
    """
    colors = (parse_color(params.inside_color), parse_color(params.outside_color))
    try:
        generator = _GENERATORS[params.type]
    except KeyError:
        raise NotImplementedError(f"No generator for {params.type!r}") from None

    rng = np.random.default_rng(config.random_seed if seed is None else seed)
    system, auxiliaries = generator(params, colors, rng)
    logger.debug("Generated %s: %d particles, %d auxiliary objects",
                 params.type.value, system.count, len(auxiliaries))
    return system, auxiliaries
