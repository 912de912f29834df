"""
Kinematics module for galaxyscope.

Per-frame motion laws for the main particle system and every auxiliary kind.
Wherever possible a law recomputes the buffers from the elapsed time and
fixed per-particle metadata (stateless overwrite), so pausing the clock or
changing its rate never desynchronizes the animation. Only the continuous
supernova and the jet fountains integrate state, using a fixed nominal step.
"""

import math

import numpy as np

from .. import config
from ..core.galaxy_params import ALL_TYPES, CosmicEvent, GalaxyType, SupernovaMode
from ..visualization.color_system import heat_falloff
from .particle_system import AuxiliaryKind


# ---------------------------------------------------------------------------
# Pure helpers
# ---------------------------------------------------------------------------

def rotation_rate(galaxy_type):
    """Rigid rotation rate (rad/s) about the vertical axis."""
    if galaxy_type in (GalaxyType.ELLIPTICAL, GalaxyType.LENTICULAR):
        return config.ROTATION_RATE_SLOW
    return config.ROTATION_RATE_DEFAULT


def supernova_progress(elapsed, period):
    """Normalized position in [0, 1) within the supernova loop."""
    return (elapsed % period) / period


def keplerian_angular_velocity(radii):
    """Angular velocity decreasing with radius: K / (r + eps)."""
    return config.QUASAR_KEPLER_CONSTANT / (np.asarray(radii, dtype=float) + config.QUASAR_EPSILON)


def collision_separation(elapsed, d0=None, omega=None):
    """Signed distance between the two collision centers, D(t) = D0 cos(omega t)."""
    d0 = config.COLLISION_SEPARATION if d0 is None else d0
    omega = config.COLLISION_FREQUENCY if omega is None else omega
    return d0 * math.cos(omega * elapsed)


def collision_closeness(separation):
    """0 outside the proximity threshold, rising linearly to 1 at zero separation."""
    return max(0.0, 1.0 - abs(separation) / config.COLLISION_PROXIMITY)


def collision_centers(elapsed):
    """
    Centers of the two populations at a given time.

    Returns:
        np.ndarray: Centers, shape (2, 3); population 0 at -D/2, 1 at +D/2 on x
    """
    half = collision_separation(elapsed) / 2.0
    return np.array([[-half, 0.0, 0.0], [half, 0.0, 0.0]])


def rotate_about_vertical(local, angles, out):
    """
    Rotate local positions about +Y by per-particle angles into ``out``.

    Same handedness as the rigid transform applied by the render surface.
    """
    cos, sin = np.cos(angles), np.sin(angles)
    x, z = local[:, 0], local[:, 2]
    out[:, 0] = x * cos + z * sin
    out[:, 1] = local[:, 1]
    out[:, 2] = -x * sin + z * cos
    return out


def glow_pulse(elapsed):
    return 1.0 + math.sin(config.GLOW_PULSE_FREQUENCY * elapsed) * config.GLOW_PULSE_AMPLITUDE


# ---------------------------------------------------------------------------
# Main particle system laws
# ---------------------------------------------------------------------------

def _rigid_rotation(system, elapsed, params):
    # Transform only; the buffers are untouched
    system.rotation = elapsed * rotation_rate(params.type)


def _supernova_continuous(system, elapsed, params):
    positions = system.positions
    positions += system.velocities * config.SUPERNOVA_NOMINAL_DT

    distances = np.linalg.norm(positions, axis=1)
    # Recycle escaped particles instead of removing them
    escaped = distances > config.SUPERNOVA_RECYCLE_DISTANCE
    if np.any(escaped):
        positions[escaped] = 0.0
        distances[escaped] = 0.0

    heat = heat_falloff(distances, config.SUPERNOVA_FADE_RADIUS, config.SUPERNOVA_HEAT_EXPONENT)
    brightness = config.SUPERNOVA_MIN_BRIGHTNESS + (1.0 - config.SUPERNOVA_MIN_BRIGHTNESS) * heat
    np.multiply(system.base_colors, brightness[:, None], out=system.colors)


def _supernova_periodic(system, elapsed, params):
    progress = supernova_progress(elapsed, params.period)
    if progress < config.SUPERNOVA_RESET_EPSILON:
        # Start of a loop: clear the previous frame explicitly
        system.positions[:] = 0.0
        system.colors[:] = system.base_colors
        system.opacity = 1.0
        return

    np.multiply(system.velocities, progress * config.SUPERNOVA_EXPANSION_SCALE, out=system.positions)
    fade = 1.0 - progress
    np.multiply(system.base_colors, fade, out=system.colors)
    system.opacity = fade


_SUPERNOVA_MODES = {
    SupernovaMode.CONTINUOUS: _supernova_continuous,
    SupernovaMode.PERIODIC: _supernova_periodic,
}


def _supernova(system, elapsed, params):
    _SUPERNOVA_MODES[params.simulation_mode](system, elapsed, params)


def _quasar(system, elapsed, params):
    # Differential rotation: inner particles sweep faster, radii never change
    angles = keplerian_angular_velocity(system.radii) * elapsed
    rotate_about_vertical(system.initial_positions, angles, system.positions)
    system.positions[:, 1] += config.QUASAR_WAVE_AMPLITUDE * np.sin(
        config.QUASAR_WAVE_FREQUENCY * elapsed + config.QUASAR_WAVE_NUMBER * system.radii)


def _collision(system, elapsed, params):
    groups = system.group_ids
    centers = collision_centers(elapsed)
    spin = np.asarray(config.COLLISION_SPIN_DIRECTIONS, dtype=float)
    angles = spin[groups] * config.COLLISION_LOCAL_SPIN * elapsed

    positions = rotate_about_vertical(system.initial_positions, angles, system.positions)
    positions += centers[groups]

    closeness = collision_closeness(collision_separation(elapsed))
    if closeness > 0.0 and len(positions):
        # Tidal drift towards the other population's center
        toward = centers[1 - groups] - positions
        distance = np.linalg.norm(toward, axis=1, keepdims=True)
        positions += toward / (distance + 1e-9) * (config.COLLISION_DRIFT * closeness)


_SYSTEM_LAWS = {
    GalaxyType.SPIRAL: _rigid_rotation,
    GalaxyType.BARRED_SPIRAL: _rigid_rotation,
    GalaxyType.ELLIPTICAL: _rigid_rotation,
    GalaxyType.IRREGULAR: _rigid_rotation,
    GalaxyType.LENTICULAR: _rigid_rotation,
    CosmicEvent.SUPERNOVA: _supernova,
    CosmicEvent.QUASAR: _quasar,
    CosmicEvent.COLLISION: _collision,
}


# ---------------------------------------------------------------------------
# Auxiliary laws
# ---------------------------------------------------------------------------

def _core_glow(aux, elapsed, params):
    aux.scale = glow_pulse(elapsed)
    if params.type is CosmicEvent.SUPERNOVA and params.simulation_mode is SupernovaMode.PERIODIC:
        fade = 1.0 - supernova_progress(elapsed, params.period)
        aux.scale *= fade
        aux.opacity = fade


def _glow_halo(aux, elapsed, params):
    aux.scale = glow_pulse(elapsed)


def _static(aux, elapsed, params):
    pass


def _accretion_disk(aux, elapsed, params):
    aux.rotation = elapsed * config.ACCRETION_DISK_SPIN


def _jet(aux, elapsed, params):
    positions = aux.positions
    positions[:, 1] += aux.direction * config.JET_SPEED

    # Helical sway around the jet axis
    phase = elapsed * config.JET_SWAY_FREQUENCY + positions[:, 1]
    positions[:, 0] += np.sin(phase) * config.JET_SWAY
    positions[:, 2] += np.cos(phase) * config.JET_SWAY

    expired = np.abs(positions[:, 1]) > config.JET_HEIGHT
    count = int(np.count_nonzero(expired))
    if count:
        positions[expired, 0] = (aux.rng.random(count) - 0.5) * config.JET_WIDTH
        positions[expired, 1] = 0.0
        positions[expired, 2] = (aux.rng.random(count) - 0.5) * config.JET_WIDTH


def _collision_population(aux, elapsed, params):
    aux.center = collision_centers(elapsed)[aux.group_id]
    aux.rotation = aux.direction * config.COLLISION_LOCAL_SPIN * elapsed


_AUXILIARY_LAWS = {
    AuxiliaryKind.CORE_GLOW: _core_glow,
    AuxiliaryKind.GLOW_HALO: _glow_halo,
    AuxiliaryKind.BLACK_HOLE: _static,
    AuxiliaryKind.ACCRETION_DISK: _accretion_disk,
    AuxiliaryKind.JET: _jet,
    AuxiliaryKind.COLLISION_POPULATION: _collision_population,
}

for _table, _keys in ((_SYSTEM_LAWS, ALL_TYPES), (_AUXILIARY_LAWS, tuple(AuxiliaryKind)),
                      (_SUPERNOVA_MODES, tuple(SupernovaMode))):
    _missing = set(_keys) - set(_table)
    if _missing:
        raise NotImplementedError(f"No motion law for: {sorted(m.value for m in _missing)}")


def step(system, auxiliaries, elapsed_time, params):
    """
    Advance every buffer to ``elapsed_time``.

    Args:
        system (ParticleSystem): Main particle buffers, mutated in place
        auxiliaries (list): AuxiliaryObjects, mutated in place
        elapsed_time (float): Seconds on the animation clock
        params (GalaxyParams): Configuration the buffers were generated from
    """
    _SYSTEM_LAWS[params.type](system, elapsed_time, params)
    for aux in auxiliaries:
        _AUXILIARY_LAWS[aux.kind](aux, elapsed_time, params)
