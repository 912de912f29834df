"""
Galaxy parameter definitions for galaxyscope.

This module defines the immutable configuration value handed to the generator
and the kinematics driver, the closed set of galaxy morphologies and cosmic
events, and the preset table used by the CLI.
"""

import dataclasses
from dataclasses import dataclass
from enum import Enum

from .. import config


class GalaxyScopeError(Exception):
    """Base class for galaxyscope errors."""


class ConfigurationError(GalaxyScopeError, ValueError):
    """Raised when a configuration value cannot be used to build a scene."""


class GalaxyType(Enum):
    SPIRAL = 'spiral'
    BARRED_SPIRAL = 'barred-spiral'
    ELLIPTICAL = 'elliptical'
    IRREGULAR = 'irregular'
    LENTICULAR = 'lenticular'


class CosmicEvent(Enum):
    COLLISION = 'collision'
    SUPERNOVA = 'supernova'
    QUASAR = 'quasar'


class SupernovaMode(Enum):
    """Alternative supernova simulations, selectable per configuration."""

    CONTINUOUS = 'continuous'  # integrate velocities, recycle far particles
    PERIODIC = 'periodic'  # stateless loop keyed by elapsed time


ALL_TYPES = tuple(GalaxyType) + tuple(CosmicEvent)


def parse_type(value):
    """
    Resolve a galaxy type or cosmic event from an enum member or a string.

    Accepts enum members, enum values ('barred-spiral') and enum names
    ('BARRED_SPIRAL', case-insensitive, '-' and '_' interchangeable).

    Raises:
        ConfigurationError: If the value names no known type.
    """
    if isinstance(value, (GalaxyType, CosmicEvent)):
        return value
    if isinstance(value, str):
        key = value.strip().lower().replace('_', '-')
        for member in ALL_TYPES:
            if member.value == key:
                return member
    raise ConfigurationError(f"Unknown galaxy type or cosmic event: {value!r}")


def parse_mode(value):
    if isinstance(value, SupernovaMode):
        return value
    try:
        return SupernovaMode(str(value).strip().lower())
    except ValueError:
        raise ConfigurationError(f"Unknown supernova mode: {value!r}") from None


@dataclass(frozen=True)
class GalaxyParams:
    """
    Immutable description of the phenomenon to render.

    Colors are kept as the user supplied them; they are resolved when a scene
    is generated so a malformed color aborts that generation only.
    """

    type: object = GalaxyType.SPIRAL
    stars_count: int = config.DEFAULT_STARS_COUNT
    radius: float = config.DEFAULT_RADIUS
    branches: int = 3
    spin: float = 1.0
    randomness: float = 0.2
    randomness_power: float = 3.0
    inside_color: str = "#ff6030"
    outside_color: str = "#1b3984"
    is_event: bool = None
    simulation_mode: object = None
    period: float = config.SUPERNOVA_PERIOD

    def __post_init__(self):
        galaxy_type = parse_type(self.type)
        object.__setattr__(self, 'type', galaxy_type)

        is_event = isinstance(galaxy_type, CosmicEvent)
        if self.is_event is not None and bool(self.is_event) != is_event:
            raise ConfigurationError(
                f"is_event={self.is_event!r} contradicts type {galaxy_type.value!r}")
        object.__setattr__(self, 'is_event', is_event)
        mode = self.simulation_mode if self.simulation_mode is not None else config.supernova_mode
        object.__setattr__(self, 'simulation_mode', parse_mode(mode))

        try:
            self._validate_numbers()
        except ConfigurationError:
            raise
        except (TypeError, ValueError, OverflowError) as exc:
            raise ConfigurationError(f"Invalid numeric field: {exc}") from exc

    def _validate_numbers(self):
        if isinstance(self.stars_count, bool) or int(self.stars_count) != self.stars_count:
            raise ConfigurationError(f"stars_count must be an integer, got {self.stars_count!r}")
        if self.stars_count < 0:
            raise ConfigurationError(f"stars_count must be >= 0, got {self.stars_count}")
        object.__setattr__(self, 'stars_count', int(self.stars_count))

        if isinstance(self.branches, bool) or int(self.branches) != self.branches or self.branches < 1:
            raise ConfigurationError(f"branches must be an integer >= 1, got {self.branches!r}")
        object.__setattr__(self, 'branches', int(self.branches))

        if not self.radius >= 0:
            raise ConfigurationError(f"radius must be >= 0, got {self.radius!r}")
        if not self.randomness_power > 0:
            raise ConfigurationError(f"randomness_power must be > 0, got {self.randomness_power!r}")
        if not self.period > 0:
            raise ConfigurationError(f"period must be > 0, got {self.period!r}")

    def replace(self, **changes):
        """Return a copy with the given fields changed."""
        if 'type' in changes and 'is_event' not in changes:
            # Derived from the new type
            changes['is_event'] = None
        return dataclasses.replace(self, **changes)


# Presets shown by the CLI, one per selectable type
GALAXY_CONFIGS = {
    GalaxyType.SPIRAL: GalaxyParams(
        type=GalaxyType.SPIRAL, stars_count=50000, radius=5.0, branches=3, spin=1.0,
        randomness=0.2, randomness_power=3.0,
        inside_color="#ff6030", outside_color="#1b3984"),
    GalaxyType.BARRED_SPIRAL: GalaxyParams(
        type=GalaxyType.BARRED_SPIRAL, stars_count=60000, radius=6.0, branches=2, spin=1.5,
        randomness=0.25, randomness_power=3.0,
        inside_color="#ffd166", outside_color="#3a0ca3"),
    GalaxyType.ELLIPTICAL: GalaxyParams(
        type=GalaxyType.ELLIPTICAL, stars_count=40000, radius=5.0, branches=1, spin=0.0,
        randomness=0.5, randomness_power=2.0,
        inside_color="#ffe5b4", outside_color="#b5651d"),
    GalaxyType.IRREGULAR: GalaxyParams(
        type=GalaxyType.IRREGULAR, stars_count=30000, radius=4.0, branches=5, spin=0.3,
        randomness=0.9, randomness_power=1.5,
        inside_color="#caf0f8", outside_color="#7209b7"),
    GalaxyType.LENTICULAR: GalaxyParams(
        type=GalaxyType.LENTICULAR, stars_count=45000, radius=5.0, branches=1, spin=0.0,
        randomness=0.1, randomness_power=3.0,
        inside_color="#fff1c1", outside_color="#6c757d"),
    CosmicEvent.COLLISION: GalaxyParams(
        type=CosmicEvent.COLLISION, stars_count=60000, radius=4.0, branches=2, spin=1.2,
        randomness=0.2, randomness_power=3.0,
        inside_color="#4cc9f0", outside_color="#f72585"),
    CosmicEvent.SUPERNOVA: GalaxyParams(
        type=CosmicEvent.SUPERNOVA, stars_count=25000, radius=5.0, branches=1, spin=0.0,
        randomness=0.2, randomness_power=3.0,
        inside_color="#ffffff", outside_color="#ff4d00"),
    CosmicEvent.QUASAR: GalaxyParams(
        type=CosmicEvent.QUASAR, stars_count=40000, radius=5.0, branches=1, spin=0.0,
        randomness=0.2, randomness_power=3.0,
        inside_color="#ffffff", outside_color="#00f2ff"),
}


def preset(galaxy_type, **overrides):
    """
    Look up the preset configuration for a type.

    Args:
        galaxy_type: Enum member or name accepted by ``parse_type``
        **overrides: Fields to change on the preset

    Returns:
        GalaxyParams: The preset, edited by ``overrides``
    """
    params = GALAXY_CONFIGS[parse_type(galaxy_type)]
    return params.replace(**overrides) if overrides else params
