"""
Configuration module for galaxyscope.

This module contains global constants, default parameters, and configuration
settings used throughout the galaxy generator, the kinematics driver and the
render surface.
"""

# Global configuration variables
supernova_mode = 'periodic'  # Default supernova simulation mode ('periodic' or 'continuous')
random_seed = None  # Seed for the generator; None draws fresh entropy

# Particle defaults
DEFAULT_STARS_COUNT = 50000
MAX_STARS_COUNT = 200000  # Upper bound accepted from the CLI
DEFAULT_RADIUS = 5.0

# Spiral sampling
RADIAL_EXPONENT = 1.5  # r = R * u**RADIAL_EXPONENT
VERTICAL_FLATTENING = 0.3  # vertical jitter relative to planar jitter

# Elliptical sampling (oblate axis factors)
ELLIPTICAL_Y_FACTOR = 0.7
ELLIPTICAL_Z_FACTOR = 0.85

# Lenticular sampling
LENTICULAR_BULGE_FRACTION = 0.4  # share of particles in the central bulge
LENTICULAR_BULGE_RADIUS = 0.35  # bulge radius relative to R
LENTICULAR_BULGE_EXPONENT = 2.0  # concentration exponent of the bulge
LENTICULAR_DISK_THICKNESS = 0.05  # vertical scatter of the disk relative to R

# Rigid rotation rates (rad/s)
ROTATION_RATE_DEFAULT = 0.05
ROTATION_RATE_SLOW = 0.02  # elliptical / lenticular

# Supernova
SUPERNOVA_ORIGIN_JITTER = 0.05
SUPERNOVA_BASE_SPEED = 4.0
SUPERNOVA_SPEED_SCALE = 6.0
SUPERNOVA_SPEED_EXPONENT = 3.0  # u**k, k > 1 gives a heavy tail towards fast ejecta
SUPERNOVA_SHOCK_FRACTION = 0.1  # share of particles in the fast shock front
SUPERNOVA_SHOCK_BOOST = 1.5
SUPERNOVA_HUE_RANGE = (0.05, 0.15)  # warm orange/yellow hues (HLS)
SUPERNOVA_LIGHTNESS = 0.6
SUPERNOVA_PERIOD = 10.0  # seconds per loop in periodic mode
SUPERNOVA_EXPANSION_SCALE = 1.0  # positions = velocity * progress * scale
SUPERNOVA_RESET_EPSILON = 1e-3  # progress below this zeroes the buffers
SUPERNOVA_NOMINAL_DT = 0.04  # fixed substep of the continuous mode
SUPERNOVA_FADE_RADIUS = 18.0
SUPERNOVA_HEAT_EXPONENT = 1.5
SUPERNOVA_MIN_BRIGHTNESS = 0.15  # colors never fade below this share of the base
SUPERNOVA_RECYCLE_DISTANCE = 25.0
CORE_GLOW_POINTS = 400
CORE_GLOW_RADIUS = 0.4
CORE_GLOW_COLOR = "#fff4d6"

# Quasar
QUASAR_INNER_RADIUS = 0.15
QUASAR_RADIAL_EXPONENT = 2.0  # u**k with k > 1 concentrates the disk towards the center
QUASAR_TURBULENCE = 0.02  # vertical scatter numerator (scatter = T / (r + eps))
QUASAR_EPSILON = 0.1
QUASAR_KEPLER_CONSTANT = 1.5  # omega(r) = K / (r + eps)
QUASAR_WAVE_AMPLITUDE = 0.02
QUASAR_WAVE_FREQUENCY = 2.0
QUASAR_WAVE_NUMBER = 3.0
BLACK_HOLE_RADIUS = 0.12
BLACK_HOLE_POINTS = 300
GLOW_HALO_POINTS = 1200
GLOW_HALO_RADIUS = 0.6
GLOW_HALO_COLOR = "#9be7ff"
ACCRETION_DISK_POINTS = 15000
ACCRETION_DISK_RADIUS = 1.8
ACCRETION_DISK_INNER = "#ffffff"
ACCRETION_DISK_OUTER = "#00f2ff"
ACCRETION_DISK_SPIN = 8.0  # rad/s, separate fast visual layer
JET_POINTS = 4000
JET_HEIGHT = 12.0
JET_WIDTH = 0.15
JET_SPEED = 0.15  # units per frame
JET_SWAY = 0.02  # helical sway per frame
JET_SWAY_FREQUENCY = 5.0
JET_COLOR = "#00f2ff"

# Glow pulsing
GLOW_PULSE_FREQUENCY = 2.0
GLOW_PULSE_AMPLITUDE = 0.15

# Collision
COLLISION_SEPARATION = 8.0  # D0, distance between the two centers at t = 0
COLLISION_FREQUENCY = 0.1  # omega of D(t) = D0 cos(omega t)
COLLISION_LOCAL_SPIN = 0.1  # rad/s about each population's own center
COLLISION_SPIN_DIRECTIONS = (1, -1)
COLLISION_PROXIMITY = 3.0  # |D| below this triggers the tidal drift
COLLISION_DRIFT = 0.5  # drift magnitude at full closeness
COLLISION_DISK_THICKNESS = 0.4
COLLISION_TIDAL_STRETCH = 2.0
COLLISION_PALETTES = (
    ("#4cc9f0", "#4361ee"),
    ("#f72585", "#b5179e"),
)

# Animation parameters
ANIMATION_INTERVAL = 16  # milliseconds between frames (~60 FPS)
FRAME_CACHE = False

# Render surface
WINDOW_TITLE = "galaxyscope"
VIEWPORT_WIDTH = 1280
VIEWPORT_HEIGHT = 720
DPI = 100
MAX_PIXEL_RATIO = 2.0
BACKGROUND_COLOR = "#020617"
POINT_SIZE = 0.5
AUX_POINT_SIZE = 1.5
VIEW_LIMIT = 12.0
VIEW_ELEVATION = 30.0
VIEW_AZIMUTH = 35.0


def initialize_global_state():
    """Reset global state variables that the CLI may override."""
    global supernova_mode, random_seed
    supernova_mode = 'periodic'
    random_seed = None
