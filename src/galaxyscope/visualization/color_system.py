"""
Color system module for galaxyscope.

Resolves user supplied colors, blends endpoint colors by radius and derives the
heat and hue ramps used by the cosmic events. All ramps are vectorized over
particle arrays and keep every channel within [0, 1].
"""

import numpy as np
from matplotlib.colors import to_rgb

from ..core.galaxy_params import ConfigurationError


def parse_color(color):
    """
    Resolve a color value to an RGB array.

    Args:
        color: Hex string, matplotlib color name or RGB tuple in [0, 1]

    Returns:
        np.ndarray: RGB values, shape (3,)

    Raises:
        ConfigurationError: If the color cannot be interpreted
    """
    try:
        return np.array(to_rgb(color), dtype=float)
    except (ValueError, TypeError) as exc:
        raise ConfigurationError(f"Malformed color {color!r}: {exc}") from exc


def radial_fraction(radii, radius):
    """
    Normalized radial position clamp(r / R, 0, 1).

    A collapsed configuration (R == 0) maps every particle to the inside color.
    """
    radii = np.asarray(radii, dtype=float)
    if radius <= 0:
        return np.zeros_like(radii)
    return np.clip(radii / radius, 0.0, 1.0)


def lerp_colors(inside_rgb, outside_rgb, fractions, out=None):
    """
    Blend two endpoint colors per particle.

    Args:
        inside_rgb (np.ndarray): Color at fraction 0, shape (3,)
        outside_rgb (np.ndarray): Color at fraction 1, shape (3,)
        fractions (np.ndarray): Blend factors in [0, 1], shape (N,)
        out (np.ndarray, optional): Destination buffer, shape (N, 3)

    Returns:
        np.ndarray: Blended colors, shape (N, 3)
    """
    fractions = np.asarray(fractions, dtype=float)[:, None]
    blended = inside_rgb + (outside_rgb - inside_rgb) * fractions
    if out is None:
        return blended
    out[:] = blended
    return out


def heat_falloff(distances, fade_radius, exponent):
    """Radial heat pow(max(0, 1 - d / fade_radius), exponent)."""
    heat = np.maximum(0.0, 1.0 - np.asarray(distances, dtype=float) / fade_radius)
    return heat ** exponent


def hsl_colors(hues, saturation, lightness):
    """
    Convert per-particle hues to RGB at a fixed saturation and lightness.

    Args:
        hues (np.ndarray): Hue values in [0, 1], shape (N,)
        saturation (float): HLS saturation
        lightness (float): HLS lightness

    Returns:
        np.ndarray: RGB colors, shape (N, 3)
    """
    hues = np.asarray(hues, dtype=float)
    # Vectorized HLS -> RGB, same formula as colorsys.hls_to_rgb
    if lightness <= 0.5:
        m2 = lightness * (1.0 + saturation)
    else:
        m2 = lightness + saturation - lightness * saturation
    m1 = 2.0 * lightness - m2

    def channel(h):
        h = h % 1.0
        return np.select(
            [h < 1.0 / 6.0, h < 0.5, h < 2.0 / 3.0],
            [m1 + (m2 - m1) * h * 6.0, np.full_like(h, m2), m1 + (m2 - m1) * (2.0 / 3.0 - h) * 6.0],
            default=m1,
        )

    rgb = np.column_stack((channel(hues + 1.0 / 3.0), channel(hues), channel(hues - 1.0 / 3.0)))
    return np.clip(rgb, 0.0, 1.0)
