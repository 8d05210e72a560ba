"""
Color helpers for particle and decoration rendering.

Colors are specified in HSB with the ranges used by the drawing code:
hue 0-360, saturation/brightness/alpha 0-100. Output is (r, g, b, a) in 0-255.
"""

from __future__ import annotations

import colorsys


PARTICLE_SATURATION = 80.0
PARTICLE_BRIGHTNESS = 100.0
PARTICLE_ALPHA = 80.0

POLYGON_SATURATION = 90.0
POLYGON_BRIGHTNESS = 100.0

LABEL_SATURATION = 80.0
LABEL_BRIGHTNESS = 100.0
LABEL_ALPHA = 80.0


def hsb_to_rgba(
    hue: float,
    saturation: float = 100.0,
    brightness: float = 100.0,
    alpha: float = 100.0,
) -> tuple[int, int, int, int]:
    """
    Convert an HSB(A) color to 8-bit RGBA.

    Args:
        hue: Hue in degrees; wrapped into [0, 360)
        saturation: 0-100
        brightness: 0-100
        alpha: 0-100

    Returns:
        (r, g, b, a) tuple with values 0-255
    """
    h = (float(hue) % 360.0) / 360.0
    s = max(0.0, min(100.0, float(saturation))) / 100.0
    v = max(0.0, min(100.0, float(brightness))) / 100.0
    a = max(0.0, min(100.0, float(alpha))) / 100.0
    r, g, b = colorsys.hsv_to_rgb(h, s, v)
    return (
        int(round(r * 255)),
        int(round(g * 255)),
        int(round(b * 255)),
        int(round(a * 255)),
    )


def particle_color(hue: float) -> tuple[int, int, int, int]:
    return hsb_to_rgba(hue, PARTICLE_SATURATION, PARTICLE_BRIGHTNESS, PARTICLE_ALPHA)


def polygon_color(hue: float) -> tuple[int, int, int, int]:
    return hsb_to_rgba(hue, POLYGON_SATURATION, POLYGON_BRIGHTNESS, 100.0)


def label_color(hue: float) -> tuple[int, int, int, int]:
    return hsb_to_rgba(hue, LABEL_SATURATION, LABEL_BRIGHTNESS, LABEL_ALPHA)


def background_rgb(hue: float, saturation: float, brightness: float) -> tuple[int, int, int]:
    r, g, b, _ = hsb_to_rgba(hue, saturation, brightness, 100.0)
    return r, g, b


def trail_fade_rgba(rgb: tuple[int, int, int], alpha: float) -> tuple[int, int, int, int]:
    """Background color for the per-frame fade quad; alpha is 0-100."""
    a = max(0.0, min(100.0, float(alpha))) / 100.0
    r, g, b = (max(0, min(255, int(c))) for c in rgb)
    return r, g, b, int(round(a * 255))
