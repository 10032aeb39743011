"""Projection, viewport fitting and scaling used when drawing a frame."""

from __future__ import annotations

from dataclasses import dataclass

__all__ = ["Perspective", "Viewport", "perspective", "viewport", "scale_factor"]


@dataclass(frozen=True)
class Perspective:
    """An orthographic projection centred on the origin.

    ``transform`` is a 3x3 matrix stored row by row.
    """

    transform: tuple[float, ...]
    width_pixels: float
    height_pixels: float

    def apply(self, x: float, y: float) -> tuple[float, float]:
        """Project a point given in pixels into normalized device coordinates."""
        m = self.transform
        return (
            m[0] * x + m[1] * y + m[2],
            m[3] * x + m[4] * y + m[5],
        )


@dataclass(frozen=True)
class Viewport:
    """A rectangle inside the window, in window pixels."""

    x: float
    y: float
    width: float
    height: float


def _positive(name: str, value: float) -> float:
    value = float(value)
    if not value > 0:
        raise ValueError(f"{name} must be positive, not {value!r}")
    return value


def perspective(width_pixels: float, height_pixels: float) -> Perspective:
    """Build the projection for a screen of the given size in pixels."""
    width_pixels = _positive("width_pixels", width_pixels)
    height_pixels = _positive("height_pixels", height_pixels)

    right = width_pixels * 0.5
    top = height_pixels * 0.5
    left = -right
    bottom = -top

    transform = (
        2.0 / (right - left), 0.0, -((right + left) / (right - left)),
        0.0, 2.0 / (top - bottom), -((top + bottom) / (top - bottom)),
        0.0, 0.0, 1.0,
    )
    return Perspective(transform, width_pixels, height_pixels)


def viewport(
    window_width: float,
    window_height: float,
    screen_width: float,
    screen_height: float,
) -> Viewport:
    """The largest rectangle with the screen's aspect ratio, centred in the window."""
    window_width = float(window_width)
    window_height = float(window_height)
    target_aspect_ratio = _positive("screen_width", screen_width) / _positive(
        "screen_height", screen_height
    )

    width = window_width
    height = width / target_aspect_ratio
    if height > window_height:
        height = window_height
        width = height * target_aspect_ratio

    x = window_width / 2.0 - width / 2.0
    y = window_height / 2.0 - height / 2.0
    return Viewport(x, y, width, height)


def scale_factor(
    window_width: float,
    window_height: float,
    screen_width: float,
    screen_height: float,
) -> tuple[float, float]:
    """How much the window is scaled against the screen on each axis."""
    return (
        float(window_width) / _positive("screen_width", screen_width),
        float(window_height) / _positive("screen_height", screen_height),
    )