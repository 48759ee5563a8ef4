"""Viewport value type, pixel/complex coordinate mapping and viewport algebra.

All functions are pure: they return new :class:`Viewport` instances and
never mutate their input. Canvas dimensions must be positive and the
viewport must have non-zero extents; ``zoom_factor`` must be positive.
These preconditions are not checked.
"""

from __future__ import annotations

import math
from dataclasses import dataclass


@dataclass(frozen=True)
class Viewport:
    """Axis-aligned rectangle of the complex plane mapped onto the canvas."""

    x_min: float
    x_max: float
    y_min: float
    y_max: float

    @property
    def width(self) -> float:
        return self.x_max - self.x_min

    @property
    def height(self) -> float:
        return self.y_max - self.y_min

    @property
    def center(self) -> tuple[float, float]:
        return (self.x_min + self.x_max) / 2, (self.y_min + self.y_max) / 2

    def describe(self) -> str:
        """Human readable bounds, as shown in the coordinate read-out."""

        return f"Re: {self.x_min:.6f} to {self.x_max:.6f} | Im: {self.y_min:.6f} to {self.y_max:.6f}"


DEFAULT_VIEWPORT = Viewport(x_min=-2.5, x_max=1.0, y_min=-1.5, y_max=1.5)


def get_default_viewport() -> Viewport:
    """Return the initial view framing the whole main body of the set."""

    return DEFAULT_VIEWPORT


def pixel_to_complex(px: float, py: float, width: int, height: int, viewport: Viewport) -> tuple[float, float]:
    """Map a pixel position to ``(real, imaginary)``; positions off the canvas extrapolate."""

    scale_x = (viewport.x_max - viewport.x_min) / width
    scale_y = (viewport.y_max - viewport.y_min) / height
    return viewport.x_min + px * scale_x, viewport.y_min + py * scale_y


def _round_half_up(value: float) -> int:
    # halves round towards +infinity; values just below a half round down
    whole = math.floor(value)
    return whole + 1 if value - whole >= 0.5 else whole


def complex_to_pixel(real: float, imaginary: float, width: int, height: int, viewport: Viewport) -> tuple[int, int]:
    """Inverse of :func:`pixel_to_complex`, rounded to the nearest pixel."""

    scale_x = width / (viewport.x_max - viewport.x_min)
    scale_y = height / (viewport.y_max - viewport.y_min)
    return (
        _round_half_up((real - viewport.x_min) * scale_x),
        _round_half_up((imaginary - viewport.y_min) * scale_y),
    )


def create_zoom_viewport(
    current: Viewport,
    x1: float,
    y1: float,
    x2: float,
    y2: float,
    width: int,
    height: int,
) -> Viewport:
    """Zoom into the pixel rectangle spanned by two corners given in any order."""

    left = min(x1, x2)
    right = max(x1, x2)
    top = min(y1, y2)
    bottom = max(y1, y2)

    top_left = pixel_to_complex(left, top, width, height, current)
    bottom_right = pixel_to_complex(right, bottom, width, height, current)

    return Viewport(
        x_min=top_left[0],
        x_max=bottom_right[0],
        y_min=top_left[1],
        y_max=bottom_right[1],
    )


def pan_viewport(current: Viewport, dx: float, dy: float, width: int, height: int) -> Viewport:
    """Shift the viewport by a pixel delta.

    The delta is subtracted: a positive ``dx`` moves both ``x_min`` and
    ``x_max`` towards negative reals, revealing content on the left.
    """

    delta_real = dx * ((current.x_max - current.x_min) / width)
    delta_imaginary = dy * ((current.y_max - current.y_min) / height)

    return Viewport(
        x_min=current.x_min - delta_real,
        x_max=current.x_max - delta_real,
        y_min=current.y_min - delta_imaginary,
        y_max=current.y_max - delta_imaginary,
    )


def zoom_at_point(
    current: Viewport,
    center_x: float,
    center_y: float,
    zoom_factor: float,
    width: int,
    height: int,
) -> Viewport:
    """Center the view on a pixel and divide its extents by ``zoom_factor``.

    ``zoom_factor > 1`` zooms in, ``0 < zoom_factor < 1`` zooms out.
    """

    real, imaginary = pixel_to_complex(center_x, center_y, width, height, current)
    new_width = current.width / zoom_factor
    new_height = current.height / zoom_factor

    return Viewport(
        x_min=real - new_width / 2,
        x_max=real + new_width / 2,
        y_min=imaginary - new_height / 2,
        y_max=imaginary + new_height / 2,
    )
