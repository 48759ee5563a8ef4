"""Rendering primitives for Mandelbrot frames."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Union

import numpy as np
import PIL.Image

from .colors import ColorScheme, build_palette, colormap_palette
from .escape import escape_counts
from .viewport import Viewport

DEFAULT_MAX_ITERATIONS = 100
OPAQUE = 255


@dataclass(frozen=True)
class RenderOptions:
    """Parameters that describe how a frame is computed and colored."""

    max_iterations: int = DEFAULT_MAX_ITERATIONS
    color_scheme: Union[ColorScheme, str] = ColorScheme.GRAYSCALE
    colormap: Optional[str] = None

    def __post_init__(self) -> None:
        scheme = ColorScheme.parse(self.color_scheme)
        if scheme is not None:
            object.__setattr__(self, "color_scheme", scheme)

    def palette(self) -> np.ndarray:
        if self.colormap is not None:
            return colormap_palette(self.max_iterations, self.colormap)
        return build_palette(self.max_iterations, self.color_scheme)


def _sample_axes(width: int, height: int, viewport: Viewport) -> tuple[np.ndarray, np.ndarray]:
    scale_x = (viewport.x_max - viewport.x_min) / width
    scale_y = (viewport.y_max - viewport.y_min) / height

    real = viewport.x_min + np.arange(width, dtype=np.float64) * np.float64(scale_x)
    imag = viewport.y_min + np.arange(height, dtype=np.float64) * np.float64(scale_y)
    return real, imag


def render_iterations(width: int, height: int, viewport: Viewport, max_iterations: int) -> np.ndarray:
    """Return the ``(height, width)`` grid of escape counts for a viewport."""

    real, imag = _sample_axes(width, height, viewport)
    return escape_counts(real[np.newaxis, :], imag[:, np.newaxis], max_iterations)


def render(width: int, height: int, viewport: Viewport, options: RenderOptions) -> np.ndarray:
    """Render a frame into a flat RGBA byte buffer of length ``width * height * 4``.

    Pixel ``(px, py)`` occupies bytes ``(py * width + px) * 4`` onwards, with
    the origin at the top-left and alpha always fully opaque.
    """

    iterations = render_iterations(width, height, viewport, options.max_iterations)
    palette = options.palette()

    rgba = np.empty((height, width, 4), dtype=np.uint8)
    rgba[..., :3] = palette[iterations]
    rgba[..., 3] = OPAQUE
    return rgba.reshape(-1)


def render_image(width: int, height: int, viewport: Viewport, options: RenderOptions) -> PIL.Image.Image:
    """Render a frame as an ``RGBA`` Pillow image."""

    buffer = render(width, height, viewport, options)
    return PIL.Image.fromarray(buffer.reshape(height, width, 4))
