"""Color schemes that turn escape counts into RGB triples."""

from __future__ import annotations

import math
from enum import Enum
from typing import Optional, Union

import numpy as np
from matplotlib import colormaps as _mpl_colormaps

RGB = tuple[int, int, int]

BLACK: RGB = (0, 0, 0)


class ColorScheme(str, Enum):
    """The closed set of built-in color schemes."""

    GRAYSCALE = "grayscale"
    RAINBOW = "rainbow"
    FIRE = "fire"

    @classmethod
    def parse(cls, value: Union[str, "ColorScheme", None]) -> Optional["ColorScheme"]:
        """Return the matching scheme, or ``None`` when ``value`` names none."""

        if isinstance(value, cls):
            return value
        try:
            return cls(value)
        except ValueError:
            return None


def _clamp(value: float) -> int:
    return max(0, min(255, value))


def _grayscale(t: float) -> RGB:
    gray = math.floor(255 * (1 - t))
    return gray, gray, gray


def _rainbow(t: float) -> RGB:
    # Three hue cycles across the iteration range; negative lobes clip to 0.
    return (
        _clamp(math.floor(255 * math.sin(math.pi * t * 3))),
        _clamp(math.floor(255 * math.sin(math.pi * t * 3 + (2 * math.pi) / 3))),
        _clamp(math.floor(255 * math.sin(math.pi * t * 3 + (4 * math.pi) / 3))),
    )


def _fire(t: float) -> RGB:
    # black -> red -> yellow -> white
    ramp = t * 4

    if ramp <= 1:
        r, g, b = math.floor(255 * ramp), 0, 0
    elif ramp <= 2:
        r, g, b = 255, math.floor(255 * (ramp - 1)), 0
    elif ramp <= 3:
        r, g, b = 255, 255, math.floor(255 * (ramp - 2))
    else:
        r, g, b = 255, 255, math.floor(255 * min(1, 4 - ramp))

    return _clamp(r), _clamp(g), _clamp(b)


_SCHEMES = {
    ColorScheme.GRAYSCALE: _grayscale,
    ColorScheme.RAINBOW: _rainbow,
    ColorScheme.FIRE: _fire,
}


def get_color(
    iteration: int,
    max_iterations: int,
    scheme: Union[ColorScheme, str] = ColorScheme.GRAYSCALE,
) -> RGB:
    """Map an escape count to an ``(r, g, b)`` triple with channels in ``[0, 255]``.

    Points that reached ``max_iterations`` are inside the set and always
    render black. Unknown schemes also render black.
    """

    if iteration == max_iterations:
        return BLACK

    color_scheme = ColorScheme.parse(scheme)
    if color_scheme is None:
        return BLACK

    t = iteration / max_iterations
    return _SCHEMES[color_scheme](t)


def _palette_size(max_iterations: int) -> int:
    return max(int(max_iterations), 0) + 1


def build_palette(max_iterations: int, scheme: Union[ColorScheme, str]) -> np.ndarray:
    """Return a ``(max_iterations + 1, 3)`` lookup table of :func:`get_color` values."""

    size = _palette_size(max_iterations)
    palette = np.zeros((size, 3), dtype=np.uint8)
    for iteration in range(size):
        palette[iteration] = get_color(iteration, max_iterations, scheme)
    return palette


def get_colormap(name: str):
    """Look up a matplotlib colormap by name, raising ``ValueError`` for unknown names."""

    try:
        return _mpl_colormaps[name]
    except KeyError as exc:
        raise ValueError(f"Unknown matplotlib colormap '{name}'.") from exc


def colormap_palette(max_iterations: int, name: str) -> np.ndarray:
    """Return a lookup table like :func:`build_palette` sampled from a matplotlib colormap.

    Escaping counts sample the colormap at ``iteration / max_iterations``;
    the final row, used for points inside the set, is black.
    """

    cmap = get_colormap(name)
    size = _palette_size(max_iterations)
    if size == 1:
        return np.zeros((1, 3), dtype=np.uint8)

    t = np.arange(size, dtype=np.float64) / np.float64(max_iterations)
    rgba = np.array(cmap(t), copy=True)
    palette = np.uint8(np.clip(np.floor(rgba[:, :3] * 255), 0, 255))
    palette[-1] = BLACK
    return palette
