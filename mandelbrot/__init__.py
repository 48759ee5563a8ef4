"""Public API for Mandelbrot rendering utilities."""

from .colors import ColorScheme, build_palette, colormap_palette, get_color
from .escape import calculate_mandelbrot, escape_counts
from .renderer import RenderOptions, render, render_image, render_iterations
from .session import Explorer
from .viewport import (
    Viewport,
    complex_to_pixel,
    create_zoom_viewport,
    get_default_viewport,
    pan_viewport,
    pixel_to_complex,
    zoom_at_point,
)

__all__ = [
    "ColorScheme",
    "Explorer",
    "RenderOptions",
    "Viewport",
    "build_palette",
    "calculate_mandelbrot",
    "colormap_palette",
    "complex_to_pixel",
    "create_zoom_viewport",
    "escape_counts",
    "get_color",
    "get_default_viewport",
    "pan_viewport",
    "pixel_to_complex",
    "render",
    "render_image",
    "render_iterations",
    "zoom_at_point",
]
