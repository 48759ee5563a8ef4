"""Headless explorer state driven by viewer gestures."""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import Union

import numpy as np
import PIL.Image

from .colors import ColorScheme
from .renderer import DEFAULT_MAX_ITERATIONS, RenderOptions, render, render_image
from .viewport import Viewport, create_zoom_viewport, get_default_viewport, pan_viewport, zoom_at_point

PAN_STEP = 50
MIN_SELECTION = 10
ZOOM_STEP = 2.0


@dataclass
class Explorer:
    """Hold the current viewport and options and apply gestures to them.

    Every gesture derives the next viewport through the pure viewport
    algebra. ``history`` keeps each previous viewport together with the
    options it was rendered with.
    """

    width: int = 800
    height: int = 600
    viewport: Viewport = field(default_factory=get_default_viewport)
    options: RenderOptions = field(
        default_factory=lambda: RenderOptions(DEFAULT_MAX_ITERATIONS, ColorScheme.FIRE)
    )
    history: tuple[tuple[Viewport, RenderOptions], ...] = ()

    def _push(self, viewport: Viewport) -> Viewport:
        self.history = (*self.history, (self.viewport, self.options))
        self.viewport = viewport
        return viewport

    @property
    def canvas_center(self) -> tuple[float, float]:
        return self.width / 2, self.height / 2

    def zoom_in(self) -> Viewport:
        center_x, center_y = self.canvas_center
        return self._push(zoom_at_point(self.viewport, center_x, center_y, ZOOM_STEP, self.width, self.height))

    def zoom_out(self) -> Viewport:
        center_x, center_y = self.canvas_center
        return self._push(zoom_at_point(self.viewport, center_x, center_y, 1 / ZOOM_STEP, self.width, self.height))

    def pan(self, dx: float, dy: float) -> Viewport:
        return self._push(pan_viewport(self.viewport, dx, dy, self.width, self.height))

    def pan_up(self) -> Viewport:
        return self.pan(0, -PAN_STEP)

    def pan_down(self) -> Viewport:
        return self.pan(0, PAN_STEP)

    def pan_left(self) -> Viewport:
        return self.pan(-PAN_STEP, 0)

    def pan_right(self) -> Viewport:
        return self.pan(PAN_STEP, 0)

    def select_region(self, x1: float, y1: float, x2: float, y2: float) -> bool:
        """Zoom into a dragged rectangle; selections under ``MIN_SELECTION`` pixels are ignored."""

        if abs(x2 - x1) < MIN_SELECTION or abs(y2 - y1) < MIN_SELECTION:
            return False
        self._push(create_zoom_viewport(self.viewport, x1, y1, x2, y2, self.width, self.height))
        return True

    def zoom_at(self, x: float, y: float, zoom_factor: float) -> Viewport:
        return self._push(zoom_at_point(self.viewport, x, y, zoom_factor, self.width, self.height))

    def double_click(self, x: float, y: float) -> Viewport:
        return self.zoom_at(x, y, ZOOM_STEP)

    def wheel(self, x: float, y: float, delta_y: float) -> Viewport:
        zoom_factor = 1 / ZOOM_STEP if delta_y > 0 else ZOOM_STEP
        return self.zoom_at(x, y, zoom_factor)

    def reset(self) -> Viewport:
        """Return to the default view and iteration depth, keeping the color scheme."""

        viewport = self._push(get_default_viewport())
        self.options = replace(self.options, max_iterations=DEFAULT_MAX_ITERATIONS)
        return viewport

    def set_color_scheme(self, scheme: Union[ColorScheme, str]) -> None:
        color_scheme = ColorScheme.parse(scheme)
        if color_scheme is None:
            valid = ", ".join(member.value for member in ColorScheme)
            raise ValueError(f"Unknown color scheme '{scheme}'. Valid choices: {valid}.")
        self.options = replace(self.options, color_scheme=color_scheme)

    def set_max_iterations(self, max_iterations: int) -> None:
        self.options = replace(self.options, max_iterations=int(max_iterations))

    def coordinate_label(self) -> str:
        return self.viewport.describe()

    @property
    def states(self) -> tuple[tuple[Viewport, RenderOptions], ...]:
        """Every ``(viewport, options)`` pair visited so far, ending with the current one."""

        return (*self.history, (self.viewport, self.options))

    @property
    def viewports(self) -> tuple[Viewport, ...]:
        return tuple(viewport for viewport, _ in self.states)

    def render(self) -> np.ndarray:
        return render(self.width, self.height, self.viewport, self.options)

    def render_image(self) -> PIL.Image.Image:
        return render_image(self.width, self.height, self.viewport, self.options)
