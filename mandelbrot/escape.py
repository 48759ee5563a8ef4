"""Escape-time evaluation of the Mandelbrot recurrence."""

from __future__ import annotations

import numpy as np

HORIZON_SQUARED = 4


def calculate_mandelbrot(cx: float, cy: float, max_iterations: int = 100) -> int:
    """Return the number of iterations before ``c = cx + i*cy`` escapes.

    Points that have not escaped after ``max_iterations`` steps report
    ``max_iterations``, which callers treat as "inside the set".
    """

    x = 0.0
    y = 0.0
    iteration = 0

    # Squared magnitude avoids the square root.
    while x * x + y * y <= HORIZON_SQUARED and iteration < max_iterations:
        x_temp = x * x - y * y + cx
        y = 2 * x * y + cy
        x = x_temp
        iteration += 1

    return iteration


def _escape_step(
    xs: np.ndarray,
    ys: np.ndarray,
    cx: np.ndarray,
    cy: np.ndarray,
    ns: np.ndarray,
    active: np.ndarray,
) -> tuple[np.ndarray, np.ndarray, np.ndarray]:
    """Perform a single iteration for points that have not diverged."""

    xs_new = xs * xs - ys * ys + cx
    ys_new = 2 * xs * ys + cy
    xs = np.where(active, xs_new, xs)
    ys = np.where(active, ys_new, ys)
    ns = ns + active.astype(np.int32)
    return xs, ys, ns


def escape_counts(real: np.ndarray, imag: np.ndarray, max_iterations: int) -> np.ndarray:
    """Vectorised :func:`calculate_mandelbrot` over arrays of points.

    ``real`` and ``imag`` must broadcast to a common shape. Each element goes
    through exactly the same double precision operations as the scalar
    evaluator, so the counts agree with it bit for bit.
    """

    cx, cy = np.broadcast_arrays(np.asarray(real, dtype=np.float64), np.asarray(imag, dtype=np.float64))
    xs = np.zeros(cx.shape, dtype=np.float64)
    ys = np.zeros(cx.shape, dtype=np.float64)
    ns = np.zeros(cx.shape, dtype=np.int32)

    # Frozen points never feed back, so overflow in their discarded updates is harmless.
    with np.errstate(over="ignore", invalid="ignore"):
        for _ in range(max(int(max_iterations), 0)):
            active = xs * xs + ys * ys <= HORIZON_SQUARED
            if not active.any():
                break
            xs, ys, ns = _escape_step(xs, ys, cx, cy, ns, active)

    return ns
