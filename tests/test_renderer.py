import numpy as np
import PIL.Image
import pytest

from mandelbrot import (
    ColorScheme,
    RenderOptions,
    Viewport,
    calculate_mandelbrot,
    get_color,
    get_default_viewport,
    pixel_to_complex,
    render,
    render_image,
    render_iterations,
)


@pytest.mark.parametrize("width, height", [(1, 1), (7, 3), (32, 24)])
def test_buffer_size_and_alpha(width, height):
    buffer = render(width, height, get_default_viewport(), RenderOptions(30, ColorScheme.FIRE))

    assert buffer.dtype == np.uint8
    assert buffer.shape == (width * height * 4,)
    assert np.all(buffer[3::4] == 255)


def test_center_of_default_view_is_black():
    width = height = 100
    options = RenderOptions(max_iterations=100, color_scheme=ColorScheme.GRAYSCALE)
    buffer = render(width, height, get_default_viewport(), options)

    real, imaginary = pixel_to_complex(50, 50, width, height, get_default_viewport())
    assert (real, imaginary) == pytest.approx((-0.75, 0.0))

    offset = (50 * width + 50) * 4
    assert buffer[offset:offset + 4].tolist() == [0, 0, 0, 255]


def test_top_left_corner_of_default_view_escapes_immediately():
    buffer = render(100, 100, get_default_viewport(), RenderOptions(100, "grayscale"))
    # -2.5 - 1.5i escapes on the first iteration
    assert buffer[:4].tolist() == [252, 252, 252, 255]


@pytest.mark.parametrize("scheme", list(ColorScheme))
def test_every_pixel_matches_scalar_pipeline(scheme):
    width, height = 23, 17
    viewport = Viewport(-2.0, 0.7, -1.1, 1.2)
    options = RenderOptions(max_iterations=25, color_scheme=scheme)
    buffer = render(width, height, viewport, options)

    for py in range(height):
        for px in range(width):
            real, imaginary = pixel_to_complex(px, py, width, height, viewport)
            iteration = calculate_mandelbrot(real, imaginary, options.max_iterations)
            offset = (py * width + px) * 4
            expected = [*get_color(iteration, options.max_iterations, scheme), 255]
            assert buffer[offset:offset + 4].tolist() == expected


def test_render_is_deterministic():
    options = RenderOptions(40, ColorScheme.RAINBOW)
    first = render(40, 30, get_default_viewport(), options)
    second = render(40, 30, get_default_viewport(), options)
    assert np.array_equal(first, second)


def test_unknown_scheme_renders_black_frame():
    buffer = render(8, 8, get_default_viewport(), RenderOptions(20, "plasma"))
    pixels = buffer.reshape(-1, 4)
    assert np.all(pixels[:, :3] == 0)
    assert np.all(pixels[:, 3] == 255)


def test_zero_iterations_renders_black_frame():
    buffer = render(4, 4, get_default_viewport(), RenderOptions(0, ColorScheme.GRAYSCALE))
    assert np.all(buffer.reshape(-1, 4)[:, :3] == 0)


def test_options_coerce_scheme_names():
    assert RenderOptions(10, "fire").color_scheme is ColorScheme.FIRE
    assert RenderOptions(10, "plasma").color_scheme == "plasma"


def test_colormap_overrides_scheme():
    options = RenderOptions(30, ColorScheme.GRAYSCALE, colormap="viridis")
    buffer = render(20, 20, get_default_viewport(), options)
    grayscale = render(20, 20, get_default_viewport(), RenderOptions(30, ColorScheme.GRAYSCALE))

    assert not np.array_equal(buffer, grayscale)
    iterations = render_iterations(20, 20, get_default_viewport(), 30)
    inside = buffer.reshape(20, 20, 4)[iterations == 30]
    assert np.all(inside[:, :3] == 0)


def test_render_iterations_grid_shape_and_orientation():
    viewport = get_default_viewport()
    grid = render_iterations(12, 9, viewport, 50)

    assert grid.shape == (9, 12)
    real, imaginary = pixel_to_complex(11, 0, 12, 9, viewport)
    assert grid[0, 11] == calculate_mandelbrot(real, imaginary, 50)


def test_render_image_wraps_buffer():
    options = RenderOptions(20, ColorScheme.FIRE)
    image = render_image(16, 10, get_default_viewport(), options)

    assert isinstance(image, PIL.Image.Image)
    assert image.mode == "RGBA"
    assert image.size == (16, 10)
    assert np.array_equal(np.asarray(image).reshape(-1), render(16, 10, get_default_viewport(), options))
