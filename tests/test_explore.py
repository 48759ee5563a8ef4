import numpy as np
import PIL.Image
import pytest

import explore
from mandelbrot import ColorScheme, Explorer, RenderOptions, Viewport, get_default_viewport, render


def _run(tmp_path, *args):
    explore.main(["--width", "40", "--height", "30", *args])


def test_default_image(tmp_path, capsys):
    output = tmp_path / "out.png"
    _run(tmp_path, "--output", str(output))

    image = PIL.Image.open(output)
    assert image.size == (40, 30)
    assert image.mode == "RGBA"
    expected = render(40, 30, get_default_viewport(), RenderOptions(100, ColorScheme.FIRE))
    assert np.array_equal(np.asarray(image).reshape(-1), expected)
    assert "Re: -2.500000 to 1.000000" in capsys.readouterr().out


def test_output_suffix_is_added(tmp_path):
    _run(tmp_path, "--output", str(tmp_path / "frame"))
    assert (tmp_path / "frame.png").is_file()


def test_gestures_apply_in_order(tmp_path, capsys):
    _run(tmp_path, "--zoom-in", "--pan", "right", "--select", "5", "5", "35", "25",
         "--output", str(tmp_path / "out.png"))

    explorer = Explorer(width=40, height=30)
    explorer.zoom_in()
    explorer.pan_right()
    explorer.select_region(5, 5, 35, 25)
    assert explorer.coordinate_label() in capsys.readouterr().out


def test_small_selection_is_ignored(tmp_path, capsys):
    _run(tmp_path, "--select", "5", "5", "9", "25", "--output", str(tmp_path / "out.png"))
    assert get_default_viewport().describe() in capsys.readouterr().out


def test_reset_gesture(tmp_path, capsys):
    _run(tmp_path, "--zoom-at", "10", "10", "4", "--wheel", "3", "3", "-1", "--reset",
         "--output", str(tmp_path / "out.png"))
    assert get_default_viewport().describe() in capsys.readouterr().out


def test_gif_has_one_frame_per_viewport(tmp_path):
    output = tmp_path / "zoom.gif"
    _run(tmp_path, "--mode", "gif", "--zoom-in", "--double-click", "5", "5", "--output", str(output))

    gif = PIL.Image.open(output)
    assert gif.n_frames >= 2


def test_both_modes_write_into_directory(tmp_path):
    _run(tmp_path, "--mode", "gif", "--mode", "image", "--zoom-out", "--output", str(tmp_path))
    assert (tmp_path / "explore.gif").is_file()
    assert (tmp_path / "mandelbrot.png").is_file()


def test_show_coordinates_changes_pixels(tmp_path):
    plain = tmp_path / "plain.png"
    annotated = tmp_path / "annotated.png"
    _run(tmp_path, "--output", str(plain))
    _run(tmp_path, "--show-coordinates", "--output", str(annotated))

    assert not np.array_equal(np.asarray(PIL.Image.open(plain)), np.asarray(PIL.Image.open(annotated)))


def test_colormap_option(tmp_path):
    output = tmp_path / "cmap.png"
    _run(tmp_path, "--colormap", "inferno", "--max-iterations", "20", "--output", str(output))
    expected = render(40, 30, get_default_viewport(), RenderOptions(20, colormap="inferno"))
    assert np.array_equal(np.asarray(PIL.Image.open(output)).reshape(-1), expected)


def test_initial_viewport_options(tmp_path, capsys):
    _run(tmp_path, "--x-min", "-1", "--x-max", "0", "--y-min", "-0.5", "--y-max", "0.5",
         "--output", str(tmp_path / "out.png"))
    assert Viewport(-1, 0, -0.5, 0.5).describe() in capsys.readouterr().out


def test_jpeg_output(tmp_path):
    _run(tmp_path, "--format", "jpg", "--output", str(tmp_path / "out.jpg"))
    assert PIL.Image.open(tmp_path / "out.jpg").format == "JPEG"


@pytest.mark.parametrize(
    "args",
    [
        ["--mode", "video"],
        ["--color-scheme", "plasma"],
        ["--colormap", "not-a-colormap"],
        ["--pan", "sideways"],
        ["--zoom-at", "1", "1", "0"],
        ["--width", "0"],
        ["--x-min", "1", "--x-max", "1"],
        ["--max-iterations", "-1"],
        ["--mode", "gif", "--output", "movie.png"],
        ["--output", "frame.jpg"],
    ],
)
def test_invalid_arguments_exit(tmp_path, args):
    with pytest.raises(SystemExit) as excinfo:
        explore.main(["--width", "40", "--height", "30", *args])
    assert excinfo.value.code == 2


def test_apply_gesture_rejects_unknown_name():
    with pytest.raises(ValueError):
        explore.apply_gesture(Explorer(width=10, height=10), "spin", None)


def test_both_mode_alias(tmp_path):
    _run(tmp_path, "--mode", "both", "--zoom-in", "--output", str(tmp_path))
    assert (tmp_path / "explore.gif").is_file()
    assert (tmp_path / "mandelbrot.png").is_file()


def test_both_mode_resolves_to_gif_and_image(tmp_path):
    parser = explore.build_parser()
    opt = parser.parse_args(["--mode", "both", "--mode", "image", "--output", str(tmp_path)])
    assert explore.resolve_output_config(opt, parser).modes == ("gif", "image")


def test_coordinate_overlay_shows_viewport_description():
    viewport = Viewport(-1.0, 0.5, -0.25, 0.75)
    lines = explore.coordinate_lines(viewport)
    assert lines[0] == viewport.describe()
    assert lines[1] == "Center: (-0.25, 0.25)"


def test_gif_frames_use_options_of_each_view():
    explorer = Explorer(width=24, height=18, options=RenderOptions(5, ColorScheme.GRAYSCALE))
    explorer.zoom_in()
    explorer.reset()

    frames = explore.gif_frames(explorer, show_coordinates=False)
    assert len(frames) == 3

    shallow = render(24, 18, get_default_viewport(), RenderOptions(5, ColorScheme.GRAYSCALE))
    deep = render(24, 18, get_default_viewport(), RenderOptions(100, ColorScheme.GRAYSCALE))
    assert np.array_equal(frames[0], shallow.reshape(18, 24, 4)[..., :3])
    assert np.array_equal(frames[2], deep.reshape(18, 24, 4)[..., :3])
    assert not np.array_equal(frames[0], frames[2])
