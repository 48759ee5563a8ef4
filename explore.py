import sys
from argparse import Action, ArgumentParser
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import numpy as np

# Imports for visualization
import PIL.Image
import PIL.ImageDraw
import PIL.ImageFont
import imageio

from mandelbrot import (
    ColorScheme,
    Explorer,
    RenderOptions,
    Viewport,
    complex_to_pixel,
    get_default_viewport,
    render_image,
)
from mandelbrot.colors import get_colormap

_VERBOSE_FLAGS = {"--verbose", "-v"}
VERBOSE = any(arg in _VERBOSE_FLAGS for arg in sys.argv[1:])


def log(message, *args, **kwargs):
    if VERBOSE:
        print(message, *args, **kwargs)


PAN_DIRECTIONS = ("up", "down", "left", "right")


@dataclass(frozen=True)
class OutputConfig:
    modes: tuple[str, ...]
    gif_path: Path | None
    image_path: Path | None
    image_format: str


class GestureAction(Action):
    """Record a gesture in ``namespace.gestures`` so gestures replay in command-line order."""

    def __call__(self, parser, namespace, values, option_string=None):
        gestures = list(getattr(namespace, "gestures", None) or [])
        gestures.append((self.const, values))
        setattr(namespace, "gestures", gestures)


def build_parser():
    parser = ArgumentParser(description="Render the Mandelbrot set after replaying viewer gestures.")

    parser.add_argument('--width', type=int,
                        dest='width', help='canvas width in pixels',
                        metavar='WIDTH', default=800)

    parser.add_argument('--height', type=int,
                        dest='height', help='canvas height in pixels',
                        metavar='HEIGHT', default=600)

    default = get_default_viewport()
    parser.add_argument('--x-min', type=float, dest='x_min', metavar='X_MIN', default=default.x_min,
                        help='left bound of the initial viewport on the real axis')
    parser.add_argument('--x-max', type=float, dest='x_max', metavar='X_MAX', default=default.x_max,
                        help='right bound of the initial viewport on the real axis')
    parser.add_argument('--y-min', type=float, dest='y_min', metavar='Y_MIN', default=default.y_min,
                        help='imaginary coordinate mapped to the top row of the canvas')
    parser.add_argument('--y-max', type=float, dest='y_max', metavar='Y_MAX', default=default.y_max,
                        help='imaginary coordinate mapped to the bottom row of the canvas')

    parser.add_argument('--max-iterations', type=int,
                        dest='max_iterations', help='maximum number of iterations before a point counts as inside the set',
                        metavar='MAX_ITERATIONS', default=100)

    parser.add_argument('--color-scheme', type=str, dest='color_scheme',
                        choices=[scheme.value for scheme in ColorScheme], default=ColorScheme.FIRE.value,
                        help='built-in color scheme for escaping points')

    parser.add_argument('--colormap', type=str,
                        dest='colormap', help='matplotlib colormap (e.g. "viridis", "inferno"); overrides --color-scheme',
                        metavar='COLORMAP', default=None)

    gestures = parser.add_argument_group('gestures', 'Applied in the order given on the command line.')
    gestures.add_argument('--zoom-in', action=GestureAction, nargs=0, const='zoom_in',
                          help='zoom in by 2x around the canvas center')
    gestures.add_argument('--zoom-out', action=GestureAction, nargs=0, const='zoom_out',
                          help='zoom out by 2x around the canvas center')
    gestures.add_argument('--pan', action=GestureAction, const='pan', choices=PAN_DIRECTIONS,
                          metavar='DIRECTION', help='pan 50 pixels: up, down, left or right')
    gestures.add_argument('--select', action=GestureAction, const='select', nargs=4, type=float,
                          metavar=('X1', 'Y1', 'X2', 'Y2'),
                          help='zoom into a dragged rectangle; selections under 10 pixels are ignored')
    gestures.add_argument('--zoom-at', action=GestureAction, const='zoom_at', nargs=3, type=float,
                          metavar=('X', 'Y', 'FACTOR'),
                          help='center on a pixel and zoom by FACTOR (> 1 zooms in)')
    gestures.add_argument('--double-click', action=GestureAction, const='double_click', nargs=2, type=float,
                          metavar=('X', 'Y'), help='zoom in by 2x centered on a pixel')
    gestures.add_argument('--wheel', action=GestureAction, const='wheel', nargs=3, type=float,
                          metavar=('X', 'Y', 'DELTA_Y'),
                          help='mouse wheel at a pixel: positive DELTA_Y zooms out, otherwise zooms in')
    gestures.add_argument('--reset', action=GestureAction, nargs=0, const='reset',
                          help='return to the default view and iteration depth')

    parser.add_argument('--mode', dest='modes', action='append', metavar='MODE',
                        help='Output modes to generate. May be repeated. Choices: image, gif, both.')

    parser.add_argument('--output', dest='output', type=str,
                        help='Destination file for a single output mode, or directory when both are requested.')

    parser.add_argument('--format', type=str,
                        dest='format', help='file format for image outputs. Can be any extension supported by Pillow. Default: "png".',
                        metavar='FORMAT', default='png')

    parser.add_argument('--show-coordinates', help='overlay the viewport bounds and origin marker',
                        dest='show_coordinates', action='store_true')

    parser.add_argument('-v', '--verbose', action='store_true',
                        help='Enable verbose logging.')

    parser.set_defaults(gestures=[])
    return parser


def resolve_output_config(opt, parser: ArgumentParser) -> OutputConfig:
    valid_modes = {"image", "gif", "both"}
    modes: list[str] = []
    for mode in opt.modes or ["image"]:
        if mode == "both":
            modes.extend(m for m in ("gif", "image") if m not in modes)
            continue
        if mode not in valid_modes:
            parser.error(f"Unknown output mode '{mode}'. Valid choices: {', '.join(sorted(valid_modes))}.")
        if mode not in modes:
            modes.append(mode)

    image_format = (opt.format or "png").lower().lstrip(".") or "png"

    gif_path: Path | None = None
    image_path: Path | None = None

    if len(modes) == 1:
        mode = modes[0]
        output_path = Path(opt.output).expanduser() if opt.output else None
        if output_path is not None and output_path.is_dir():
            parser.error("--output must point to a file, not a directory, when a single mode is active.")
        if mode == "gif":
            output_path = output_path or Path("explore.gif")
            if output_path.suffix:
                if output_path.suffix.lower() != ".gif":
                    parser.error("GIF outputs must end with .gif.")
            else:
                output_path = output_path.with_suffix(".gif")
            gif_path = output_path.resolve()
        else:
            output_path = output_path or Path(f"mandelbrot.{image_format}")
            expected_suffix = f".{image_format}"
            if output_path.suffix:
                if output_path.suffix.lower() != expected_suffix:
                    parser.error(f"--output extension {output_path.suffix} does not match --format {image_format}.")
            else:
                output_path = output_path.with_suffix(expected_suffix)
            image_path = output_path.resolve()
    else:
        base_dir = Path(opt.output).expanduser() if opt.output else Path.cwd()
        if base_dir.exists() and not base_dir.is_dir():
            parser.error("--output must be a directory when both gif and image modes are active.")
        gif_path = (base_dir / "explore.gif").resolve()
        image_path = (base_dir / f"mandelbrot.{image_format}").resolve()

    return OutputConfig(
        modes=tuple(modes),
        gif_path=gif_path,
        image_path=image_path,
        image_format=image_format,
    )


def validate_options(opt, parser: ArgumentParser) -> None:
    if opt.width <= 0 or opt.height <= 0:
        parser.error("--width and --height must be positive.")
    if opt.max_iterations < 0:
        parser.error("--max-iterations must not be negative.")
    if opt.x_min == opt.x_max or opt.y_min == opt.y_max:
        parser.error("The initial viewport must have non-zero extents.")
    if opt.colormap is not None:
        try:
            get_colormap(opt.colormap)
        except ValueError as exc:
            parser.error(str(exc))
    for name, values in opt.gestures:
        if name == "zoom_at" and values[2] <= 0:
            parser.error("--zoom-at FACTOR must be positive.")


def apply_gesture(explorer: Explorer, name: str, values: Any) -> None:
    """Replay one recorded gesture on ``explorer``."""

    if name == "zoom_in":
        explorer.zoom_in()
    elif name == "zoom_out":
        explorer.zoom_out()
    elif name == "pan":
        getattr(explorer, f"pan_{values}")()
    elif name == "select":
        if not explorer.select_region(*values):
            log("Selection {0} is smaller than the minimum drag size, ignored".format(values))
    elif name == "zoom_at":
        explorer.zoom_at(*values)
    elif name == "double_click":
        explorer.double_click(*values)
    elif name == "wheel":
        explorer.wheel(*values)
    elif name == "reset":
        explorer.reset()
    else:
        raise ValueError(f"Unknown gesture '{name}'.")
    log("{0}: {1}".format(name, explorer.coordinate_label()))


def _pil_format_name(ext: str) -> str:
    upper = ext.upper()
    if upper == "JPG":
        return "JPEG"
    if upper == "TIF":
        return "TIFF"
    return upper


def write_single_image(image: PIL.Image.Image, output_path: Path, image_format: str) -> None:
    """Write a single image to ``output_path`` using the provided format."""

    pil_format = _pil_format_name(image_format)
    if pil_format == "JPEG" and image.mode == "RGBA":
        image = image.convert("RGB")
    output_path.parent.mkdir(parents=True, exist_ok=True)
    image.save(str(output_path), format=pil_format)


_FONT_CANDIDATES = (
    "/usr/share/fonts/truetype/dejavu/DejaVuSans.ttf",
    "/usr/share/fonts/truetype/liberation/LiberationSans-Regular.ttf",
    "/usr/share/fonts/truetype/freefont/FreeSans.ttf",
)


def _load_annotation_font(image: PIL.Image.Image) -> PIL.ImageFont.ImageFont:
    target_size = max(12, int(round(max(min(image.size), 1) * 0.028)))
    for path in _FONT_CANDIDATES:
        font_path = Path(path)
        if font_path.exists():
            try:
                return PIL.ImageFont.truetype(str(font_path), target_size)
            except OSError:
                continue
    return PIL.ImageFont.load_default()


def _create_vertical_gradient(
    size: tuple[int, int],
    top_color: tuple[int, int, int, int],
    bottom_color: tuple[int, int, int, int],
) -> PIL.Image.Image:
    width, height = size
    gradient = PIL.Image.new("RGBA", (width, height))
    if height == 1:
        gradient.paste(top_color, [0, 0, width, height])
        return gradient

    for y in range(height):
        ratio = y / (height - 1)
        color = tuple(
            int(round(top_color[channel] + (bottom_color[channel] - top_color[channel]) * ratio))
            for channel in range(4)
        )
        gradient.paste(color, [0, y, width, y + 1])
    return gradient


def coordinate_lines(viewport: Viewport) -> list[str]:
    """Text of the coordinate read-out drawn by :func:`annotate_with_coordinates`."""

    center_x, center_y = viewport.center
    return [viewport.describe(), f"Center: ({center_x:.6g}, {center_y:.6g})"]


def annotate_with_coordinates(image: PIL.Image.Image, viewport: Viewport) -> PIL.Image.Image:
    """Overlay the coordinate read-out and, when visible, the complex origin on ``image``."""

    if image.mode != "RGBA":
        image = image.convert("RGBA")

    draw = PIL.ImageDraw.Draw(image, "RGBA")
    font = _load_annotation_font(image)
    font_size = getattr(font, "size", 12)

    text = "\n".join(coordinate_lines(viewport))
    spacing = max(4, int(round(font_size * 0.35)))
    bbox = draw.multiline_textbbox((0, 0), text, font=font, spacing=spacing)
    padding = max(8, int(round(font_size * 0.6)))
    box_width = int(round(bbox[2] - bbox[0])) + padding * 2
    box_height = int(round(bbox[3] - bbox[1])) + padding * 2
    box_left = box_top = 12

    panel = _create_vertical_gradient((box_width, box_height), (18, 22, 40, 210), (10, 12, 24, 150))
    image.paste(panel, (box_left, box_top), panel)
    draw.rectangle(
        [(box_left, box_top), (box_left + box_width, box_top + box_height)],
        outline=(255, 255, 255, 45),
        width=max(1, int(round(font_size * 0.08))),
    )
    shadow = max(1, int(round(font_size * 0.1)))
    text_position = (box_left + padding, box_top + padding)
    draw.multiline_text((text_position[0] + shadow, text_position[1] + shadow), text,
                        font=font, fill=(0, 0, 0, 170), spacing=spacing)
    draw.multiline_text(text_position, text, font=font, fill=(240, 244, 255, 255), spacing=spacing)

    origin_col, origin_row = complex_to_pixel(0.0, 0.0, image.width, image.height, viewport)
    if 0 <= origin_col < image.width and 0 <= origin_row < image.height:
        radius = max(3, int(round(min(image.width, image.height) * 0.005)))
        shadow_radius = radius + max(1, radius // 3)
        draw.ellipse(
            [(origin_col - shadow_radius, origin_row - shadow_radius),
             (origin_col + shadow_radius, origin_row + shadow_radius)],
            fill=(0, 0, 0, 120),
        )
        draw.ellipse(
            [(origin_col - radius, origin_row - radius), (origin_col + radius, origin_row + radius)],
            fill=(255, 255, 255, 235),
            outline=(0, 0, 0, 180),
            width=max(1, radius // 2),
        )

    return image


def render_viewport(
    explorer: Explorer,
    viewport: Viewport,
    options: RenderOptions,
    show_coordinates: bool,
) -> PIL.Image.Image:
    image = render_image(explorer.width, explorer.height, viewport, options)
    if show_coordinates:
        image = annotate_with_coordinates(image, viewport)
    return image


def gif_frames(explorer: Explorer, show_coordinates: bool) -> list[np.ndarray]:
    """Render one RGB frame per visited viewport, each with the options it was viewed with."""

    states = explorer.states
    frames = []
    for i, (viewport, frame_options) in enumerate(states):
        print("frame {0} out of {1}".format(i, len(states)), end='\r')
        image = render_viewport(explorer, viewport, frame_options, show_coordinates)
        frames.append(np.array(image.convert("RGB")))
    return frames


def write_gif(gif_path: Path, frames: list[np.ndarray]) -> None:
    """Write ``frames`` as a looping animation."""

    gif_path.parent.mkdir(parents=True, exist_ok=True)
    writer = imageio.get_writer(str(gif_path), mode='I', duration=0.5, loop=0)
    try:
        for frame in frames:
            writer.append_data(frame)
    finally:
        writer.close()


def main(argv=None):
    parser = build_parser()
    opt = parser.parse_args(argv)

    output_config = resolve_output_config(opt, parser)
    validate_options(opt, parser)

    global VERBOSE
    VERBOSE = bool(opt.verbose)

    options = RenderOptions(
        max_iterations=opt.max_iterations,
        color_scheme=opt.color_scheme,
        colormap=opt.colormap,
    )
    explorer = Explorer(
        width=opt.width,
        height=opt.height,
        viewport=Viewport(opt.x_min, opt.x_max, opt.y_min, opt.y_max),
        options=options,
    )
    log("start: {0}".format(explorer.coordinate_label()))

    for name, values in opt.gestures:
        apply_gesture(explorer, name, values)

    if "gif" in output_config.modes and output_config.gif_path is not None:
        write_gif(output_config.gif_path, gif_frames(explorer, opt.show_coordinates))
        log("\nwrote {0}".format(output_config.gif_path))

    if "image" in output_config.modes and output_config.image_path is not None:
        image = render_viewport(explorer, explorer.viewport, explorer.options, opt.show_coordinates)
        write_single_image(image, output_config.image_path, output_config.image_format)
        log("wrote {0}".format(output_config.image_path))

    print(explorer.coordinate_label())


if __name__ == '__main__':
    main()
