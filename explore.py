import os
import sys
import warnings
from argparse import ArgumentParser
from pathlib import Path
from typing import Any, Callable

_VERBOSE_FLAGS = {"--verbose", "-v"}
_cli_verbose = any(arg in _VERBOSE_FLAGS for arg in sys.argv[1:])
_env_log_level = os.environ.get("TF_CPP_MIN_LOG_LEVEL")
_suppress_messages = (not _cli_verbose) and _env_log_level != "0"

if _suppress_messages and _env_log_level is None:
    os.environ["TF_CPP_MIN_LOG_LEVEL"] = "3"

if _suppress_messages:
    warnings.filterwarnings(
        "ignore",
        message=r"Protobuf gencode version .* is exactly one major version older than the runtime version .*",
        category=UserWarning,
        module="google.protobuf",
    )

import logging

import numpy as np
import tensorflow as tf

if _suppress_messages:
    tf.get_logger().setLevel("ERROR")
    for handler in tf.get_logger().handlers:
        handler.setLevel("ERROR")

# Imports for visualization
import PIL.Image
import PIL.ImageDraw
import PIL.ImageFont
import imageio

from mandelbrot_explorer import ColorTheme, ExplorerSession, Viewport, colorize
from mandelbrot_explorer.config import RESOLUTION
from mandelbrot_explorer.logging_config import setup_logging

logger = logging.getLogger("mandelbrot_explorer.cli")

Action = Callable[[ExplorerSession], Any]


def build_parser():
    parser = ArgumentParser(description="Explore the Mandelbrot set from the command line.")

    parser.add_argument('--resolution', type=int,
                        dest='resolution', help='side of the square escape grid in pixels',
                        metavar='RESOLUTION', default=RESOLUTION)

    parser.add_argument('--load', type=str,
                        dest='load', help='session file to restore before applying actions',
                        metavar='FILE')

    parser.add_argument('--action', dest='actions', action='append', metavar='ACTION', default=[],
                        help='Operation to apply, may be repeated. One of: "pan X0 Y0 X1 Y1", "zoom X0 Y0 X1 Y1", '
                             '"theme NAME", "cycle-theme", "iterations N", "overlay", "undo", "redo", "reset".')

    parser.add_argument('--save', type=str,
                        dest='save', help='write the final session to this file (".txt" is appended when missing)',
                        metavar='FILE')

    parser.add_argument('--output', type=str,
                        dest='output', help='image file for the final state',
                        metavar='IMAGE')

    parser.add_argument('--format', type=str,
                        dest='format', help='file format for --output. Can be any extension supported by Pillow. Default: "png".',
                        metavar='FORMAT', default='png')

    parser.add_argument('--gif', type=str,
                        dest='gif', help='write an animated GIF with one frame per state',
                        metavar='GIF')

    parser.add_argument('--log-file', type=str, dest='log_file', help='also write logs to this file')

    parser.add_argument('-v', '--verbose', action='store_true',
                        help='Enable verbose logging, including TensorFlow diagnostics.')

    return parser


def _points(args: list[str]) -> tuple[tuple[float, float], tuple[float, float]]:
    if len(args) != 4:
        raise ValueError("expected four coordinates: X0 Y0 X1 Y1")
    x0, y0, x1, y1 = (float(a) for a in args)
    return (x0, y0), (x1, y1)


def parse_action(text: str) -> Action:
    """Translate one ``--action`` string into a call on the session."""

    words = text.split()
    if not words:
        raise ValueError("empty action")
    name, args = words[0].lower(), words[1:]

    if name in ("pan", "zoom"):
        press, release = _points(args)
        return lambda session: session.apply_gesture(press, release, pan_mode=(name == "pan"))
    if name == "theme":
        if len(args) != 1:
            raise ValueError("theme takes one name")
        try:
            theme = ColorTheme(args[0])
        except ValueError:
            valid = ", ".join(t.value for t in ColorTheme)
            raise ValueError(f"unknown theme '{args[0]}'. Valid choices: {valid}.") from None
        return lambda session: session.set_color_theme(theme)
    if name == "iterations":
        if len(args) != 1:
            raise ValueError("iterations takes one integer")
        count = int(args[0])
        return lambda session: session.set_max_iterations(count)

    simple = {
        "cycle-theme": ExplorerSession.cycle_color_theme,
        "overlay": ExplorerSession.toggle_overlay,
        "undo": ExplorerSession.undo,
        "redo": ExplorerSession.redo,
        "reset": ExplorerSession.reset_to_defaults,
    }
    if name in simple:
        if args:
            raise ValueError(f"{name} takes no arguments")
        return simple[name]
    raise ValueError(f"unknown action '{name}'")


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
    output_path.parent.mkdir(parents=True, exist_ok=True)
    image.save(str(output_path), format=pil_format)


_FONT_CANDIDATES = (
    "/usr/share/fonts/truetype/dejavu/DejaVuSans.ttf",
    "/usr/share/fonts/truetype/liberation/LiberationSans-Regular.ttf",
    "/usr/share/fonts/truetype/freefont/FreeSans.ttf",
)


def _load_annotation_font(image: PIL.Image.Image) -> PIL.ImageFont.ImageFont:
    target_size = max(12, int(round(max(min(image.size), 1) * 0.02)))
    for path in _FONT_CANDIDATES:
        font_path = Path(path)
        if font_path.exists():
            try:
                return PIL.ImageFont.truetype(str(font_path), target_size)
            except OSError:
                continue
    return PIL.ImageFont.load_default()


def annotate_with_magnification(image: PIL.Image.Image, viewport: Viewport) -> PIL.Image.Image:
    """Draw the magnification banner across the top-left corner of ``image``."""

    if image.mode != "RGB":
        image = image.convert("RGB")

    draw = PIL.ImageDraw.Draw(image)
    font = _load_annotation_font(image)
    text = f"Current magnification: {viewport.magnification}x"

    bbox = draw.textbbox((0, 0), text, font=font)
    text_width = int(round(bbox[2] - bbox[0]))
    text_height = int(round(bbox[3] - bbox[1]))
    padding = max(4, text_height // 3)

    # Black panel keeps the text legible under every theme.
    draw.rectangle(
        [(0, 0), (min(image.width, text_width + padding * 2), min(image.height, text_height + padding * 2))],
        fill=(0, 0, 0),
    )
    draw.text((padding, padding - bbox[1]), text, font=font, fill=(255, 255, 255))
    return image


def render_image(grid: np.ndarray, viewport: Viewport, overlay_visible: bool) -> PIL.Image.Image:
    image = PIL.Image.fromarray(colorize(grid, viewport.color_theme, viewport.max_iterations))
    if overlay_visible:
        image = annotate_with_magnification(image, viewport)
    return image


class ImageConsumer:
    """Grid consumer that turns every published state into an image."""

    def __init__(self, gif_path: Path | None = None) -> None:
        self.latest: PIL.Image.Image | None = None
        self.frames = 0
        self._gif_writer = None
        if gif_path is not None:
            gif_path.parent.mkdir(parents=True, exist_ok=True)
            self._gif_writer = imageio.get_writer(str(gif_path), mode='I', duration=0.5, loop=0)

    def display(self, grid: np.ndarray, viewport: Viewport, overlay_visible: bool) -> None:
        self.latest = render_image(grid, viewport, overlay_visible)
        self.frames += 1
        if self._gif_writer is not None:
            self._gif_writer.append_data(np.array(self.latest, copy=True))

    def close(self) -> None:
        if self._gif_writer is not None:
            self._gif_writer.close()
            self._gif_writer = None


def _resolve_image_path(output: str, image_format: str, parser: ArgumentParser) -> Path:
    output_path = Path(output).expanduser()
    expected_suffix = f".{image_format}"
    if output_path.suffix:
        if output_path.suffix.lower() != expected_suffix.lower():
            parser.error(f"--output extension {output_path.suffix} does not match --format {image_format}.")
    else:
        output_path = output_path.with_suffix(expected_suffix)
    return output_path.resolve()


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    opt = parser.parse_args(argv)

    setup_logging(logging.DEBUG if opt.verbose else logging.INFO, log_file=opt.log_file)
    logger.debug("TensorFlow version: %s", tf.__version__)

    if opt.resolution <= 0:
        parser.error("--resolution must be positive.")

    actions: list[Action] = []
    for text in opt.actions:
        try:
            actions.append(parse_action(text))
        except ValueError as exc:
            parser.error(f"invalid --action '{text}': {exc}")

    image_format = (opt.format or "png").lower().lstrip(".") or "png"
    image_path = _resolve_image_path(opt.output, image_format, parser) if opt.output else None
    gif_path = Path(opt.gif).expanduser().resolve() if opt.gif else None

    errors: list[str] = []
    consumer = ImageConsumer(gif_path)
    session = ExplorerSession(opt.resolution, consumer=consumer, notify=errors.append)
    try:
        if opt.load and not session.load_from(opt.load):
            print(f"An error is detected: {errors[-1]}", file=sys.stderr)
            return 1

        for i, action in enumerate(actions):
            logger.info("action %d out of %d: %s", i + 1, len(actions), opt.actions[i])
            action(session)

        if opt.save and not session.save_to(opt.save):
            print(f"An error is detected: {errors[-1]}", file=sys.stderr)
            return 1
    finally:
        consumer.close()
        session.close()

    if image_path is not None and consumer.latest is not None:
        write_single_image(consumer.latest, image_path, image_format)
        logger.info("Image written to %s", image_path)

    viewport = session.current_viewport()
    logger.info(
        "Final view: bounds=%s iterations=%d theme=%s magnification=%.6g",
        viewport.bounds.as_tuple(),
        viewport.max_iterations,
        viewport.color_theme,
        viewport.magnification,
    )
    return 0


if __name__ == '__main__':
    sys.exit(main())
