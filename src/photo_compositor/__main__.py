import argparse
import logging
from typing import Any, Optional

from photo_compositor import Document
from photo_compositor.api.layers import Adjustments
from photo_compositor.api.pil_io import load_image
from photo_compositor.constants import (
    DEFAULT_EXPORT_NAME,
    DEFAULT_MAX_SIZE,
    BlendMode,
    FilterKind,
)
from photo_compositor.version import __version__

logger = logging.getLogger(__name__)

LAYER_OPTIONS = """
Layer options follow an input file in brackets, e.g.
  photo.png[blend_mode=multiply,filter=sepia,opacity=50,hidden]

  blend_mode=MODE   normal, multiply, screen, overlay, ...
  filter=KIND       normal, grayscale, sepia, invert, blur, ...
  opacity=N         0-100
  brightness=N, contrast=N, saturation=N (-100-100), hue=N (-180-180)
  x=N, y=N          center of the image on the canvas
  scale=F           1.0 is the native size
  name=TEXT         layer name
  hidden            skip the layer
"""

ADJUSTMENT_KEYS = ("brightness", "contrast", "saturation", "hue")


def parse_size(value: str) -> tuple[int, int]:
    try:
        width, height = (int(x) for x in value.lower().split("x"))
    except ValueError:
        raise argparse.ArgumentTypeError("expected WIDTHxHEIGHT, got %r" % value)
    if width <= 0 or height <= 0:
        raise argparse.ArgumentTypeError("size must be positive, got %r" % value)
    return width, height


def parse_layer_spec(spec: str) -> tuple[str, dict[str, Any]]:
    """Split ``file.png[key=value,...]`` into the file name and layer options."""
    index = spec.rfind("[")
    if index < 0 or not spec.endswith("]"):
        return spec, {}

    path, options = spec[:index], spec[index + 1 : -1]
    kwargs: dict[str, Any] = {}
    adjustments: dict[str, int] = {}
    x: Optional[float] = None
    y: Optional[float] = None
    for item in filter(None, (s.strip() for s in options.split(","))):
        key, _, value = item.partition("=")
        if key == "hidden" and not value:
            kwargs["visible"] = False
        elif key == "blend_mode":
            kwargs[key] = BlendMode(value)
        elif key == "filter":
            kwargs[key] = FilterKind(value)
        elif key == "name":
            kwargs[key] = value
        elif key == "opacity":
            kwargs[key] = int(value)
        elif key in ADJUSTMENT_KEYS:
            adjustments[key] = int(value)
        elif key == "scale":
            kwargs[key] = float(value)
        elif key == "x":
            x = float(value)
        elif key == "y":
            y = float(value)
        else:
            raise ValueError("Unknown layer option %r in %r" % (item, spec))
    if adjustments:
        kwargs["adjustments"] = Adjustments(**adjustments)
    if x is not None or y is not None:
        kwargs["position"] = (x, y)
    return path, kwargs


def parse_args(argv: Optional[list[str]] = None) -> argparse.Namespace:
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(
        description="photo-compositor command line utility."
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Be more verbose.")
    parser.add_argument("--version", action="version", version=__version__)

    subparsers = parser.add_subparsers(dest="command", required=True)

    export_parser = subparsers.add_parser(
        "export",
        help="Composite images as layers and save the result",
        epilog=LAYER_OPTIONS,
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    export_parser.add_argument(
        "output_file",
        nargs="?",
        default=DEFAULT_EXPORT_NAME,
        help="Output image file (default: %(default)s)",
    )
    export_parser.add_argument(
        "-i",
        "--input",
        dest="input_files",
        action="append",
        required=True,
        help="Input image, bottom layer first, with optional [options]",
    )
    export_parser.add_argument(
        "--max-size",
        type=parse_size,
        default=DEFAULT_MAX_SIZE,
        help="Bounding box of the canvas as WIDTHxHEIGHT (default: %dx%d)"
        % DEFAULT_MAX_SIZE,
    )

    info_parser = subparsers.add_parser("info", help="Show image information")
    info_parser.add_argument("input_files", nargs="+", help="Input image files")

    args = parser.parse_args(argv)
    if args.command == "export":
        try:
            args.layers = [parse_layer_spec(spec) for spec in args.input_files]
        except (TypeError, ValueError) as e:
            parser.error(str(e))
    return args


def main(argv: Optional[list[str]] = None) -> Optional[int]:
    args = parse_args(argv)

    logging.basicConfig(level=logging.WARNING)
    package_logger = logging.getLogger("photo_compositor")
    if args.verbose:
        package_logger.setLevel(logging.DEBUG)
    else:
        package_logger.setLevel(logging.INFO)

    if args.command == "export":
        document = Document.new(max_size=args.max_size)
        try:
            for path, kwargs in args.layers:
                image, info = load_image(path)
                kwargs = dict(kwargs, name=kwargs.get("name", info.filename))
                position = kwargs.pop("position", None)
                document = document.add_layer(image, **kwargs)
                if position is not None:
                    # Missing coordinates default to the canvas center.
                    document = document.set_layer_position(
                        document.active_id, *_fill_position(position, document.size)
                    )
            document.save(args.output_file)
        except (OSError, ValueError) as e:
            logger.error(str(e))
            return 1
        logger.info("Saved %s" % args.output_file)

    elif args.command == "info":
        for path in args.input_files:
            try:
                _, info = load_image(path)
            except OSError as e:
                logger.error(str(e))
                return 1
            print(
                "%s: %dx%d, %d bytes" % (info.filename, info.width, info.height, info.size)
            )

    return None


def _fill_position(position, size):
    x, y = position
    return (size[0] / 2.0 if x is None else x, size[1] / 2.0 if y is None else y)


if __name__ == "__main__":
    main()
