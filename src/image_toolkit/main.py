"""Main module for the image toolkit CLI."""

import sys
import json
import argparse
from pathlib import Path
from typing import Any, Dict, Optional

from . import __version__
from .core.codec import decode_base64, encode_base64
from .core.exceptions import ImageToolkitError
from .core.factories import ToolkitServiceFactory
from .core.image_utils import format_file_size
from .core.models import ImageFormat, ToolkitConfig
from .core.services import ImageToolkitService


def build_parser() -> argparse.ArgumentParser:
    """Create the argument parser with one subcommand per operation."""
    parser: argparse.ArgumentParser = argparse.ArgumentParser(
        prog="image-toolkit",
        description="Image Toolkit - crop, resize, convert, compare and inspect images",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Cut a 200x100 region starting at (10, 20)
  image-toolkit crop photo.jpg -o region.png --x 10 --y 20 --width 200 --height 100

  # Fit an image into a 800x600 box keeping its proportions
  image-toolkit resize photo.jpg -o small.png --width 800 --height 600 --keep-aspect

  # Convert to WEBP
  image-toolkit convert photo.png -o photo.webp --format webp

  # Highlight the differences between two renders
  image-toolkit compare before.png after.png -o diff.png
        """,
    )
    parser.add_argument("--debug", action="store_true", help="Enable debug logging")
    parser.add_argument(
        "--max-pixels",
        type=int,
        default=None,
        help="Reject images larger than this many pixels",
    )

    subparsers: argparse._SubParsersAction = parser.add_subparsers(
        dest="command", help="Available commands"
    )

    crop_parser = subparsers.add_parser("crop", help="Crop a rectangle (PNG output)")
    crop_parser.add_argument("input", help="Source image file")
    crop_parser.add_argument("-o", "--output", required=True, help="Output file")
    crop_parser.add_argument("--x", type=int, required=True, help="Left edge")
    crop_parser.add_argument("--y", type=int, required=True, help="Top edge")
    crop_parser.add_argument("--width", type=int, required=True, help="Crop width")
    crop_parser.add_argument("--height", type=int, required=True, help="Crop height")

    resize_parser = subparsers.add_parser("resize", help="Resize with Lanczos (PNG output)")
    resize_parser.add_argument("input", help="Source image file")
    resize_parser.add_argument("-o", "--output", required=True, help="Output file")
    resize_parser.add_argument("--width", type=int, required=True, help="Target width")
    resize_parser.add_argument("--height", type=int, required=True, help="Target height")
    resize_parser.add_argument(
        "--keep-aspect",
        action="store_true",
        help="Treat width/height as a bounding box and keep the aspect ratio",
    )

    convert_parser = subparsers.add_parser("convert", help="Convert to another format")
    convert_parser.add_argument("input", help="Source image file")
    convert_parser.add_argument("-o", "--output", required=True, help="Output file")
    convert_parser.add_argument(
        "--format",
        required=True,
        help=f"Target format ({', '.join(f.value for f in ImageFormat)}, jpeg)",
    )
    convert_parser.add_argument(
        "--quality", type=int, default=None, help="Quality hint (accepted, not applied)"
    )

    compare_parser = subparsers.add_parser(
        "compare", help="Write an enhanced difference image (PNG output)"
    )
    compare_parser.add_argument("first", help="First image file")
    compare_parser.add_argument("second", help="Second image file")
    compare_parser.add_argument("-o", "--output", required=True, help="Output file")

    info_parser = subparsers.add_parser("info", help="Show dimensions and format")
    info_parser.add_argument("input", help="Image file")

    subparsers.add_parser("version", help="Show version information")
    return parser


def build_config(args: argparse.Namespace) -> ToolkitConfig:
    """Environment configuration with CLI overrides applied."""
    values = ToolkitConfig.from_env().model_dump()
    if args.debug:
        values["log_level"] = "DEBUG"
    if args.max_pixels is not None:
        values["max_pixels"] = args.max_pixels
    return ToolkitConfig(**values)


def read_payload(path: str) -> str:
    """Read a file and return its content as base64 text."""
    return encode_base64(Path(path).read_bytes())


def write_payload(path: str, payload: str) -> None:
    Path(path).write_bytes(decode_base64(payload))


def summarize(result: Any, output: Optional[str] = None) -> Dict[str, Any]:
    """JSON-friendly summary of a result, without the image payload."""
    summary = result.model_dump(exclude={"data"})
    summary["size"] = format_file_size(result.size_bytes)
    if output:
        summary["output"] = output
    return summary


def run_command(args: argparse.Namespace, service: ImageToolkitService) -> Dict[str, Any]:
    """Execute the parsed subcommand and return its summary."""
    if args.command == "crop":
        result = service.crop(
            read_payload(args.input),
            {"x": args.x, "y": args.y, "width": args.width, "height": args.height},
        )
    elif args.command == "resize":
        result = service.resize(
            read_payload(args.input),
            {
                "width": args.width,
                "height": args.height,
                "maintain_aspect_ratio": args.keep_aspect,
            },
        )
    elif args.command == "convert":
        result = service.convert(
            read_payload(args.input), {"format": args.format, "quality": args.quality}
        )
    elif args.command == "compare":
        result = service.compare(read_payload(args.first), read_payload(args.second))
    else:
        return summarize(service.inspect(read_payload(args.input)))

    write_payload(args.output, result.data)
    return summarize(result, args.output)


def main() -> None:
    """
    Entry point for the command-line interface (CLI) of the Image Toolkit.

    Files are read from disk and base64 encoded so they travel through the
    same operations a desktop front end would call.
    """
    parser = build_parser()
    args: argparse.Namespace = parser.parse_args()

    if args.command == "version":
        print("Image Toolkit CLI")
        print(f"Version {__version__}")
        sys.exit(0)

    elif args.command is None:
        parser.print_help()
        sys.exit(1)

    else:
        try:
            service = ToolkitServiceFactory.create_service(config=build_config(args))
            summary = run_command(args, service)
        except (ImageToolkitError, OSError, ValueError) as exc:
            # pydantic's ValidationError for bad CLI overrides is a ValueError.
            print(f"Error: {exc}", file=sys.stderr)
            sys.exit(1)
        else:
            print(json.dumps(summary, indent=2))
            sys.exit(0)


if __name__ == "__main__":
    main()
