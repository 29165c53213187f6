"""
Command-line entrypoint for ImageLab.

Interface responsibilities:
- Parse a subcommand (`remove-background`, `upscale`, `compress`) and its
  parameter.
- Load the input file through the file input manager (type/size checks).
- Run the operation once and write the returned image to disk.

Request lifecycle:
1. Parse arguments (argparse exits with status 2 on bad usage).
2. Load INPUT into an `ImagePayload`.
3. `asyncio.run(...)` the matching engine operation.
4. Save the result to `--output` or `processed_<operation>.<ext>`.

Error handling strategy:
- Package errors and file I/O errors print a single line to stderr and
  exit with status 1.
- Keyboard interrupts exit with status 130 without traceback output.
"""

import argparse
import asyncio
import logging
import os
import sys

from imagelab.api.multimodal.file_input_manager import (
    default_output_name,
    load_image_file,
    save_image_payload,
)
from imagelab.core import engine
from imagelab.core.errors import ImageLabError
from imagelab.core.types import (
    CompressRequest,
    Intensity,
    RemoveBackgroundRequest,
    Scale,
    UpscaleRequest,
)


def build_parser():
    parser = argparse.ArgumentParser(
        prog="imagelab",
        description="Edit images with a hosted generative model",
        formatter_class=argparse.ArgumentDefaultsHelpFormatter,
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")

    subparsers = parser.add_subparsers(dest="command", required=True)

    remove_bg = subparsers.add_parser(
        "remove-background",
        help="Remove the image background",
        formatter_class=argparse.ArgumentDefaultsHelpFormatter,
    )
    remove_bg.add_argument(
        "--intensity",
        choices=[member.value for member in Intensity],
        default=Intensity.STANDARD.value,
    )

    upscale = subparsers.add_parser(
        "upscale",
        help="Upscale the image",
        formatter_class=argparse.ArgumentDefaultsHelpFormatter,
    )
    upscale.add_argument(
        "--scale",
        choices=[member.value for member in Scale],
        default=Scale.TWO_X.value,
    )

    compress = subparsers.add_parser(
        "compress",
        help="Compress the image below a target size",
        formatter_class=argparse.ArgumentDefaultsHelpFormatter,
    )
    compress.add_argument(
        "--target-size-mb",
        type=_number,
        required=True,
        help="Target maximum size in megabytes",
    )

    for sub in (remove_bg, upscale, compress):
        sub.add_argument("input", help="Image file (PNG, JPEG or WebP)")
        sub.add_argument("-o", "--output", default=None, help="Output file path")

    return parser


def _number(text):
    """Parse ints as ints so `4` is not rendered as `4.0`."""
    try:
        return int(text)
    except ValueError:
        pass
    try:
        return float(text)
    except ValueError:
        raise argparse.ArgumentTypeError(f"not a number: {text!r}") from None


def build_request(args, image):
    if args.command == "remove-background":
        return RemoveBackgroundRequest(image=image, intensity=args.intensity)
    if args.command == "upscale":
        return UpscaleRequest(image=image, scale=args.scale)
    return CompressRequest(image=image, target_size_mb=args.target_size_mb)


def main(argv=None):
    """Run one image operation from the command line and return an exit code."""
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(levelname)s %(name)s: %(message)s",
    )

    try:
        image = load_image_file(args.input)
        request = build_request(args, image)
        result = asyncio.run(engine.run_operation(request))

        output_path = args.output or os.path.join(
            os.path.dirname(os.path.abspath(args.input)),
            default_output_name(request.operation, result),
        )
        saved = save_image_payload(result, output_path)

    except ImageLabError as err:
        print(f"imagelab: {err}", file=sys.stderr)
        return 1

    except OSError as err:
        print(f"imagelab: {err}", file=sys.stderr)
        return 1

    except KeyboardInterrupt:
        print("\nInterrupted.", file=sys.stderr)
        return 130

    print(saved)
    return 0


if __name__ == "__main__":
    sys.exit(main())
