"""CLI entry point for the screen text reader."""

import argparse
import sys
from pathlib import Path

import uvicorn

from screen_text_reader.core.settings import get_settings
from screen_text_reader.core.utils import parse_region_argument, setup_logging
from screen_text_reader.models import Region
from screen_text_reader.services import OcrService


def main() -> int:
    """
    Main CLI entry point.

    Returns:
        int: Exit code (0 for success).
    """
    parser = argparse.ArgumentParser(
        description="Screen Text Reader",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # Server command
    server_parser = subparsers.add_parser("server", help="Start the API server")
    server_parser.add_argument("--host", default=None, help="Server host")
    server_parser.add_argument("--port", type=int, default=None, help="Server port")
    server_parser.add_argument("--reload", action="store_true", help="Enable auto-reload")

    # OCR command
    ocr_parser = subparsers.add_parser("ocr", help="Read text from an image file")
    ocr_parser.add_argument("image", type=Path, help="Image file to read")
    ocr_parser.add_argument(
        "--region",
        default=None,
        help="Region to read as x,y,width,height (whole image if omitted)",
    )

    args = parser.parse_args()

    if args.command == "server":
        return run_server(args)
    elif args.command == "ocr":
        return run_ocr(args)
    else:
        parser.print_help()
        return 0


def run_server(args: argparse.Namespace) -> int:
    """
    Run the API server.

    Args:
        args (argparse.Namespace): Parsed command line arguments.

    Returns:
        int: Exit code (0 for success).
    """
    settings = get_settings()

    host = args.host or settings.api_server.host
    port = args.port or settings.api_server.port

    uvicorn.run(
        app="screen_text_reader.api.server:app",
        host=host,
        port=port,
        reload=args.reload,
    )
    return 0


def run_ocr(args: argparse.Namespace) -> int:
    """
    Run one OCR pass on an image file and print the text.

    Args:
        args (argparse.Namespace): Parsed command line arguments.

    Returns:
        int: Exit code (0 for success, 1 for bad input, 2 for OCR failure).
    """
    settings = get_settings()
    setup_logging(settings=settings.logging)

    region = None
    if args.region:
        try:
            x, y, width, height = parse_region_argument(args.region)
        except ValueError as e:
            print(f"Invalid region: {e}", file=sys.stderr)
            return 1
        region = Region(x=x, y=y, width=width, height=height)
        if not region.is_valid():
            print("Invalid region: width and height must be positive", file=sys.stderr)
            return 1

    try:
        image_bytes = args.image.read_bytes()
    except OSError as e:
        print(f"Cannot read {args.image}: {e}", file=sys.stderr)
        return 1

    service = OcrService(settings)
    try:
        text = service.extract_text_from_bytes(image_bytes, region=region)
    except ValueError as e:
        print(f"Invalid image: {e}", file=sys.stderr)
        return 1
    except RuntimeError as e:
        print(f"OCR failed: {e}", file=sys.stderr)
        return 2

    print(text)
    return 0


if __name__ == "__main__":
    sys.exit(main())
