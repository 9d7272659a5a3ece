"""Command line front end.

    python -m imageconv in.png out.jpg --filter scale:width=400,height=400 --mime image/jpeg
"""

from __future__ import annotations

import argparse
import os
import sys
from typing import Any

from .exceptions import ImageError
from .filters import Filter
from .geometry import Direction
from .handlers import HANDLER_CLASSES
from .logger import get_logger
from .mime import mime_for_extension
from .options import SaveOptions
from .settings_manager import SettingsManager


def _parse_value(text: str) -> Any:
    for cast in (int, float):
        try:
            return cast(text)
        except ValueError:
            pass
    if text.upper() in Direction.__members__:
        return Direction[text.upper()]
    return text


def parse_filter(spec: str) -> Filter:
    """Parse ``name:key=value,key=value`` into a Filter."""
    name, _, params = spec.partition(":")
    options: dict[str, Any] = {}
    for item in filter(None, (p.strip() for p in params.split(","))):
        key, sep, value = item.partition("=")
        if not sep:
            raise argparse.ArgumentTypeError(f"filter parameter {item!r} is not key=value")
        options[key.strip()] = _parse_value(value.strip())
    return Filter(name.strip(), options)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="imageconv", description="Filter and convert an image.")
    parser.add_argument("input", help="Image file to read")
    parser.add_argument("output", help="File to write")
    parser.add_argument("--handler", default="pillow", help="Handler name from the settings file")
    parser.add_argument(
        "--filter",
        dest="filters",
        action="append",
        type=parse_filter,
        default=[],
        metavar="NAME:K=V,...",
        help="Filter to apply, may be given several times",
    )
    parser.add_argument("--mime", help="Output MIME type, e.g. image/jpeg")
    parser.add_argument("--quality", type=int, help="Quality for lossy formats (0-100)")
    parser.add_argument("--compression", type=int, help="PNG compression level (0-9)")
    parser.add_argument("--settings", help="JSON settings file")
    parser.add_argument("--log-level", help="Set log level")
    parser.add_argument("--log-cats", help="Set log categories")
    return parser


def run(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    if args.log_level:
        os.environ["IMAGECONV_LOG_LEVEL"] = args.log_level
    if args.log_cats:
        os.environ["IMAGECONV_LOG_CATS"] = args.log_cats
    logger = get_logger("main")

    settings = SettingsManager(args.settings)
    try:
        handler_cls = HANDLER_CLASSES.get(settings.handler_class_name(args.handler))
        if handler_cls is None:
            raise ImageError(f"Unknown handler class for {args.handler!r}.")
        defaults = settings.save_options()
        options = SaveOptions(
            quality=args.quality if args.quality is not None else defaults.quality,
            compression=args.compression if args.compression is not None else defaults.compression,
            transparency_replacement_color=defaults.transparency_replacement_color,
        )
        with handler_cls(settings.handler_settings(args.handler)) as handler:
            with handler.opened(args.input) as ref:
                for f in args.filters:
                    handler.apply_filter(ref, f)
                mime = args.mime or mime_for_extension(args.output)
                handler.save(ref, args.output, mime=mime, options=options)
                logger.info("wrote %s (%dx%d %s)", args.output, ref.width, ref.height, ref.mime)
    except ImageError as e:
        print(f"imageconv: {e}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(run())
