"""Headless document checker - CLI entry point.

Decodes a stamp document (or starts a new one), optionally places stamps,
prints a short summary and re-encodes it, resolving mask bodies from an
assets directory. Stamps added to an existing document are only kept when
-o is given.

Usage:
    stampsvg-check <input_file> [-o OUTPUT] [--init] [--stamp URL ...]
                   [--assets-root DIR] [--config FILE] [-v]

Examples:
    stampsvg-check drawing.svg
    stampsvg-check drawing.svg -o normalized.svg --assets-root ./
    stampsvg-check new.svg --init --stamp assets/stamps/larch.bmp
"""

import sys
import os
import argparse
import logging

from stampsvg.models.document import Document
from stampsvg.models.transform import Transform
from stampsvg.services.asset_resolver import FileAssetResolver
from stampsvg.services.file_operations import load_document_from_file, save_document_to_file
from stampsvg.utils.config import EditorConfig, load_config
from stampsvg.utils.errors import StampError
from stampsvg.utils.logger import loggerRaise, setup_logging
from stampsvg.utils.path_resolver import get_config_path

logger = logging.getLogger('stampsvg.headless')


def _load_editor_config(config_path):
    """Explicit --config must exist; the default location is optional."""
    if config_path:
        return load_config(config_path)
    default_path = get_config_path()
    if default_path.is_file():
        return load_config(default_path)
    return EditorConfig()


def _summarize(document) -> str:
    width, height = document.grown_size()
    lines = [
        f"version:     {document.version}",
        f"canvas:      {document.width}x{document.height} (grown {width}x{height})",
        f"placements:  {len(document.placements)}",
        f"clip paths:  {len(document.definitions.clip_paths)}",
        f"sources:     {len(document.active_sources())}",
    ]
    for url in document.active_sources():
        lines.append(f"  {url}")
    return '\n'.join(lines)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog='stampsvg-check',
        description='Validate a stamp SVG document and optionally re-encode it.',
    )
    parser.add_argument(
        'input_file',
        help='Path to the stamp SVG document.',
    )
    parser.add_argument(
        '-o', '--output',
        default=None,
        help='Re-encode the document to this path.',
    )
    parser.add_argument(
        '--init',
        action='store_true',
        help='Start from an empty canvas of the configured size instead of reading input_file. '
             'The result is written to input_file unless -o is given.',
    )
    parser.add_argument(
        '--stamp',
        action='append',
        default=[],
        metavar='URL',
        help='Place a stamp of the configured size at the canvas origin (repeatable).',
    )
    parser.add_argument(
        '--assets-root',
        default=None,
        help='Directory asset sub-documents are resolved against (default: from config, else cwd).',
    )
    parser.add_argument(
        '--config',
        default=None,
        help='Path to a JSON editor config.',
    )
    parser.add_argument(
        '-v', '--verbose',
        action='store_true',
        help='Enable verbose logging.',
    )
    return parser


def _check(args, config) -> int:
    input_path = os.path.abspath(args.input_file)

    if args.init:
        if not args.output and os.path.exists(input_path):
            print(f"Error: Refusing to overwrite existing file: {input_path}")
            return 1
        document = Document.new(config.canvas_width, config.canvas_height)
        logger.info(f"New {config.canvas_width}x{config.canvas_height} document for {input_path}")
    else:
        if not os.path.isfile(input_path):
            print(f"Error: Input file not found: {input_path}")
            return 1
        try:
            document = load_document_from_file(input_path)
        except (StampError, OSError) as e:
            print(f"Error: {input_path}: {e}")
            if args.verbose:
                logger.exception("Decode failed")
            return 1

    for url in args.stamp:
        document.add_placement(Transform.from_box(config.stamp_size, config.stamp_size), url)

    print(_summarize(document))

    output = args.output if args.output else (args.input_file if args.init else None)
    if output:
        assets_root = args.assets_root if args.assets_root is not None else config.assets_root
        resolver = FileAssetResolver(assets_root)
        output_path = os.path.abspath(output)
        try:
            save_document_to_file(document, output_path, resolver)
        except (StampError, OSError) as e:
            print(f"Error: could not write {output_path}: {e}")
            if args.verbose:
                logger.exception("Encode failed")
            return 1
        print(f"\nWrote {output_path}")

    return 0


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)

    try:
        config = _load_editor_config(args.config)
        setup_logging(logging.DEBUG if args.verbose else config.log_level)
    except (OSError, ValueError) as e:
        print(f"Error: Could not load config: {e}")
        return 1

    try:
        return _check(args, config)
    except Exception as e:
        loggerRaise(e, f"stampsvg-check failed on {args.input_file}")


if __name__ == '__main__':
    sys.exit(main())
