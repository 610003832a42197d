"""Command line interface for Markdeck."""

import argparse
import sys
from pathlib import Path
from typing import List, Optional

from markdeck import __version__
from markdeck.core.config import CONFIG_FILENAME, MarkdeckConfig, find_config
from markdeck.core.discovery import find_markdown_files
from markdeck.core.exporter import Exporter
from markdeck.core.models import MarkdeckError, TransformOptions
from markdeck.core.rewriter import SlideRewriter
from markdeck.core.starter import init_presentation


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="markdeck",
        description="Turn Markdown files into HTML slide presentations.",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument("-c", "--config", type=Path, help=f"config file (default: ./{CONFIG_FILENAME})")
    commands = parser.add_subparsers(dest="command", required=True)

    init = commands.add_parser("init", help="create a template and a starter presentation")
    init.add_argument("--template", type=Path, help="copy this template directory instead of the starter")
    init.add_argument("--force", action="store_true", help="overwrite an existing template directory")

    export = commands.add_parser("export", help="export Markdown files as HTML slides")
    export.add_argument("files", nargs="*", type=Path, help="Markdown files, or one directory")
    export.add_argument("-o", "--output", type=Path, help="output directory")
    export.add_argument("-t", "--template", type=Path, help="template directory")
    export.add_argument("-l", "--inline", action="store_true", default=None,
                        help="embed every resource, producing standalone HTML files")
    export.add_argument("--strip-notes", action="store_true", default=None, help="remove presenter notes")
    export.add_argument("--handouts", action="store_true", default=None,
                        help="remove fragment markers (one step per slide)")
    export.add_argument("--no-fix-paths", dest="fix_relative_paths", action="store_false", default=None,
                        help="leave relative references untouched")
    export.add_argument("--web", dest="separate_stylesheet", action="store_true", default=None,
                        help="write a shared style.css instead of embedding the CSS")
    export.add_argument("--keep-going", action="store_true", help="continue after a file fails")

    transform = commands.add_parser("transform", help="rewrite Markdown slide files")
    transform.add_argument("files", nargs="*", type=Path, help="Markdown files, or one directory")
    transform.add_argument("-o", "--output", type=Path, help="output directory (default: in place)")
    transform.add_argument("--strip-notes", action="store_true", help="remove presenter notes")
    transform.add_argument("--strip-fragments", action="store_true", help="remove fragment markers")
    transform.add_argument("--embed-images", action="store_true", help="embed images as data URIs")
    transform.add_argument("--extract-images", metavar="DIR",
                           help="extract embedded images into DIR, relative to the output directory")
    transform.add_argument("--keep-going", action="store_true", help="continue after a file fails")

    return parser


def _load_config(args: argparse.Namespace) -> MarkdeckConfig:
    if args.config:
        return MarkdeckConfig.from_yaml(args.config)
    return find_config()


def run_init(args: argparse.Namespace, config: MarkdeckConfig) -> int:
    init_presentation(Path.cwd(), from_template=args.template, force=args.force)
    print("Presentation initialized successfully")
    return 0


def run_export(args: argparse.Namespace, config: MarkdeckConfig) -> int:
    config = config.merged(
        template_dir=args.template,
        output_dir=args.output,
        inline=args.inline,
        strip_notes=args.strip_notes,
        strip_fragments=args.handouts,
        fix_relative_paths=args.fix_relative_paths,
        separate_stylesheet=args.separate_stylesheet,
    )
    files = find_markdown_files(args.files)
    exporter = Exporter(
        config.template_dir,
        config.transform_options(),
        separate_stylesheet=config.separate_stylesheet,
    )
    result = exporter.export_all(files, config.output_dir, stop_on_error=not args.keep_going)
    print(f"Exported {len(result.exported_files)} file(s) to {config.output_dir}")
    return 0 if result.ok else 1


def run_transform(args: argparse.Namespace, config: MarkdeckConfig) -> int:
    files = find_markdown_files(args.files)
    options = TransformOptions(
        strip_notes=args.strip_notes,
        strip_fragments=args.strip_fragments,
        embed_images=args.embed_images,
        inline_embedded_markup=config.inline_embedded_markup,
    )
    rewriter = SlideRewriter(options, extract_images_dir=args.extract_images)
    result = rewriter.transform_all(files, args.output, stop_on_error=not args.keep_going)
    print(f"Transformed {len(result.exported_files)} file(s)")
    return 0 if result.ok else 1


COMMANDS = {
    "init": run_init,
    "export": run_export,
    "transform": run_transform,
}


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    try:
        config = _load_config(args)
        return COMMANDS[args.command](args, config)
    except MarkdeckError as e:
        print(f"An error occurred during {args.command}: {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
