"""Command-line entry point: ``line-editor [file]``."""
import argparse
import logging
import os
import sys
from typing import Optional

from .editor import Editor

LOG_LEVEL_ENV = "LINE_EDITOR_LOG_LEVEL"
ENCODING_ENV = "LINE_EDITOR_ENCODING"


def configure_logging(level: Optional[str] = None):
    """Send library logs to stderr so they stay out of the edit session."""
    level = (level or os.environ.get(LOG_LEVEL_ENV) or "WARNING").upper()
    logging.basicConfig(
        level=getattr(logging, level, logging.WARNING),
        stream=sys.stderr,
        format="%(asctime)s %(name)s %(levelname)s: %(message)s",
    )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="line-editor", description="Line-oriented text editor.")
    parser.add_argument("file", nargs="?", default=None, help="File to edit.")
    return parser


def main(argv: Optional[list[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    configure_logging()

    editor = Editor(encoding=os.environ.get(ENCODING_ENV, "utf-8"))
    if args.file:
        editor.open(args.file)

    return editor.run()


if __name__ == "__main__":
    sys.exit(main())
