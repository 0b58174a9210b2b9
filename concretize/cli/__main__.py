from __future__ import annotations

import argparse
import logging
import os
from typing import Optional, Sequence

from concretize.cli import analyze, gdc, text


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="concretize")
    parser.add_argument(
        "--log-level",
        default=os.environ.get("LOG_LEVEL", "WARNING"),
        help="Logging level (default: $LOG_LEVEL or WARNING)",
    )
    sub = parser.add_subparsers(dest="command")
    text.register(sub)
    analyze.register(sub)
    gdc.register(sub)
    return parser


def main(argv: Optional[Sequence[str]] = None) -> None:
    parser = build_parser()
    args = parser.parse_args(argv)
    logging.basicConfig(
        level=str(args.log_level).upper(),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )
    if not hasattr(args, "func"):
        parser.print_help()
        return
    args.func(args)


if __name__ == "__main__":  # pragma: no cover
    main()
