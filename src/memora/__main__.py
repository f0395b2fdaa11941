"""Entry point: python -m memora [list|add|delete|reflect|export|categories]

With no subcommand, lists all memories.
"""

from __future__ import annotations

import logging
import sys

from memora.cli import build_parser, needs_enhancer, run
from memora.config import load_config


def _setup_logging(level: str) -> None:
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.WARNING),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%H:%M:%S",
    )


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    if args.command is None:
        args.search, args.category = "", "All"

    config = load_config(args.config)
    _setup_logging(config.log_level)

    from memora.core import build_memora

    app = build_memora(config, with_enhancer=needs_enhancer(args))
    return run(app, args)


if __name__ == "__main__":
    sys.exit(main())
