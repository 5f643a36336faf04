"""Entry point: python -m claygen

Reads a descriptor set, generates clay wiring (and optionally stubs) into --out.
"""

from __future__ import annotations

import argparse
import functools
import logging
import sys
from pathlib import Path

from .codegen import GOFMT, gofmt, passthrough, write_files
from .errors import ClaygenError
from .generator import Generator, Options
from .imports import ImportRegistry
from .loader import load_descriptors, load_swagger_defs

logger = logging.getLogger("claygen")


def build_argument_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="claygen",
        description="Generate clay HTTP transport wiring for gRPC services",
    )
    parser.add_argument("descriptors", type=Path, help="descriptor set (JSON)")
    parser.add_argument("--out", type=Path, default=Path("."), help="output directory")
    parser.add_argument("--impl", action="store_true", default=False,
                        help="also generate implementation stubs; existing stubs are "
                             "looked up next to the claygen executable, not in --out")
    parser.add_argument("--force", action="store_true", default=False,
                        help="overwrite existing implementation stubs")
    parser.add_argument("--impl-path", default="", help="import path segment of the stubs")
    parser.add_argument("--desc-path", default="", help="import path segment of the wiring")
    parser.add_argument("--swagger-dir", type=Path, default=None,
                        help="directory holding <file>.swagger.json documents")

    fmt_group = parser.add_mutually_exclusive_group()
    fmt_group.add_argument("--gofmt", default=GOFMT, help="gofmt command")
    fmt_group.add_argument("--no-gofmt", action="store_true", default=False,
                           help="emit rendered source unformatted")

    parser.add_argument("-v", "--verbose", action="store_true", default=False)
    return parser


def main(argv: list[str] | None = None) -> int:
    args = build_argument_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(levelname)s %(name)s: %(message)s",
    )

    registry = ImportRegistry()
    try:
        files = load_descriptors(args.descriptors, registry)
        swagger_defs = load_swagger_defs(args.swagger_dir, files) if args.swagger_dir else {}
        options = Options(
            impl=args.impl,
            force=args.force,
            impl_path=args.impl_path,
            desc_path=args.desc_path,
            swagger_defs=swagger_defs,
        )
        formatter = passthrough if args.no_gofmt else functools.partial(gofmt, command=args.gofmt)
        outputs = Generator(registry, options, formatter=formatter).generate(files)
        write_files(outputs, args.out)
    except (ClaygenError, OSError) as exc:
        logger.error("%s", exc)
        return 1

    logger.info("Generated %d files", len(outputs))
    return 0


if __name__ == "__main__":
    sys.exit(main())
