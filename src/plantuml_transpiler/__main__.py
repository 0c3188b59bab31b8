"""Command line entry point: ``python -m plantuml_transpiler``."""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

from . import GeneratorOptions, get_supported_languages, transpile


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(
        prog="plantuml-transpiler",
        description="Generate source code skeletons from a PlantUML class diagram",
    )
    parser.add_argument("--input", "-i", help="Input .puml file (default: read stdin)")
    parser.add_argument("--output", "-o", help="Output file (default: write stdout)")
    parser.add_argument(
        "--language",
        "-l",
        help=f"Target language: {', '.join(get_supported_languages())}",
    )
    parser.add_argument("--indent", type=int, help="Spaces per indent level")
    parser.add_argument(
        "--order-by-inheritance",
        action="store_true",
        help="Emit supertypes before their subtypes",
    )
    parser.add_argument(
        "--list-languages", action="store_true", help="List supported languages and exit"
    )
    parser.add_argument("--verbose", "-v", action="store_true", help="Log parser diagnostics")
    args = parser.parse_args(argv)

    if args.list_languages:
        print("\n".join(get_supported_languages()))
        return 0
    if not args.language:
        parser.error("the following arguments are required: --language/-l")
    if args.indent is not None and args.indent < 0:
        parser.error("--indent must not be negative")

    if args.verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(levelname)s %(name)s: %(message)s")

    if args.input:
        input_path = Path(args.input)
        try:
            content = input_path.read_text(encoding="utf-8")
        except OSError as exc:
            print(f"Error: Cannot read {input_path}: {exc}", file=sys.stderr)
            return 1
    else:
        content = sys.stdin.read()

    options = GeneratorOptions(
        indent_size=args.indent,
        order_by_inheritance=args.order_by_inheritance,
    )
    try:
        code = transpile(content, args.language, options)
    except ValueError as exc:
        parser.error(str(exc))

    if args.output:
        Path(args.output).write_text(code, encoding="utf-8")
        print(f"  Code written to {args.output}", file=sys.stderr)
    else:
        sys.stdout.write(code)
    return 0


if __name__ == "__main__":
    sys.exit(main())
