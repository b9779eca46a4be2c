"""
CLI interface for prettyrec.

Usage:
    python -m prettyrec demo
    python -m prettyrec demo --skip-header --unordered-first
"""

import argparse

from .demo import sample_person
from .pretty import PrettyPrinter, RenderOptions, print_pretty


def demo_main(args):
    """Render the sample Person record to stdout."""
    printer = PrettyPrinter(
        indent=args.indent,
        unordered_last=not args.unordered_first,
        fully_qualified_names=args.fully_qualified,
    )
    options = RenderOptions(skip_header=args.skip_header)
    print_pretty(sample_person(), options, printer=printer)


def main(argv=None):
    """Main CLI entry point for prettyrec."""
    parser = argparse.ArgumentParser(
        description="Render annotated records as indented text", prog="python -m prettyrec"
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    demo_parser = subparsers.add_parser("demo", help="Render a sample Person record with a friend cycle")
    demo_parser.add_argument(
        "--skip-header", action="store_true", help="Omit type name headers of untitled records"
    )
    demo_parser.add_argument(
        "--unordered-first", action="store_true", help="Place fields without ord before ordered ones"
    )
    demo_parser.add_argument(
        "--fully-qualified", action="store_true", help="Print type headers as module.Class"
    )
    demo_parser.add_argument("--indent", type=int, default=4, help="Spaces per nesting level (default: 4)")

    args = parser.parse_args(argv)

    if args.command == "demo":
        demo_main(args)
    elif args.command is None:
        parser.print_help()
        print("\nAvailable commands:")
        print("  demo    Render a sample record")


if __name__ == "__main__":
    main()
