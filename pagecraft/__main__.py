"""CLI entry point for pagecraft.

Commands:
    compile FILE   Compile a template and report errors or statistics
    render FILE    Compile a template and print placed render instructions
    explain MSG    Turn a raw error message into a user-facing explanation
"""

import argparse
import json
import sys
from pathlib import Path

from dotenv import load_dotenv

from pagecraft.compiler import CompilationResult, compile_template
from pagecraft.config import EnvVar, get_compiler_limits, get_environment
from pagecraft.core.log import get_logger, setup_logging
from pagecraft.errors import format_for_display, parse_template_error
from pagecraft.registry import build_default_registry
from pagecraft.render import render_template

# Load environment variables from .env file
load_dotenv()

logger = get_logger("cli")


def _compile_file(args: argparse.Namespace) -> CompilationResult | None:
    path: Path = args.file
    if not path.exists():
        logger.error(f"Template not found: {path}")
        return None
    overrides = {"strict_attributes": False} if args.lenient else {}
    return compile_template(
        path.read_text(encoding="utf-8"),
        build_default_registry(),
        get_compiler_limits(**overrides),
    )


def _print_errors(result: CompilationResult) -> None:
    for error in result.errors:
        print(format_for_display(error))


# =============================================================================
# Commands
# =============================================================================


def cmd_compile(args: argparse.Namespace) -> int:
    """Handle the compile command."""
    result = _compile_file(args)
    if result is None:
        return 1

    if args.json:
        print(result.model_dump_json(indent=2, by_alias=True))
        return 0 if result.success else 1

    if not result.success:
        _print_errors(result)
        return 1

    for warning in result.warnings:
        logger.warning(warning)
    stats = result.stats
    islands = sum(1 for _ in result.ast.iter_islands())
    print(f"Compiled {args.file}")
    print(f"  nodes:      {stats.node_count}")
    print(f"  max depth:  {stats.max_depth}")
    print(f"  size:       {stats.size_kb:.1f}KB")
    print(f"  islands:    {islands}")
    for component, count in sorted(stats.component_counts.items()):
        print(f"    {component}: {count}")
    return 0


def cmd_render(args: argparse.Namespace) -> int:
    """Handle the render command."""
    result = _compile_file(args)
    if result is None:
        return 1
    if not result.success:
        _print_errors(result)
        return 1

    rendered = render_template(result.ast)
    payload = {
        "css": rendered.css,
        "islands": [island.model_dump(mode="json") for island in rendered.islands],
    }
    print(json.dumps(payload, indent=2))
    return 0


def cmd_explain(args: argparse.Namespace) -> int:
    """Handle the explain command."""
    error = parse_template_error(" ".join(args.message), build_default_registry())
    if args.json:
        print(error.model_dump_json(indent=2, by_alias=True))
    else:
        print(format_for_display(error))
    return 0


# =============================================================================
# Main
# =============================================================================


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="pagecraft",
        description="Compile and place component-based page templates",
    )
    subparsers = parser.add_subparsers(dest="command", help="Command to run")

    compile_parser = subparsers.add_parser("compile", help="Compile a template")
    compile_parser.add_argument("file", type=Path, help="Template file")
    compile_parser.add_argument(
        "--json", action="store_true", help="Print the full compilation result"
    )
    compile_parser.add_argument(
        "--lenient",
        action="store_true",
        help="Report unknown attributes as warnings instead of errors",
    )
    compile_parser.set_defaults(func=cmd_compile)

    render_parser = subparsers.add_parser(
        "render", help="Compile a template and print placed islands"
    )
    render_parser.add_argument("file", type=Path, help="Template file")
    render_parser.add_argument(
        "--lenient",
        action="store_true",
        help="Report unknown attributes as warnings instead of errors",
    )
    render_parser.set_defaults(func=cmd_render)

    explain_parser = subparsers.add_parser(
        "explain", help="Explain a raw template error message"
    )
    explain_parser.add_argument("message", nargs="+", help="Raw error message")
    explain_parser.add_argument(
        "--json", action="store_true", help="Print the structured error"
    )
    explain_parser.set_defaults(func=cmd_explain)

    return parser


def main(argv: list[str] | None = None) -> int:
    """Main entry point for the CLI."""
    parser = build_parser()
    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        return 1

    setup_logging(get_environment(EnvVar.LOG_LEVEL))
    return args.func(args)


if __name__ == "__main__":
    sys.exit(main())
