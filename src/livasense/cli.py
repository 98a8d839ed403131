"""Command-line interface for livasense."""

import argparse
import json
import logging
import sys
from dataclasses import replace
from pathlib import Path

from . import __version__
from .config_store import SettingsStore
from .diagnostics import Severity, violation_to_diagnostic
from .errors import LivasenseError
from .models import Settings
from .semantic import (
    ContainerSymbol,
    Span,
    Symbol,
    add_extensions,
    detect_language,
    resolve_definition,
    resolve_references,
    signature_help,
    word_at,
)
from .utils import check_position, parse_position, split_lines
from .workspace import analyze_text

log = logging.getLogger(__name__)


def load_settings() -> Settings:
    """Load settings and register their file extensions."""
    store = SettingsStore()
    settings = store.load()
    log.debug("Settings loaded from %s", store.config_path if store.exists() else "defaults")
    add_extensions(settings.language_id, settings.file_extensions)
    return settings


def read_document(path: str) -> str:
    """
    Read a Liva source file.

    Raises:
        UnsupportedLanguageError: If the extension has no registered indexer.
    """
    detect_language(path)
    return Path(path).read_text(encoding="utf-8")


def format_span(span: Span) -> str:
    """Format a span as 1-based ``line:col``."""
    return f"{span.start_line + 1}:{span.start_character + 1}"


def _print_symbol(symbol: Symbol, indent: str = "  ") -> None:
    detail = f"  [{symbol.detail}]" if symbol.detail else ""
    lines_str = (
        f"{symbol.span.start_line + 1}"
        if symbol.span.start_line == symbol.span.end_line
        else f"{symbol.span.start_line + 1}-{symbol.span.end_line + 1}"
    )
    print(f"{indent}{symbol.kind.value:<12} {symbol.label}{detail}  (line {lines_str})")
    if isinstance(symbol, ContainerSymbol):
        if symbol.implements:
            print(f"{indent}{'':<12} implements {', '.join(symbol.implements)}")
        for member in symbol.members:
            _print_symbol(member, indent + "    ")


def _locate(args: argparse.Namespace) -> tuple[str, str | None, int, int]:
    """Read the file and return (text, word, line, character) for args.position."""
    text = read_document(args.path)
    line, character = parse_position(args.position)
    check_position(split_lines(text), line, character)
    word = word_at(text, line, character)
    return text, word[0] if word else None, line, character


def cmd_outline(args: argparse.Namespace) -> int:
    """Print the document outline."""
    try:
        settings = load_settings()
        if args.variables:
            settings = replace(settings, include_variables=True)
        text = read_document(args.path)
        model, _ = analyze_text(text, settings)

        if args.json:
            print(json.dumps(model.to_dict(), indent=2))
            return 0

        if not len(model):
            print(f"No symbols found in {args.path}")
            return 0

        print(f"Outline of {args.path} ({len(model)} top-level symbol(s)):")
        print()
        for symbol in model:
            _print_symbol(symbol)
        return 0

    except LivasenseError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1


def cmd_check(args: argparse.Namespace) -> int:
    """Check interface conformance of the classes in a file."""
    try:
        settings = replace(load_settings(), validate_interfaces=True)
        text = read_document(args.path)
        _, violations = analyze_text(text, settings)
        diagnostics = [violation_to_diagnostic(v) for v in violations]

        if args.json:
            print(json.dumps([v.to_dict() for v in violations], indent=2))
        elif not diagnostics:
            print(f"No interface problems in {args.path}")
        else:
            for diag in diagnostics:
                first_line = diag.message.split("\n")[0]
                print(f"{args.path}:{format_span(diag.span)}: {diag.severity.value}: {first_line}")
                for extra in diag.message.split("\n")[1:]:
                    if extra.strip():
                        print(f"    {extra}")
            errors = sum(1 for d in diagnostics if d.severity == Severity.ERROR)
            print()
            print(f"{errors} error(s), {len(diagnostics) - errors} warning(s)")

        if args.fail_on_error and any(d.severity == Severity.ERROR for d in diagnostics):
            return 2
        return 0

    except LivasenseError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1


def cmd_definition(args: argparse.Namespace) -> int:
    """Find where the identifier at a position is declared."""
    try:
        load_settings()
        text, word, _, _ = _locate(args)
        spans = resolve_definition(text, word) if word else []
        if not args.all:
            spans = spans[:1]

        if args.json:
            print(json.dumps({"identifier": word, "locations": [s.to_dict() for s in spans]}, indent=2))
        elif not spans:
            print(f"No definition found for '{word}'" if word else "No identifier at position")
            return 1
        else:
            for span in spans:
                print(f"{args.path}:{format_span(span)}")
        return 0

    except LivasenseError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1


def cmd_references(args: argparse.Namespace) -> int:
    """List every occurrence of the identifier at a position."""
    try:
        load_settings()
        text, word, _, _ = _locate(args)
        spans = (
            resolve_references(text, word, include_declaration=not args.no_declaration)
            if word
            else []
        )

        if args.json:
            print(json.dumps({"identifier": word, "locations": [s.to_dict() for s in spans]}, indent=2))
            return 0

        if not spans:
            print(f"No references found for '{word}'" if word else "No identifier at position")
            return 0

        lines = split_lines(text)
        print(f"References to '{word}' ({len(spans)}):")
        for span in spans:
            print(f"  {args.path}:{format_span(span)}  {lines[span.start_line].strip()}")
        return 0

    except LivasenseError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1


def cmd_signature(args: argparse.Namespace) -> int:
    """Show parameter hints for the call open at a position."""
    try:
        settings = load_settings()
        text = read_document(args.path)
        line, character = parse_position(args.position)
        check_position(split_lines(text), line, character)
        model, _ = analyze_text(text, settings)
        help_ = signature_help(text, line, character, model=model)

        if help_ is None:
            print("No signature at position")
            return 1

        if args.json:
            print(json.dumps(help_.to_dict(), indent=2))
            return 0

        print(help_.label)
        for i, param in enumerate(help_.parameters):
            marker = ">" if i == help_.active_parameter else " "
            print(f"  {marker} {param}")
        return 0

    except LivasenseError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1


def cmd_serve(args: argparse.Namespace) -> int:
    """Start the API server."""
    try:
        import uvicorn

        settings = load_settings()

        print("Starting livasense API server...")
        print(f"Language: {settings.language_id} ({', '.join(settings.file_extensions)})")
        print(f"API docs: http://{args.host}:{args.port}/docs")
        print()

        # When reload is enabled, uvicorn requires the app as an import string
        app_target = "livasense.api:app" if args.reload else None
        if app_target is None:
            from .api import app
            app_target = app

        uvicorn.run(
            app_target,
            host=args.host,
            port=args.port,
            reload=args.reload,
            workers=1,  # Workspace state lives in the process
        )
        return 0

    except ImportError:
        print("Error: uvicorn not installed. Run: pip install uvicorn", file=sys.stderr)
        return 1
    except LivasenseError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1


def cmd_config_show(args: argparse.Namespace) -> int:
    try:
        store = SettingsStore()
        settings = store.load()
        data = settings.to_dict()
        data.pop("schema_version")

        if args.json:
            print(json.dumps(data, indent=2))
            return 0

        source = store.config_path if store.exists() else "defaults"
        print(f"Settings ({source}):")
        for key, value in data.items():
            print(f"  {key:<20} {value}")
        return 0

    except LivasenseError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1


def cmd_config_init(args: argparse.Namespace) -> int:
    try:
        store = SettingsStore()
        store.init(force=args.force)
        print(f"Wrote default settings to {store.config_path}")
        return 0

    except LivasenseError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1


def cmd_config_set(args: argparse.Namespace) -> int:
    try:
        store = SettingsStore()
        settings = store.set_value(args.key, args.value)
        print(f"{args.key} = {getattr(settings, args.key)}")
        return 0

    except LivasenseError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1


def create_parser() -> argparse.ArgumentParser:
    """Create the argument parser."""
    parser = argparse.ArgumentParser(
        prog="livasense",
        description="Outline, interface checks and name lookup for Liva source files",
    )
    parser.add_argument(
        "--version", action="version", version=f"%(prog)s {__version__}"
    )
    parser.add_argument(
        "--verbose", "-v", action="store_true", help="Enable debug logging"
    )

    subparsers = parser.add_subparsers(dest="command", help="Commands")

    # outline
    outline_parser = subparsers.add_parser("outline", help="Show the symbol outline of a file")
    outline_parser.add_argument("path", help="Liva source file")
    outline_parser.add_argument(
        "--variables", action="store_true", help="Include top-level let bindings"
    )
    outline_parser.add_argument("--json", action="store_true", help="Output as JSON")

    # check
    check_parser = subparsers.add_parser(
        "check", help="Check that classes implement their declared interfaces"
    )
    check_parser.add_argument("path", help="Liva source file")
    check_parser.add_argument("--json", action="store_true", help="Output as JSON")
    check_parser.add_argument(
        "--fail-on-error", action="store_true",
        help="Exit with code 2 if any error is reported"
    )

    # definition
    definition_parser = subparsers.add_parser(
        "definition", help="Find the declaration of the identifier at LINE:COL"
    )
    definition_parser.add_argument("path", help="Liva source file")
    definition_parser.add_argument("position", help="1-based LINE:COL")
    definition_parser.add_argument(
        "--all", "-a", action="store_true", help="Show every candidate, not just the first"
    )
    definition_parser.add_argument("--json", action="store_true", help="Output as JSON")

    # references
    references_parser = subparsers.add_parser(
        "references", help="Find all occurrences of the identifier at LINE:COL"
    )
    references_parser.add_argument("path", help="Liva source file")
    references_parser.add_argument("position", help="1-based LINE:COL")
    references_parser.add_argument(
        "--no-declaration", action="store_true", help="Omit let/const/fn declaration lines"
    )
    references_parser.add_argument("--json", action="store_true", help="Output as JSON")

    # signature
    signature_parser = subparsers.add_parser(
        "signature", help="Show parameter hints for the call open at LINE:COL"
    )
    signature_parser.add_argument("path", help="Liva source file")
    signature_parser.add_argument("position", help="1-based LINE:COL")
    signature_parser.add_argument("--json", action="store_true", help="Output as JSON")

    # serve
    serve_parser = subparsers.add_parser("serve", help="Start the API server")
    serve_parser.add_argument(
        "--host", default="127.0.0.1", help="Host to bind to (default: 127.0.0.1)"
    )
    serve_parser.add_argument(
        "--port", "-p", type=int, default=8000, help="Port to bind to (default: 8000)"
    )
    serve_parser.add_argument(
        "--reload", action="store_true", help="Enable auto-reload for development"
    )

    # config (subcommand group)
    config_parser = subparsers.add_parser("config", help="Show or change settings")
    config_subparsers = config_parser.add_subparsers(dest="config_command")

    config_show_parser = config_subparsers.add_parser("show", help="Show current settings")
    config_show_parser.add_argument("--json", action="store_true", help="Output as JSON")

    config_init_parser = config_subparsers.add_parser("init", help="Write default settings")
    config_init_parser.add_argument(
        "--force", "-f", action="store_true", help="Overwrite existing settings"
    )

    config_set_parser = config_subparsers.add_parser("set", help="Change one setting")
    config_set_parser.add_argument("key", help="Setting name")
    config_set_parser.add_argument("value", help="New value (lists are comma-separated)")

    return parser


def main() -> int:
    """Main entry point."""
    parser = create_parser()
    args = parser.parse_args()

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    if not args.command:
        parser.print_help()
        return 0

    # Handle config subcommands
    if args.command == "config":
        if not getattr(args, "config_command", None):
            parser.parse_args(["config", "--help"])
            return 0
        config_commands = {
            "show": cmd_config_show,
            "init": cmd_config_init,
            "set": cmd_config_set,
        }
        return config_commands[args.config_command](args)

    commands = {
        "outline": cmd_outline,
        "check": cmd_check,
        "definition": cmd_definition,
        "references": cmd_references,
        "signature": cmd_signature,
        "serve": cmd_serve,
    }

    cmd_func = commands.get(args.command)
    if cmd_func:
        return cmd_func(args)

    parser.print_help()
    return 0


if __name__ == "__main__":
    sys.exit(main())
