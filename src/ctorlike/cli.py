"""Command-line interface for ctorlike."""

import argparse
import dataclasses
import json
import logging
import sys
from pathlib import Path

from . import __version__
from .analysis import ConstructorLikeFinder, FinderResult, Validation
from .config import AnalyzerConfig, load_config
from .errors import CtorlikeError
from .tree_loader import load_tree


def get_config(args: argparse.Namespace) -> AnalyzerConfig:
    """Load config and apply command-line overrides."""
    config = load_config(Path(args.config) if args.config else None)
    if getattr(args, "annotation", None):
        config = dataclasses.replace(config, annotation=args.annotation)
    return config


def cmd_analyze(args: argparse.Namespace) -> int:
    """Analyze a declaration tree and report pseudo-constructors."""
    try:
        config = get_config(args)
        module = load_tree(args.tree, config)
        # Rejections are printed below; keep the log quiet unless asked.
        finder = ConstructorLikeFinder(
            dataclasses.replace(config, log_rejections=args.log_rejections)
        )
        result = finder.find(module)

        if args.json:
            from .report import result_to_dict
            data = result_to_dict(result, config)
            print(json.dumps(data, indent=2))
        else:
            _print_result(result)

        if args.write_report:
            from .report import write_report
            write_report(result, args.write_report, config)
            print(f"Wrote report: {args.write_report}", file=sys.stderr if args.json else sys.stdout)

        if args.write_md:
            from .report import write_markdown_report
            write_markdown_report(result, args.write_md)
            print(f"Wrote markdown summary: {args.write_md}", file=sys.stderr if args.json else sys.stdout)

        if args.fail_on_rejection and result.rejected:
            return 2

        return 0

    except CtorlikeError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1


def _print_result(result: FinderResult) -> None:
    print(f"Module: {result.module.name}")
    print()

    accepted = {target: pcs for target, pcs in result.constructors.items() if pcs}
    count = sum(len(pcs) for pcs in accepted.values())
    if accepted:
        print(f"CONSTRUCTORS ({count}):")
        for target, constructors in accepted.items():
            print(f"  {target.qualified_name}")
            for pc in constructors:
                helper = f" via {pc.helper.qualified_name}" if pc.helper else ""
                print(f"    {pc.function.ref.qualified_name} ({pc.pattern}){helper}")
        print()

    if result.rejected:
        print(f"REJECTED ({len(result.rejected)}):")
        for rejection in result.rejected:
            print(f"  {rejection.function.ref.qualified_name}")
            print(f"    Reason: {rejection.reason.name} ({rejection.reason.message})")
        print()

    if not accepted and not result.rejected:
        print("No pseudo-constructor candidates found.")


def cmd_reasons(args: argparse.Namespace) -> int:
    """List the rejection reasons."""
    reasons = [v for v in Validation if v is not Validation.VALID]
    if args.json:
        print(json.dumps([{"reason": v.name, "message": v.message} for v in reasons], indent=2))
    else:
        for reason in reasons:
            print(f"{reason.name}: {reason.message}")
    return 0


def cmd_serve(args: argparse.Namespace) -> int:
    """Start the API server."""
    try:
        import uvicorn

        print("Starting ctorlike API server...")
        print(f"API docs: http://{args.host}:{args.port}/docs")
        print()

        # When reload is enabled, uvicorn requires the app as an import string
        app_target = "ctorlike.api:app" if args.reload else None
        if app_target is None:
            from .api import app
            app_target = app

        uvicorn.run(
            app_target,
            host=args.host,
            port=args.port,
            reload=args.reload,
            workers=1,
        )
        return 0

    except Exception as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1


def create_parser() -> argparse.ArgumentParser:
    """Create the argument parser."""
    parser = argparse.ArgumentParser(
        prog="ctorlike",
        description="Find factory functions that should be documented as constructors.",
    )
    parser.add_argument(
        "--version", action="version", version=f"%(prog)s {__version__}"
    )
    parser.add_argument(
        "--log-level",
        default="WARNING",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Logging level (default: WARNING)",
    )

    subparsers = parser.add_subparsers(dest="command", help="Commands")

    # analyze
    analyze_parser = subparsers.add_parser(
        "analyze", help="Analyze a declaration tree document"
    )
    analyze_parser.add_argument("tree", help="Path to the tree JSON document")
    analyze_parser.add_argument("--config", "-c", help="Path to a ctorlike.json config")
    analyze_parser.add_argument(
        "--annotation", "-a", help="Qualified name of the marker annotation"
    )
    analyze_parser.add_argument(
        "--write-report", "-w", help="Write JSON report to path"
    )
    analyze_parser.add_argument(
        "--write-md", "-m", help="Write markdown summary to path"
    )
    analyze_parser.add_argument(
        "--json", action="store_true", help="Output as JSON"
    )
    analyze_parser.add_argument(
        "--log-rejections", action="store_true",
        help="Also log each rejection as a warning"
    )
    analyze_parser.add_argument(
        "--fail-on-rejection", action="store_true",
        help="Exit with code 2 if any candidate is rejected"
    )

    # reasons
    reasons_parser = subparsers.add_parser("reasons", help="List rejection reasons")
    reasons_parser.add_argument("--json", action="store_true", help="Output as JSON")

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

    return parser


def main() -> int:
    """Main entry point."""
    parser = create_parser()
    args = parser.parse_args()

    logging.basicConfig(
        level=getattr(logging, args.log_level),
        format="%(levelname)s %(name)s: %(message)s",
    )

    if not args.command:
        parser.print_help()
        return 0

    commands = {
        "analyze": cmd_analyze,
        "reasons": cmd_reasons,
        "serve": cmd_serve,
    }

    cmd_func = commands.get(args.command)
    if cmd_func:
        return cmd_func(args)

    parser.print_help()
    return 0


if __name__ == "__main__":
    sys.exit(main())
