"""CLI entrypoints for docctx commands."""

from __future__ import annotations

import argparse
import json
import sys

from .analysis import ProjectAnalyzer
from .config import ConfigError
from .constants import ANALYSIS_STRATEGIES, TASK_TYPES
from .insights import assess_readiness, build_recommendations
from .logging import configure_logging
from .report import analysis_to_dict, selection_to_dict
from .service import run_service


def _add_verbose_option(
    parser: argparse.ArgumentParser, *, suppress_default: bool = False
) -> None:
    kwargs: dict[str, object] = {
        "action": "store_true",
        "help": "Increase log verbosity for troubleshooting.",
    }
    kwargs["default"] = argparse.SUPPRESS if suppress_default else False
    parser.add_argument("-v", "--verbose", **kwargs)


def _add_common_options(parser: argparse.ArgumentParser) -> None:
    _add_verbose_option(parser, suppress_default=True)
    parser.add_argument(
        "path",
        nargs="?",
        default=".",
        help="Path to the project root (defaults to current directory).",
    )
    parser.add_argument(
        "--strategy",
        choices=ANALYSIS_STRATEGIES,
        default=None,
        help="Analysis depth strategy (defaults to the configured one).",
    )


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="docctx",
        description="Analyse project documentation and select token-budgeted context for AI tasks.",
    )
    _add_verbose_option(parser)
    subparsers = parser.add_subparsers(dest="command", required=True)

    analyze_parser = subparsers.add_parser(
        "analyze",
        help="Analyse a project and print a summary of its documentation.",
    )
    _add_common_options(analyze_parser)
    analyze_parser.add_argument(
        "--json",
        action="store_true",
        help="Print the full analysis as JSON.",
    )

    select_parser = subparsers.add_parser(
        "select",
        help="Select documents for a downstream task within a token budget.",
    )
    _add_common_options(select_parser)
    select_parser.add_argument(
        "--task",
        choices=TASK_TYPES,
        default=None,
        help="Task type to select context for (defaults to the configured one).",
    )
    select_parser.add_argument(
        "--max-tokens",
        type=int,
        default=None,
        help="Override the task's token ceiling.",
    )
    select_parser.add_argument(
        "--include-content",
        action="store_true",
        help="Include document bodies in the output.",
    )

    readiness_parser = subparsers.add_parser(
        "readiness",
        help="Score how ready the documentation is for marketing content.",
    )
    _add_common_options(readiness_parser)

    serve_parser = subparsers.add_parser(
        "serve",
        help="Run the HTTP service.",
    )
    _add_verbose_option(serve_parser, suppress_default=True)
    serve_parser.add_argument("--host", default="127.0.0.1", help="Interface to bind (default: 127.0.0.1).")
    serve_parser.add_argument("--port", type=int, default=8000, help="Port to listen on (default: 8000).")

    return parser


def main(argv: list[str] | None = None) -> None:
    """CLI entrypoint for docctx commands."""
    parser = _build_parser()
    args = parser.parse_args(argv)

    configure_logging(verbose=bool(args.verbose))

    if args.command == "serve":
        run_service(host=args.host, port=args.port)
        return

    if getattr(args, "max_tokens", None) is not None and args.max_tokens <= 0:
        parser.exit(1, "--max-tokens must be a positive integer\n")

    try:
        analyzer = ProjectAnalyzer(args.path)
        analysis = analyzer.analyze(args.strategy)
    except ConfigError as exc:
        parser.exit(1, f"Invalid configuration: {exc}\n")
    except (FileNotFoundError, NotADirectoryError) as exc:
        parser.exit(1, f"{exc}\n")

    if args.command == "analyze":
        if args.json:
            _print_json(analysis_to_dict(analysis))
            return
        full_text = analysis.full_text
        metadata = analysis.structured.metadata
        print(f"Project: {metadata.name} {metadata.version}")
        print(f"Documents: {len(full_text.documents)} ({full_text.total_tokens} tokens)")
        print(f"Average priority: {full_text.average_priority:.1f}")
        counts = ", ".join(f"{name}={count}" for name, count in full_text.categories.items() if count)
        print(f"Categories: {counts or 'none'}")
    elif args.command == "select":
        selected = analyzer.select_context(analysis, args.task, max_tokens=args.max_tokens)
        payload = selection_to_dict(selected, include_content=bool(args.include_content))
        payload["recommendations"] = vars(build_recommendations(analysis, selected))
        _print_json(payload)
    elif args.command == "readiness":
        report = assess_readiness(analysis)
        print(f"Readiness score: {report.score}/100")
        for title, items in (
            ("Strengths", report.strengths),
            ("Weaknesses", report.weaknesses),
            ("Recommendations", report.recommendations),
        ):
            if items:
                print(f"{title}:")
                for item in items:
                    print(f"  - {item}")
    else:  # pragma: no cover - argparse enforces choices
        parser.exit(1, "Unknown command\n")


def _print_json(payload: object) -> None:
    print(json.dumps(payload, indent=2, ensure_ascii=False))


if __name__ == "__main__":
    main(sys.argv[1:])
