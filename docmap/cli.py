"""CLI entrypoints for docmap commands."""

from __future__ import annotations

import argparse
import sys
from pathlib import Path

from .config import ConfigError
from .loaders import CorpusError
from .logging import configure_logging
from .orchestrator import Orchestrator


def _add_verbosity_options(
    parser: argparse.ArgumentParser, *, suppress_default: bool = False
) -> None:
    default: object = argparse.SUPPRESS if suppress_default else False
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        default=default,
        help="Increase log verbosity for troubleshooting.",
    )
    parser.add_argument(
        "-q",
        "--quiet",
        action="store_true",
        default=default,
        help="Only report warnings and errors.",
    )


def _add_path_argument(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "path",
        nargs="?",
        default=".",
        help="Path to the project root (defaults to current directory).",
    )


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="docmap",
        description="Build the cross-referenced entity map and test coverage for a project.",
    )
    _add_verbosity_options(parser)
    parser.add_argument(
        "--log-file",
        type=Path,
        default=None,
        help="Also write DEBUG logs to this file.",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    build_parser = subparsers.add_parser(
        "build",
        help="Assemble the entity graph and write the details snapshot.",
    )
    _add_verbosity_options(build_parser, suppress_default=True)
    _add_path_argument(build_parser)
    build_parser.add_argument(
        "-o",
        "--output",
        type=Path,
        default=None,
        help="Snapshot destination (overrides paths.output in .docmap.yml).",
    )

    serve_parser = subparsers.add_parser(
        "serve",
        help="Serve the assembled entity map over HTTP.",
    )
    _add_verbosity_options(serve_parser, suppress_default=True)
    _add_path_argument(serve_parser)
    serve_parser.add_argument("--host", default="127.0.0.1", help="Interface to bind.")
    serve_parser.add_argument("--port", type=int, default=8000, help="Port to listen on.")

    return parser


def main(argv: list[str] | None = None) -> None:
    """CLI entrypoint for docmap commands."""
    parser = _build_parser()
    args = parser.parse_args(argv)

    configure_logging(
        verbose=bool(args.verbose),
        quiet=bool(args.quiet),
        log_file=args.log_file,
    )

    if args.command == "build":
        orchestrator = Orchestrator()
        try:
            outcome = orchestrator.build(args.path)
        except (ConfigError, CorpusError) as exc:
            parser.exit(1, f"docmap build failed: {exc}\n")
        snapshot_path = orchestrator.write(outcome, output=args.output)
        entities = sum(outcome.counts().values())
        print(f"Mapped {entities} entities; snapshot written to {_relativize(snapshot_path)}")
        if outcome.excluded:
            print(f"{outcome.excluded} malformed records were excluded (see warnings above)")
    elif args.command == "serve":
        from .service.app import run_service

        run_service(args.path, host=args.host, port=args.port)
    else:  # pragma: no cover - argparse enforces choices
        parser.exit(1, "Unknown command\n")


def _relativize(path: Path) -> str:
    try:
        return str(path.relative_to(Path.cwd()))
    except ValueError:
        return str(path)


if __name__ == "__main__":
    main(sys.argv[1:])
