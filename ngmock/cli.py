"""CLI entrypoints for ngmock commands."""

from __future__ import annotations

import argparse
import sys
from pathlib import Path

from .config import ConfigError, RunOptions, load_config
from .logging import configure_logging
from .orchestrator import Orchestrator, describe


def _add_verbose_option(
    parser: argparse.ArgumentParser, *, suppress_default: bool = False
) -> None:
    kwargs: dict[str, object] = {
        "action": "store_true",
        "help": "Increase log verbosity for troubleshooting.",
    }
    if suppress_default:
        kwargs["default"] = argparse.SUPPRESS
    else:
        kwargs["default"] = False
    parser.add_argument(
        "-v",
        "--verbose",
        **kwargs,
    )


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="ngmock",
        description="Generate and maintain mocks for Angular components, directives, pipes and services.",
    )
    _add_verbose_option(parser)
    subparsers = parser.add_subparsers(dest="command", required=True)

    generate_parser = subparsers.add_parser(
        "generate",
        help="Generate mocks for the given files or for a whole application.",
    )
    _add_verbose_option(generate_parser, suppress_default=True)
    generate_parser.add_argument(
        "paths",
        nargs="*",
        help="Source files to mock (ignored when --app-dir is set).",
    )
    generate_parser.add_argument(
        "--app-dir",
        dest="app_dir",
        help="Application root; mocks every mockable file and maintains aggregators.",
    )
    generate_parser.add_argument(
        "--src-dir",
        dest="src_dir",
        help="Source folder relative to --app-dir (defaults to 'src').",
    )
    generate_parser.add_argument(
        "--exclude",
        action="append",
        default=[],
        help="Glob of paths to leave out of discovery. Repeatable.",
    )
    generate_parser.add_argument(
        "-f",
        "--force",
        action="store_true",
        help="Regenerate mocks that already exist.",
    )
    generate_parser.add_argument(
        "--skip-aggregators",
        "--skip-barrel",
        dest="skip_aggregators",
        action="store_true",
        help="Do not touch the files under mocks/.",
    )
    generate_parser.add_argument(
        "--refresh-aggregators",
        "--refresh-barrel",
        dest="refresh_aggregators",
        action="store_true",
        help="Rebuild the files under mocks/ instead of merging into them.",
    )
    generate_parser.add_argument(
        "--config",
        help="Path to .ngmock.yml (defaults to the app directory or current directory).",
    )
    generate_parser.add_argument(
        "--log-file",
        dest="log_file",
        help="Also write detailed logs to this file.",
    )

    serve_parser = subparsers.add_parser(
        "serve",
        help="Run the HTTP service exposing mock generation.",
    )
    _add_verbose_option(serve_parser, suppress_default=True)
    serve_parser.add_argument("--host", default="127.0.0.1")
    serve_parser.add_argument("--port", type=int, default=8000)

    return parser


def main(argv: list[str] | None = None) -> None:
    """CLI entrypoint for ngmock commands."""
    parser = _build_parser()
    args = parser.parse_args(argv)
    verbose = bool(args.verbose)

    if args.command == "serve":
        configure_logging(verbose=verbose)
        from .service import run_service

        run_service(host=args.host, port=args.port)
        return

    config_location = Path(args.config or args.app_dir or ".")
    try:
        config = load_config(config_location)
    except ConfigError as exc:
        parser.exit(1, f"{exc}\n")

    log_file = Path(args.log_file) if args.log_file else config.log_file
    configure_logging(verbose=verbose, log_file=log_file)

    options = RunOptions.from_sources(
        config,
        app_dir=args.app_dir,
        src_dir=args.src_dir,
        force=args.force,
        skip_aggregators=args.skip_aggregators,
        refresh_aggregators=args.refresh_aggregators,
        verbose=verbose,
        exclude_paths=args.exclude,
    )

    try:
        result = Orchestrator().run(args.paths, options)
    except (FileNotFoundError, NotADirectoryError) as exc:
        parser.exit(1, f"{exc}\n")
    except Exception as exc:  # pragma: no cover
        parser.exit(1, f"ngmock generate failed: {exc}\nRun with --verbose for more details.\n")

    print(describe(result))


if __name__ == "__main__":
    main(sys.argv[1:])
