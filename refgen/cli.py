"""CLI entrypoints for refgen commands."""

from __future__ import annotations

import argparse
import sys
from pathlib import Path

from .config import ConfigurationError
from .generators import DEFAULT_PIPELINE, GENERATORS
from .logging import configure_logging
from .orchestrator import Orchestrator

_HELP = {
    "db-schema": "Generate the database ER diagram and table reference.",
    "state-machines": "Generate task and step state machine diagrams.",
    "crate-deps": "Generate the workspace crate dependency graph.",
    "error-guide": "Generate the error troubleshooting guide (AI-assisted when available).",
    "config-guide": "Generate the configuration operational guide (AI-assisted when available).",
    "adr-summary": "Generate the decision record summary table (AI-assisted when available).",
}


def _add_verbose_option(
    parser: argparse.ArgumentParser, *, suppress_default: bool = False
) -> None:
    kwargs: dict[str, object] = {
        "action": "store_true",
        "help": "Increase log verbosity for troubleshooting.",
    }
    kwargs["default"] = argparse.SUPPRESS if suppress_default else False
    parser.add_argument("-v", "--verbose", **kwargs)


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="refgen",
        description="Generate reference documentation from a source checkout.",
    )
    _add_verbose_option(parser)
    parser.add_argument(
        "--root",
        default=".",
        help="Docs repository root holding .env and .refgen.yml (defaults to current directory).",
    )
    parser.add_argument(
        "--log-file",
        type=Path,
        default=None,
        help="Also write logs to this file.",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    for name in GENERATORS:
        sub = subparsers.add_parser(name, help=_HELP.get(name))
        _add_verbose_option(sub, suppress_default=True)

    all_parser = subparsers.add_parser(
        "all",
        help=f"Run the default pipeline ({', '.join(DEFAULT_PIPELINE)}).",
    )
    _add_verbose_option(all_parser, suppress_default=True)
    return parser


def main(argv: list[str] | None = None) -> None:
    """CLI entrypoint for refgen commands."""
    parser = _build_parser()
    args = parser.parse_args(argv)

    configure_logging(verbose=bool(args.verbose), log_file=args.log_file)

    names = list(DEFAULT_PIPELINE) if args.command == "all" else [args.command]
    orchestrator: Orchestrator | None = None
    try:
        orchestrator = Orchestrator.for_root(Path(args.root))
        results = orchestrator.run_many(names)
    except ConfigurationError as exc:
        parser.exit(1, f"ERROR: {exc.remediation()}\n")
    except Exception as exc:  # pragma: no cover - unexpected failure
        parser.exit(
            1, f"refgen {args.command} failed: {exc}\nRun with --verbose for more details.\n"
        )
    finally:
        if orchestrator is not None:
            orchestrator.close()

    for result in results:
        print(f"{result.name}: wrote {_relativize(result.path)} ({result.entity_count} entities)")


def _relativize(path: Path) -> str:
    try:
        return str(path.relative_to(Path.cwd()))
    except ValueError:
        return str(path)


if __name__ == "__main__":
    main(sys.argv[1:])
