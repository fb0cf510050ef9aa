"""CLI entrypoints for repocast commands."""

from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path

from .citations.formatting import format_citations_for_transcript
from .config import load_config
from .errors import (
    ConfigError,
    InsufficientCitations,
    InvalidRepositoryUrl,
    RepocastError,
    ValidationFailed,
)
from .logging import configure_logging
from .orchestrator import EpisodeOutcome, Orchestrator


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


def _add_config_option(
    parser: argparse.ArgumentParser, *, suppress_default: bool = False
) -> None:
    parser.add_argument(
        "--config",
        type=Path,
        default=argparse.SUPPRESS if suppress_default else None,
        help="Path to .repocast.yml or the directory containing it.",
    )


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="repocast",
        description="Build citation-grounded podcast episodes from public repositories.",
    )
    _add_verbose_option(parser)
    _add_config_option(parser)
    parser.add_argument(
        "--log-file",
        type=Path,
        default=None,
        help="Also write detailed logs to this file.",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    generate_parser = subparsers.add_parser(
        "generate",
        help="Gather verified facts and citations for a repository.",
    )
    _add_verbose_option(generate_parser, suppress_default=True)
    _add_config_option(generate_parser, suppress_default=True)
    generate_parser.add_argument("repo_url", help="Repository URL, e.g. https://github.com/OWNER/REPO")
    generate_parser.add_argument(
        "--max-wait",
        type=float,
        default=None,
        help="Seconds to wait for repository indexing (defaults to the configured budget).",
    )
    generate_parser.add_argument(
        "--script",
        action="store_true",
        help="Also generate the outline and two-speaker script.",
    )
    generate_parser.add_argument(
        "--json",
        action="store_true",
        help="Print the full result as JSON.",
    )

    serve_parser = subparsers.add_parser(
        "serve",
        help="Run the HTTP service.",
    )
    _add_verbose_option(serve_parser, suppress_default=True)
    _add_config_option(serve_parser, suppress_default=True)
    serve_parser.add_argument("--host", default="0.0.0.0", help="Interface to bind.")
    serve_parser.add_argument("--port", type=int, default=8000, help="Port to listen on.")

    return parser


def main(argv: list[str] | None = None) -> None:
    """CLI entrypoint for repocast commands."""
    parser = _build_parser()
    args = parser.parse_args(argv)

    configure_logging(verbose=bool(args.verbose), log_file=args.log_file)

    try:
        config = load_config(args.config)
    except ConfigError as exc:
        parser.exit(1, f"{exc}\n")

    if args.command == "generate":
        orchestrator = Orchestrator(config)
        try:
            outcome = orchestrator.run(
                args.repo_url,
                max_wait=args.max_wait,
                include_script=bool(args.script),
            )
        except InvalidRepositoryUrl as exc:
            parser.exit(2, f"{exc}\n")
        except ValidationFailed as exc:
            details = "\n".join(f"  - {error}" for error in exc.errors)
            parser.exit(1, f"Episode validation failed:\n{details}\n")
        except InsufficientCitations as exc:
            parser.exit(1, f"{exc}\n")
        except RepocastError as exc:
            parser.exit(1, f"repocast generate failed: {exc}\nRun with --verbose for more details.\n")
        _print_outcome(outcome, as_json=bool(args.json))
    elif args.command == "serve":
        from .service.app import run_service

        run_service(host=args.host, port=args.port, config=config)
    else:  # pragma: no cover - argparse enforces choices
        parser.exit(1, "Unknown command\n")


def _print_outcome(outcome: EpisodeOutcome, *, as_json: bool) -> None:
    if as_json:
        print(json.dumps(outcome.to_dict(), indent=2))
        return
    episode = outcome.episode
    print(f"Repository: {outcome.ref.full_name} ({outcome.ref.branch})")
    print()
    print(f"Citations ({len(episode.citations)}):")
    print(format_citations_for_transcript(episode.citations))
    if outcome.script is not None:
        print()
        for turn in outcome.script.dialogue:
            print(f"{turn.speaker}: {turn.text}")
        print()
        print(
            f"~{outcome.script.word_count} words, "
            f"~{outcome.script.estimated_duration} seconds"
        )


if __name__ == "__main__":
    main(sys.argv[1:])
