"""CLI entrypoints for srcroot commands."""

from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path

from .config import ArtifactConfig, ConfigError, ResolverConfig, load_config
from .logging import configure_logging
from .repo_scanner import resolve_repository
from .report import (
    classifications_payload,
    decisions_payload,
    render_classifications,
    render_decisions,
)


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


def _add_path_argument(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "path",
        nargs="?",
        default=".",
        help="Path to the repository root (defaults to current directory).",
    )


def _add_json_option(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--json",
        action="store_true",
        help="Print machine-readable JSON instead of text.",
    )


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="srcroot",
        description="Resolve build modules and target source roots in a source tree.",
    )
    _add_verbose_option(parser)
    subparsers = parser.add_subparsers(dest="command", required=True)

    resolve_parser = subparsers.add_parser(
        "resolve",
        help="Select one target source root per module.",
    )
    _add_verbose_option(resolve_parser, suppress_default=True)
    _add_path_argument(resolve_parser)
    _add_json_option(resolve_parser)
    resolve_parser.add_argument(
        "--artifact-name",
        help="File name of the generated artifact (e.g. NeedsReview.java).",
    )
    resolve_parser.add_argument(
        "--artifact-package",
        default=None,
        help="Package the artifact lives in (e.g. com.example.annotations).",
    )
    resolve_parser.add_argument(
        "--default-root",
        help="Root used when no source root is detected anywhere.",
    )

    classify_parser = subparsers.add_parser(
        "classify",
        help="Show the module and source root of every scanned file.",
    )
    _add_verbose_option(classify_parser, suppress_default=True)
    _add_path_argument(classify_parser)
    _add_json_option(classify_parser)

    serve_parser = subparsers.add_parser(
        "serve",
        help="Run the HTTP resolution service.",
    )
    _add_verbose_option(serve_parser, suppress_default=True)
    serve_parser.add_argument("--host", default="127.0.0.1", help="Interface to bind.")
    serve_parser.add_argument("--port", type=int, default=8000, help="Port to listen on.")

    return parser


def _load_run_config(args: argparse.Namespace) -> ResolverConfig:
    config = load_config(Path(args.path))
    artifact_name = getattr(args, "artifact_name", None)
    if artifact_name:
        package = getattr(args, "artifact_package", None)
        if package is None and config.artifact is not None:
            package = config.artifact.package
        config.artifact = ArtifactConfig(file_name=artifact_name, package=package or "")
    default_root = getattr(args, "default_root", None)
    if default_root:
        config.default_root = default_root
    return config


def main(argv: list[str] | None = None) -> None:
    """CLI entrypoint for srcroot commands."""
    parser = _build_parser()
    args = parser.parse_args(argv)

    configure_logging(verbose=bool(args.verbose))

    if args.command == "serve":
        from .service import run_service

        run_service(host=args.host, port=args.port)
        return

    try:
        config = _load_run_config(args)
        run = resolve_repository(args.path, config)
    except (FileNotFoundError, NotADirectoryError) as exc:
        parser.exit(1, f"{exc}\n")
    except ConfigError as exc:
        parser.exit(1, f"srcroot {args.command} failed: {exc}\n")

    if args.command == "resolve":
        if args.json:
            print(json.dumps(decisions_payload(run), indent=2))
        else:
            for line in render_decisions(run):
                print(line)
    elif args.command == "classify":
        if args.json:
            print(json.dumps(classifications_payload(run), indent=2))
        else:
            for line in render_classifications(run):
                print(line)
    else:  # pragma: no cover - argparse enforces choices
        parser.exit(1, "Unknown command\n")


if __name__ == "__main__":
    main(sys.argv[1:])
