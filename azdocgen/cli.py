"""CLI entrypoints for azdocgen commands."""

from __future__ import annotations

import argparse
import json
import os
import sys
from pathlib import Path
from typing import Any, Dict

from .config import ConfigError, load_config
from .events import EventError, ScheduledEvent, parse_event
from .git.github import GitHubClient
from .logging import configure_logging, get_logger
from .orchestrator import Orchestrator
from .outputs import ActionOutputs, write_outputs


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


def _add_config_option(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--config",
        type=Path,
        default=None,
        help="Path to an .azdocgen.yml file (defaults to the workspace root).",
    )


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="azdocgen",
        description="Document Azure integration changes with an LLM from GitHub Actions.",
    )
    _add_verbose_option(parser)
    subparsers = parser.add_subparsers(dest="command", required=True)

    run_parser = subparsers.add_parser(
        "run",
        help="Handle the event that triggered the current workflow run.",
    )
    _add_verbose_option(run_parser, suppress_default=True)
    _add_config_option(run_parser)
    run_parser.add_argument(
        "--event-name",
        default=None,
        help="Override GITHUB_EVENT_NAME.",
    )
    run_parser.add_argument(
        "--event-path",
        type=Path,
        default=None,
        help="Override GITHUB_EVENT_PATH (JSON event payload).",
    )

    audit_parser = subparsers.add_parser(
        "audit",
        help="Run the repository-wide Azure integration audit regardless of the event.",
    )
    _add_verbose_option(audit_parser, suppress_default=True)
    _add_config_option(audit_parser)

    serve_parser = subparsers.add_parser(
        "serve",
        help="Start the webhook service.",
    )
    _add_verbose_option(serve_parser, suppress_default=True)
    serve_parser.add_argument("--host", default="0.0.0.0")
    serve_parser.add_argument("--port", type=int, default=8000)

    return parser


def main(argv: list[str] | None = None) -> None:
    """CLI entrypoint for azdocgen commands."""
    parser = _build_parser()
    args = parser.parse_args(argv)

    configure_logging(verbose=bool(args.verbose))
    logger = get_logger("cli")

    if args.command == "serve":
        from .service.app import run_service

        run_service(host=args.host, port=args.port)
        return

    env = os.environ
    try:
        config = load_config(config_path=args.config)
        repository = env.get("GITHUB_REPOSITORY")
        if not repository:
            raise ConfigError("GITHUB_REPOSITORY is not set")
        client = GitHubClient(config.github_token, repository, api_url=env.get("GITHUB_API_URL"))
        orchestrator = Orchestrator(config, client)
    except (ConfigError, ValueError) as exc:
        parser.exit(1, f"azdocgen: {exc}\n")

    ref = env.get("GITHUB_REF", "")
    sha = env.get("GITHUB_SHA")
    try:
        if args.command == "audit":
            event = ScheduledEvent(ref=ref, sha=sha)
        else:
            event_name = args.event_name or env.get("GITHUB_EVENT_NAME", "")
            payload = _read_payload(args.event_path or _env_path("GITHUB_EVENT_PATH"))
            event = parse_event(event_name, payload, ref=ref, sha=sha)
    except (EventError, OSError, ValueError) as exc:
        if config.fail_on_error:
            parser.exit(1, f"azdocgen: {exc}\n")
        logger.warning("Action encountered an error but continuing: %s", exc)
        write_outputs(ActionOutputs.empty(), _env_path("GITHUB_OUTPUT"))
        return

    try:
        outputs = orchestrator.run(event)
    except Exception as exc:
        logger.error("Action failed: %s", exc)
        logger.debug("Failure details", exc_info=True)
        write_outputs(ActionOutputs.empty(), _env_path("GITHUB_OUTPUT"))
        parser.exit(1, f"azdocgen: Action failed: {exc}\n")

    write_outputs(outputs, _env_path("GITHUB_OUTPUT"))


def _env_path(name: str) -> Path | None:
    value = os.environ.get(name)
    return Path(value) if value else None


def _read_payload(path: Path | None) -> Dict[str, Any]:
    if path is None:
        return {}
    data = json.loads(path.read_text(encoding="utf-8"))
    return data if isinstance(data, dict) else {}


if __name__ == "__main__":
    main(sys.argv[1:])
