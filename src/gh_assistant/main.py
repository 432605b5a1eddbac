"""CLI entrypoint for gh-assistant.

Commands:
- push:   commit staged changes with a generated message and push
- pushx:  like push, but also summarizes already-committed, unpushed work
- config: update or show the persisted configuration
"""

from __future__ import annotations

import argparse
import logging
import sys

import yaml
from pydantic import ValidationError

from gh_assistant import __version__
from gh_assistant.config import (
    PERSISTED_KEYS,
    SUPPORTED_PROVIDERS,
    AssistantSettings,
    config_path,
    mask_secret,
    save_config,
)
from gh_assistant.git.repository import GitRepository, VcsError
from gh_assistant.jira.ticket_service import JiraTicketService
from gh_assistant.llm.factory import LLMFactory
from gh_assistant.llm.provider import GenerationError
from gh_assistant.logging import configure_logging
from gh_assistant.workflow.confirmation import ConsoleConfirmer
from gh_assistant.workflow.errors import (
    EmptyDiffError,
    NoChangesError,
    NoStagedChangesError,
    WorkflowError,
)
from gh_assistant.workflow.models import PushRequest
from gh_assistant.workflow.orchestrator import PushOrchestrator

logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_FAILURE = 1
EXIT_CONFIG = 2
EXIT_NOTHING_TO_DO = 3

API_KEY_HELP = """API key not configured. Set it up using one of:
  1. Run: gh-assistant config --api-key YOUR_KEY
  2. Set environment variable: export OPENAI_API_KEY=your_key
  3. Set environment variable: export ANTHROPIC_API_KEY=your_key"""

_CONFIG_LABELS: dict[str, str] = {
    "provider": "Provider",
    "api_key": "API key",
    "model": "Model",
    "jira_url": "Jira URL",
    "jira_email": "Jira email",
    "jira_token": "Jira API token",
    "jira_project": "Jira project",
}
_SECRET_KEYS = frozenset({"api_key", "jira_token"})


def _add_push_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "-a",
        "--all",
        dest="stage_all",
        action="store_true",
        help="Stage all changes before committing",
    )
    parser.add_argument(
        "-y",
        "--yes",
        dest="auto_confirm",
        action="store_true",
        help="Auto-confirm the generated commit message",
    )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="gh-assistant",
        description="Commit with an AI-generated message, push, and open a Jira ticket",
    )
    parser.add_argument("--version", action="version", version=f"gh-assistant {__version__}")

    subparsers = parser.add_subparsers(dest="command", required=True)

    push = subparsers.add_parser(
        "push",
        help="Generate a commit message for staged changes, commit and push",
    )
    _add_push_arguments(push)

    pushx = subparsers.add_parser(
        "pushx",
        help="Like push, but summarize unpushed commits when nothing is staged",
    )
    _add_push_arguments(pushx)

    config = subparsers.add_parser("config", help="Configure gh-assistant settings")
    config.add_argument("--api-key", default=None, help="Set the API key")
    config.add_argument(
        "--provider",
        default=None,
        choices=SUPPORTED_PROVIDERS,
        help="Set the AI provider",
    )
    config.add_argument("--model", default=None, help="Set the model to use")
    config.add_argument(
        "--jira-url",
        default=None,
        help="Set Jira base URL (e.g., https://yourcompany.atlassian.net)",
    )
    config.add_argument("--jira-email", default=None, help="Set Jira account email")
    config.add_argument("--jira-token", default=None, help="Set Jira API token")
    config.add_argument("--jira-project", default=None, help="Set Jira project key (e.g., PROJ)")
    config.add_argument("--show", action="store_true", help="Show current configuration")
    config.set_defaults(print_config_help=config.print_help)

    return parser


def _load_settings() -> AssistantSettings | None:
    try:
        return AssistantSettings()
    except (ValidationError, yaml.YAMLError) as e:
        # Logging isn't configured yet; keep it simple and actionable.
        print(f"Configuration error (check {config_path()}):", file=sys.stderr)
        print(e, file=sys.stderr)
        return None


def _run_config(args: argparse.Namespace) -> int:
    if args.show:
        settings = _load_settings()
        if settings is None:
            return EXIT_CONFIG
        _show_config(settings)
        return EXIT_OK

    updates = {key: value for key in PERSISTED_KEYS if (value := getattr(args, key))}
    if not updates:
        args.print_config_help()
        return EXIT_OK

    try:
        path = save_config(updates)
    except (yaml.YAMLError, ValueError) as e:
        print(f"Cannot update {config_path()}: {e}", file=sys.stderr)
        print("Fix or remove the file and run the command again.", file=sys.stderr)
        return EXIT_CONFIG

    for key, value in updates.items():
        if key in _SECRET_KEYS:
            print(f"{_CONFIG_LABELS[key]} configured")
        else:
            print(f"{_CONFIG_LABELS[key]} set to: {value}")
    print(f"\nConfiguration saved to: {path}")
    return EXIT_OK


def _show_config(settings: AssistantSettings) -> None:
    path = config_path()
    rule = "-" * 52

    print("Current configuration:")
    print(rule)
    print(f"Config file: {path if path.exists() else 'not created'}")
    print()

    if settings.provider:
        provider = settings.provider
    elif settings.openai_api_key or settings.anthropic_api_key:
        provider = f"{settings.resolved_provider()} (from env)"
    else:
        provider = "not set"
    print(f"Provider: {provider}")
    print(f"API key: {mask_secret(settings.resolved_api_key()) or 'not set'}")
    print(f"Model: {settings.model or 'default'}")

    print()
    print("Jira integration:")
    print(f"Jira URL: {settings.jira_url or 'not set'}")
    print(f"Jira email: {settings.jira_email or 'not set'}")
    print(f"Jira token: {mask_secret(settings.jira_token) or 'not set'}")
    print(f"Jira project: {settings.jira_project or 'not set'}")
    print(rule)


def _run_push(args: argparse.Namespace, settings: AssistantSettings) -> int:
    if not settings.resolved_api_key():
        print(API_KEY_HELP, file=sys.stderr)
        return EXIT_CONFIG

    repository = GitRepository()
    if not repository.is_repo():
        print("Not a git repository", file=sys.stderr)
        return EXIT_CONFIG

    try:
        generator = LLMFactory.create(settings.llm_config())
    except ValueError as e:
        print(f"Configuration error: {e}", file=sys.stderr)
        return EXIT_CONFIG

    orchestrator = PushOrchestrator(
        repository=repository,
        generator=generator,
        confirmer=ConsoleConfirmer(),
        tickets=JiraTicketService(settings.jira_config()),
    )
    request = PushRequest(
        stage_all=args.stage_all,
        auto_confirm=args.auto_confirm,
        summarize_unpushed=args.command == "pushx",
    )

    try:
        orchestrator.run(request)
    except (NoChangesError, NoStagedChangesError, EmptyDiffError) as e:
        logger.info(str(e), extra={"outcome": type(e).__name__})
        print(str(e), file=sys.stderr)
        return EXIT_NOTHING_TO_DO
    except GenerationError as e:
        logger.error("Commit message generation failed", extra={"error": str(e)})
        print(f"Failed to generate commit message: {e}", file=sys.stderr)
        return EXIT_FAILURE
    except (VcsError, WorkflowError) as e:
        logger.error("Git operation failed", extra={"error": str(e)})
        print(str(e), file=sys.stderr)
        return EXIT_FAILURE
    return EXIT_OK


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.command == "config":
        return _run_config(args)

    settings = _load_settings()
    if settings is None:
        return EXIT_CONFIG

    configure_logging(settings.log_level)

    try:
        return _run_push(args, settings)
    except KeyboardInterrupt:
        print("\nAborted", file=sys.stderr)
        return 130
    except Exception:
        logger.exception("Command failed")
        return EXIT_FAILURE


if __name__ == "__main__":
    raise SystemExit(main())
