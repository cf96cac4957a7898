"""CLI entry point for the repo edit bot."""
import argparse
from dotenv import load_dotenv
import json
import logging
import sys
import traceback

from pydantic import ValidationError

from repo_edit_bot.agents.exceptions import AgentError
from repo_edit_bot.models import FailureKind, RepoRef
from repo_edit_bot.orchestrator.exceptions import OrchestratorError, PipelineError
from repo_edit_bot.storage.exceptions import StoreError

load_dotenv()

# Exit codes
EXIT_SUCCESS = 0
EXIT_INVALID_INPUT = 1
EXIT_AGENT_ERROR = 2
EXIT_ORCHESTRATOR_ERROR = 3
EXIT_CREDENTIAL_ERROR = 4
EXIT_UNEXPECTED = 5
EXIT_KEYBOARD_INTERRUPT = 130

DEFAULT_HISTORY_FILE = "./data/history.json"
LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"

# Safe keys allowed in config output (no secrets)
_SAFE_CONFIG_KEYS = frozenset({
    "command", "repo", "message", "commit", "history_file", "provider",
    "fallback_provider", "classifier_model", "selector_model", "generator_model",
    "chat_model", "fallback_model", "history_turns", "max_attempts", "verbose",
    "dry_run", "output_json",
})


def build_parser() -> argparse.ArgumentParser:
    """Build and return the argument parser."""
    parser = argparse.ArgumentParser(
        prog="repo-edit-bot",
        description="Chat with an agent that edits a remote repository",
    )
    parser.add_argument("--verbose", action="store_true", help="Enable debug logging")
    parser.add_argument(
        "--dry-run", action="store_true", help="Print config and exit without running"
    )
    parser.add_argument(
        "--output-json", action="store_true", help="Output results as JSON"
    )
    parser.add_argument(
        "--token",
        type=str,
        default="",
        help="Repository API token (default: GITHUB_TOKEN env var)",
    )
    parser.add_argument(
        "--history-file",
        type=str,
        default=DEFAULT_HISTORY_FILE,
        help=f"Conversation/commit history file (default: {DEFAULT_HISTORY_FILE})",
    )
    parser.add_argument(
        "--provider",
        type=str,
        default="",
        choices=("", "openai", "anthropic"),
        help="Primary generation provider (default: REPO_EDIT_BOT_PROVIDER or openai)",
    )
    parser.add_argument(
        "--fallback-provider",
        type=str,
        default="",
        choices=("", "openai", "anthropic"),
        help="Provider used once the primary stays rate limited",
    )

    subparsers = parser.add_subparsers(dest="command", required=True)

    chat = subparsers.add_parser("chat", help="Send a message to the agent")
    chat.add_argument("repo", type=str, help="Repository as OWNER/NAME")
    chat.add_argument("message", type=str, help="What you want (a question or an edit request)")

    undo = subparsers.add_parser("undo", help="Undo an agent commit")
    undo.add_argument("repo", type=str, help="Repository as OWNER/NAME")
    undo.add_argument(
        "--commit",
        type=str,
        default="",
        help="Commit to revert (default: the newest undoable agent commit)",
    )
    return parser


def parse_repo(raw: str, token: str, api_url: str) -> RepoRef:
    """Parse OWNER/NAME into a RepoRef.

    Raises:
        ValueError: If the value is not OWNER/NAME.
    """
    parts = raw.strip().strip("/").split("/")
    if len(parts) != 2 or not all(parts):
        raise ValueError(f"'{raw}' is not in OWNER/NAME form")
    return RepoRef(owner=parts[0], name=parts[1], token=token, api_url=api_url)


def configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format=LOG_FORMAT,
        stream=sys.stderr,
    )


def create_session(args: argparse.Namespace, settings, repo: RepoRef):
    """Create the agent session.

    Service imports are deferred so --help and --dry-run never build a
    backend or a graph.
    """
    from repo_edit_bot.orchestrator.service import CodeAgent
    from repo_edit_bot.orchestrator.session import AgentSession
    from repo_edit_bot.storage.history_store import JsonFileHistoryStore

    agent = CodeAgent(settings=settings)
    store = JsonFileHistoryStore(args.history_file)
    return AgentSession(agent, store, repo, history_limit=settings.history_turns)


def format_result_json(result) -> str:
    """Serialize a pydantic result to a JSON string."""
    return json.dumps(result.model_dump(mode="json"), indent=2, default=str)


def print_chat_human(result) -> None:
    print(result.response)
    if result.commit_sha:
        print(f"\n[{result.commit_sha[:7]}] {result.commit_message}")


def print_undo_human(result) -> None:
    print(f"Reverted {len(result.files_reverted)} file(s) from {result.commit_sha[:7]}")
    for path in result.files_reverted:
        print(f"  - {path}")


def print_config_human(config: dict) -> None:
    """Print configuration in human-readable format.

    Only prints keys in the safe allowlist to prevent secret leakage.
    """
    print("\nConfiguration:")
    print(f"{'='*40}")
    for key, value in config.items():
        if key in _SAFE_CONFIG_KEYS:
            print(f"  {key}: {value}")
    print(f"{'='*40}")


def _handle_error(label: str, exc: BaseException, verbose: bool, exit_code: int) -> int:
    """Print error message to stderr and return the exit code."""
    print(f"{label}: {exc}", file=sys.stderr)
    if verbose:
        traceback.print_exc(file=sys.stderr)
    return exit_code


def _pipeline_exit_code(exc: PipelineError) -> int:
    if exc.kind == FailureKind.CREDENTIAL:
        return EXIT_CREDENTIAL_ERROR
    if exc.kind == FailureKind.PRECONDITION:
        return EXIT_AGENT_ERROR
    return EXIT_ORCHESTRATOR_ERROR


def main(argv: list[str] | None = None) -> int:
    """Main CLI entry point.

    Args:
        argv: Command-line arguments (defaults to sys.argv[1:]).

    Returns:
        Exit code integer.
    """
    from repo_edit_bot.config import AgentSettings

    parser = build_parser()
    args = parser.parse_args(argv)
    configure_logging(args.verbose)

    try:
        settings = AgentSettings.from_env()
    except (ValidationError, ValueError) as exc:
        print(f"Error: invalid configuration: {exc}", file=sys.stderr)
        return EXIT_INVALID_INPUT

    if args.provider:
        settings.provider = args.provider
    if args.fallback_provider:
        settings.fallback_provider = args.fallback_provider

    token = args.token or settings.github_token or ""
    try:
        repo = parse_repo(args.repo, token, settings.github_api_url)
    except ValueError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return EXIT_INVALID_INPUT

    config = {
        "command": args.command,
        "repo": repo.full_name,
        "message": getattr(args, "message", None),
        "commit": getattr(args, "commit", None) or None,
        "history_file": args.history_file,
        "provider": settings.provider,
        "fallback_provider": settings.fallback_provider,
        "classifier_model": settings.classifier_model,
        "selector_model": settings.selector_model,
        "generator_model": settings.generator_model,
        "chat_model": settings.chat_model,
        "fallback_model": settings.fallback_model,
        "history_turns": settings.history_turns,
        "max_attempts": settings.max_attempts,
        "verbose": args.verbose,
        "dry_run": args.dry_run,
        "output_json": args.output_json,
    }

    if args.dry_run:
        if args.output_json:
            print(json.dumps(config, indent=2))
        else:
            print_config_human(config)
        return EXIT_SUCCESS

    if not token:
        print("Error: no repository token. Use --token or set GITHUB_TOKEN.", file=sys.stderr)
        return EXIT_INVALID_INPUT

    try:
        session = create_session(args, settings, repo)

        if args.command == "chat":
            result = session.send(args.message)
            printer = print_chat_human
        elif args.commit:
            result = session.undo(args.commit)
            printer = print_undo_human
        else:
            result = session.undo_last()
            printer = print_undo_human

        if args.output_json:
            print(format_result_json(result))
        else:
            printer(result)
        return EXIT_SUCCESS

    except PipelineError as exc:
        return _handle_error(
            f"Pipeline error ({exc.kind.value})", exc, args.verbose, _pipeline_exit_code(exc)
        )

    except AgentError as exc:
        return _handle_error("Agent error", exc, args.verbose, EXIT_AGENT_ERROR)

    except OrchestratorError as exc:
        return _handle_error("Orchestrator error", exc, args.verbose, EXIT_ORCHESTRATOR_ERROR)

    except StoreError as exc:
        return _handle_error("History store error", exc, args.verbose, EXIT_UNEXPECTED)

    except KeyboardInterrupt:
        print("\nInterrupted.", file=sys.stderr)
        return EXIT_KEYBOARD_INTERRUPT

    except Exception as exc:
        return _handle_error("Unexpected error", exc, args.verbose, EXIT_UNEXPECTED)


if __name__ == "__main__":
    raise SystemExit(main())
