"""State definition for the LangGraph edit pipeline."""

import operator
from typing import Annotated, TypedDict

from repo_edit_bot.models import (
    ApplyReport,
    ConversationTurn,
    GenerationOutcome,
    Intent,
    LoadedFile,
    ProjectType,
    RepoRef,
    SafetyVerdict,
)


class AgentState(TypedDict):
    """State for one pipeline run.

    ``errors`` accumulates across nodes; every other field is overwritten.
    A node that hits a terminal failure stores it in ``fatal_error`` and the
    routers send the run to END.
    """

    # Input
    utterance: str
    repo: RepoRef
    history: list[ConversationTurn]

    # Classification
    intent: Intent | None

    # Discovery and selection
    branch: str | None
    all_paths: list[str]
    project_type: ProjectType | None
    selected_paths: list[str]
    loaded_files: list[LoadedFile]

    # Generation, validation, commit
    outcome: GenerationOutcome | None
    verdict: SafetyVerdict | None
    report: ApplyReport | None

    # Output
    response: str
    errors: Annotated[list[str], operator.add]
    fatal_error: Exception | None


def make_initial_state(
    utterance: str,
    repo: RepoRef,
    history: list[ConversationTurn] | None = None,
) -> AgentState:
    """Create the initial state for a pipeline run.

    Args:
        utterance: The latest user message.
        repo: Repository the run acts on.
        history: Recent conversation turns, oldest first.

    Returns:
        AgentState dict with all fields initialised to defaults.
    """
    return {
        "utterance": utterance,
        "repo": repo,
        "history": list(history or []),
        "intent": None,
        "branch": None,
        "all_paths": [],
        "project_type": None,
        "selected_paths": [],
        "loaded_files": [],
        "outcome": None,
        "verdict": None,
        "report": None,
        "response": "",
        "errors": [],
        "fatal_error": None,
    }
