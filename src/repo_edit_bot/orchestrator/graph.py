"""LangGraph orchestrator graph for the edit pipeline.

Wires IntentClassifier, ConversationResponder, RelevanceSelector,
ContextAssembler, ChangeGenerator, SafetyValidator and CommitApplier into a
StateGraph. Only the commit node ever writes to the repository.
"""

import logging
from typing import Callable

from langgraph.graph import END, START, StateGraph

from repo_edit_bot.agents.change_generator import ChangeGenerator
from repo_edit_bot.agents.chat_responder import ConversationResponder
from repo_edit_bot.agents.commit_applier import CommitApplier, compose_response
from repo_edit_bot.agents.context_assembler import ContextAssembler
from repo_edit_bot.agents.intent_classifier import IntentClassifier
from repo_edit_bot.agents.relevance_selector import RelevanceSelector
from repo_edit_bot.agents.safety_validator import SafetyValidator
from repo_edit_bot.gateway import ContentGateway
from repo_edit_bot.models import Intent
from repo_edit_bot.orchestrator.exceptions import GraphBuildError
from repo_edit_bot.orchestrator.state import AgentState
from repo_edit_bot.utils import detect_project_type

logger = logging.getLogger(__name__)


def _fatal(node: str, exc: Exception) -> dict:
    logger.error("%s failed: %s", node, exc)
    return {"fatal_error": exc, "errors": [f"{node} error: {exc}"]}


def make_classify_node(classifier: IntentClassifier) -> Callable[[AgentState], dict]:
    """Factory: returns a node closure that classifies the utterance.

    On error: returns {"fatal_error": exc, "errors": [str]}.
    """

    def classify_node(state: AgentState) -> dict:
        try:
            return {"intent": classifier.classify(state["utterance"])}
        except Exception as exc:
            return _fatal("classify_node", exc)

    return classify_node


def make_converse_node(responder: ConversationResponder) -> Callable[[AgentState], dict]:
    """Factory: returns a node closure answering a conversational turn."""

    def converse_node(state: AgentState) -> dict:
        try:
            reply = responder.reply(state["utterance"], state["repo"], state["history"])
            return {"response": reply}
        except Exception as exc:
            return _fatal("converse_node", exc)

    return converse_node


def make_discover_node(gateway: ContentGateway) -> Callable[[AgentState], dict]:
    """Factory: returns a node closure that lists the repository tree.

    The tree is listed fresh on every run; nothing is cached across runs.
    """

    def discover_node(state: AgentState) -> dict:
        try:
            branch = gateway.default_branch()
            all_paths = gateway.list_blob_paths(branch)
            project_type = detect_project_type(all_paths)
            logger.info("Found %d files in %s", len(all_paths), branch)
            logger.info("Detected project type: %s", project_type.value)
            return {
                "branch": branch,
                "all_paths": all_paths,
                "project_type": project_type,
            }
        except Exception as exc:
            return _fatal("discover_node", exc)

    return discover_node


def make_select_node(selector: RelevanceSelector) -> Callable[[AgentState], dict]:
    """Factory: returns a node closure that picks the relevant paths."""

    def select_node(state: AgentState) -> dict:
        try:
            return {"selected_paths": selector.select(state["all_paths"], state["utterance"])}
        except Exception as exc:
            return _fatal("select_node", exc)

    return select_node


def make_load_node(assembler: ContextAssembler) -> Callable[[AgentState], dict]:
    """Factory: returns a node closure that loads the selected files.

    Individual load failures are dropped by the assembler, so this node
    never fails the run.
    """

    def load_node(state: AgentState) -> dict:
        return {"loaded_files": assembler.load(state["selected_paths"])}

    return load_node


def make_generate_node(generator: ChangeGenerator) -> Callable[[AgentState], dict]:
    """Factory: returns a node closure producing the change set.

    A malformed or empty change set is not an error: its user-facing
    message becomes the response and the run ends without writing.
    """

    def generate_node(state: AgentState) -> dict:
        try:
            outcome = generator.generate(
                repo=state["repo"],
                branch=state["branch"] or "",
                project_type=state["project_type"],
                all_paths=state["all_paths"],
                files=state["loaded_files"],
                history=state["history"],
                utterance=state["utterance"],
            )
        except Exception as exc:
            return _fatal("generate_node", exc)

        update: dict = {"outcome": outcome}
        if not outcome.is_actionable:
            update["response"] = outcome.message
        return update

    return generate_node


def make_safety_node(validator: SafetyValidator) -> Callable[[AgentState], dict]:
    """Factory: returns a node closure gating the whole change set."""

    def safety_node(state: AgentState) -> dict:
        verdict = validator.check(state["outcome"].change_set)
        update: dict = {"verdict": verdict}
        if not verdict.allowed:
            update["response"] = verdict.message or "Change set refused."
        return update

    return safety_node


def make_commit_node(applier: CommitApplier) -> Callable[[AgentState], dict]:
    """Factory: returns a node closure applying the accepted change set."""

    def commit_node(state: AgentState) -> dict:
        change_set = state["outcome"].change_set
        report = applier.apply(change_set)
        errors = [f"commit failed for {e.path}: {e.error}" for e in report.errors]
        return {
            "report": report,
            "response": compose_response(change_set.explanation, report),
            "errors": errors,
        }

    return commit_node


def route_after_classify(state: AgentState) -> str:
    """Router: "abort" on failure, "edit" for edit requests, "chat" otherwise."""
    if state["fatal_error"] is not None:
        return "abort"
    if state["intent"] == Intent.EDIT_REQUEST:
        return "edit"
    return "chat"


def continue_or_abort(state: AgentState) -> str:
    if state["fatal_error"] is not None:
        return "abort"
    return "continue"


def route_after_generate(state: AgentState) -> str:
    outcome = state["outcome"]
    if state["fatal_error"] is not None or outcome is None or not outcome.is_actionable:
        return "done"
    return "check"


def route_after_safety(state: AgentState) -> str:
    verdict = state["verdict"]
    if verdict is not None and verdict.allowed:
        return "commit"
    return "refuse"


def build_graph(
    classifier: IntentClassifier,
    responder: ConversationResponder,
    gateway: ContentGateway,
    selector: RelevanceSelector,
    assembler: ContextAssembler,
    generator: ChangeGenerator,
    validator: SafetyValidator,
    applier: CommitApplier,
):
    """Build and compile the pipeline StateGraph.

    Edge topology:
      START -> classify_node -> conditional -> {converse_node, discover_node, END}
      converse_node -> END
      discover_node -> select_node -> load_node -> generate_node
      generate_node -> conditional -> {safety_node, END}
      safety_node -> conditional -> {commit_node, END}
      commit_node -> END

    Returns:
        CompiledStateGraph ready to invoke.

    Raises:
        GraphBuildError: If graph construction fails.
    """
    try:
        graph = StateGraph(AgentState)

        graph.add_node("classify_node", make_classify_node(classifier))
        graph.add_node("converse_node", make_converse_node(responder))
        graph.add_node("discover_node", make_discover_node(gateway))
        graph.add_node("select_node", make_select_node(selector))
        graph.add_node("load_node", make_load_node(assembler))
        graph.add_node("generate_node", make_generate_node(generator))
        graph.add_node("safety_node", make_safety_node(validator))
        graph.add_node("commit_node", make_commit_node(applier))

        graph.add_edge(START, "classify_node")
        graph.add_conditional_edges(
            "classify_node",
            route_after_classify,
            {
                "chat": "converse_node",
                "edit": "discover_node",
                "abort": END,
            },
        )
        graph.add_edge("converse_node", END)

        graph.add_conditional_edges(
            "discover_node",
            continue_or_abort,
            {"continue": "select_node", "abort": END},
        )
        graph.add_conditional_edges(
            "select_node",
            continue_or_abort,
            {"continue": "load_node", "abort": END},
        )
        graph.add_edge("load_node", "generate_node")

        graph.add_conditional_edges(
            "generate_node",
            route_after_generate,
            {"check": "safety_node", "done": END},
        )
        graph.add_conditional_edges(
            "safety_node",
            route_after_safety,
            {"commit": "commit_node", "refuse": END},
        )
        graph.add_edge("commit_node", END)

        return graph.compile()

    except Exception as exc:
        raise GraphBuildError(f"Failed to build pipeline graph: {exc}") from exc
