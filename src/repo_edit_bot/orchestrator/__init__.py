"""LangGraph orchestrator package for the edit pipeline."""

from repo_edit_bot.orchestrator.exceptions import (
    GraphBuildError,
    OrchestratorError,
    PipelineError,
)
from repo_edit_bot.orchestrator.graph import build_graph
from repo_edit_bot.orchestrator.service import CodeAgent, classify_failure
from repo_edit_bot.orchestrator.session import AgentSession
from repo_edit_bot.orchestrator.state import AgentState, make_initial_state

__all__ = [
    "AgentSession",
    "AgentState",
    "CodeAgent",
    "GraphBuildError",
    "OrchestratorError",
    "PipelineError",
    "build_graph",
    "classify_failure",
    "make_initial_state",
]
