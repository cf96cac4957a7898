"""Agent components for the repo edit bot."""

from repo_edit_bot.agents.change_generator import ChangeGenerator, parse_change_set
from repo_edit_bot.agents.chat_responder import ConversationResponder
from repo_edit_bot.agents.commit_applier import CommitApplier, compose_response
from repo_edit_bot.agents.context_assembler import ContextAssembler, render_context
from repo_edit_bot.agents.exceptions import (
    AgentError,
    UndoPreconditionError,
)
from repo_edit_bot.agents.intent_classifier import IntentClassifier, parse_intent
from repo_edit_bot.agents.relevance_selector import RelevanceSelector, fallback_selection
from repo_edit_bot.agents.safety_validator import CRITICAL_FILES, SafetyValidator
from repo_edit_bot.agents.undo_engine import UndoEngine

__all__ = [
    "AgentError",
    "CRITICAL_FILES",
    "ChangeGenerator",
    "CommitApplier",
    "ContextAssembler",
    "ConversationResponder",
    "IntentClassifier",
    "RelevanceSelector",
    "SafetyValidator",
    "UndoEngine",
    "UndoPreconditionError",
    "compose_response",
    "fallback_selection",
    "parse_change_set",
    "parse_intent",
    "render_context",
]
