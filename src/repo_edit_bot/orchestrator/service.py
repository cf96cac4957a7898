"""Entry points: the edit pipeline and the undo operation."""

import logging
from typing import Callable

from repo_edit_bot.agents.change_generator import ChangeGenerator
from repo_edit_bot.agents.chat_responder import ConversationResponder
from repo_edit_bot.agents.commit_applier import DEFAULT_COMMIT_MESSAGE, CommitApplier
from repo_edit_bot.agents.context_assembler import ContextAssembler
from repo_edit_bot.agents.exceptions import UndoPreconditionError
from repo_edit_bot.agents.intent_classifier import IntentClassifier
from repo_edit_bot.agents.relevance_selector import RelevanceSelector
from repo_edit_bot.agents.safety_validator import SafetyValidator
from repo_edit_bot.agents.undo_engine import UndoEngine
from repo_edit_bot.config import AgentSettings
from repo_edit_bot.gateway import (
    ContentGateway,
    FreshRevisionWriter,
    GatewayAuthError,
    GatewayError,
)
from repo_edit_bot.llm import (
    BackendAuthError,
    BackendError,
    GenerationAdapter,
    build_generation_adapter,
)
from repo_edit_bot.models import (
    ConversationTurn,
    FailureKind,
    Intent,
    PipelineResult,
    RepoRef,
    UndoResult,
)
from repo_edit_bot.orchestrator.exceptions import PipelineError
from repo_edit_bot.orchestrator.graph import build_graph
from repo_edit_bot.orchestrator.state import make_initial_state

logger = logging.getLogger(__name__)


def classify_failure(exc: BaseException) -> FailureKind:
    """Tag an exception escaping an entry point."""
    if isinstance(exc, (GatewayAuthError, BackendAuthError)):
        return FailureKind.CREDENTIAL
    if isinstance(exc, UndoPreconditionError):
        return FailureKind.PRECONDITION
    if isinstance(exc, BackendError):
        return FailureKind.BACKEND
    if isinstance(exc, GatewayError):
        return FailureKind.GATEWAY
    return FailureKind.UNEXPECTED


class CodeAgent:
    """Runs the edit pipeline and the undo engine against a remote repository.

    Repository-bound components (gateway, assembler, applier) are built per
    call; nothing is shared between runs except the generation adapter.
    """

    def __init__(
        self,
        settings: AgentSettings | None = None,
        adapter: GenerationAdapter | None = None,
        gateway_factory: Callable[[RepoRef], ContentGateway] = ContentGateway,
        validator: SafetyValidator | None = None,
    ) -> None:
        self.settings = settings or AgentSettings()
        self._adapter = adapter
        self.gateway_factory = gateway_factory
        self.validator = validator or SafetyValidator()

    @property
    def adapter(self) -> GenerationAdapter:
        if self._adapter is None:
            self._adapter = build_generation_adapter(self.settings)
        return self._adapter

    def build_pipeline(self, gateway: ContentGateway):
        settings = self.settings
        writer = FreshRevisionWriter(gateway)
        return build_graph(
            classifier=IntentClassifier(self.adapter, settings.classifier_model),
            responder=ConversationResponder(self.adapter, settings.chat_model),
            gateway=gateway,
            selector=RelevanceSelector(self.adapter, settings.selector_model),
            assembler=ContextAssembler(gateway),
            generator=ChangeGenerator(self.adapter, settings.generator_model),
            validator=self.validator,
            applier=CommitApplier(writer),
        )

    def run(
        self,
        utterance: str,
        repo: RepoRef,
        history: list[ConversationTurn] | None = None,
        user_id: str | None = None,
    ) -> PipelineResult:
        """Handle one user message.

        Returns:
            PipelineResult with the reply text, changed paths and, when at
            least one file was committed, the commit identifier and message.

        Raises:
            PipelineError: Tagged terminal failure (credential, backend, gateway).
        """
        logger.info("Handling message for %s (user: %s)", repo.full_name, user_id or "-")
        try:
            graph = self.build_pipeline(self.gateway_factory(repo))
        except BackendError as exc:
            raise PipelineError(str(exc), classify_failure(exc)) from exc

        state = graph.invoke(make_initial_state(utterance, repo, history))

        fatal = state.get("fatal_error")
        if fatal is not None:
            raise PipelineError(str(fatal), classify_failure(fatal)) from fatal

        intent = state.get("intent") or Intent.CONVERSATION
        report = state.get("report")
        outcome = state.get("outcome")
        if report is None:
            return PipelineResult(response=state["response"], intent=intent)

        commit_message = None
        if report.commit_sha:
            commit_message = outcome.change_set.commit_message or DEFAULT_COMMIT_MESSAGE
        return PipelineResult(
            response=state["response"],
            files_changed=list(report.changed_paths),
            commit_sha=report.commit_sha,
            commit_shas=list(report.commit_shas),
            commit_message=commit_message,
            intent=intent,
        )

    def undo(self, commit_sha: str, repo: RepoRef) -> UndoResult:
        """Revert ``commit_sha`` in ``repo``.

        Raises:
            PipelineError: Tagged PRECONDITION when the commit has no parent,
                CREDENTIAL or GATEWAY when the commit cannot be read.
        """
        if not commit_sha:
            raise PipelineError("Missing commit identifier", FailureKind.PRECONDITION)
        gateway = self.gateway_factory(repo)
        engine = UndoEngine(gateway, FreshRevisionWriter(gateway))
        try:
            return engine.undo(commit_sha)
        except (UndoPreconditionError, GatewayError) as exc:
            raise PipelineError(str(exc), classify_failure(exc)) from exc
