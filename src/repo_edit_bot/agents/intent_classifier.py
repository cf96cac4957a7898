"""Intent classifier: conversation vs. edit request."""

import logging

from repo_edit_bot.llm import GenerationAdapter
from repo_edit_bot.models import Intent

logger = logging.getLogger(__name__)

CLASSIFIER_TEMPERATURE = 0.0
CLASSIFIER_MAX_TOKENS = 10
EDIT_TOKEN = Intent.EDIT_REQUEST.value

CLASSIFIER_PROMPT = """Analyze the user message and decide whether they want to modify code in a \
repository, or just want to chat or ask a question.
Return ONLY "code" if they want code changes, or "chat" if they just want to talk.
Examples of "code": "change the primary color to blue", "add a footer", \
"refactor the header component", "create a new file for the contact page", \
"remove this text", "rename the button"
Examples of "chat": "what do you think of React?", "explain how CSS grid works", \
"hi, how are you?", "I want to create a new repository", "how do I deploy this?\""""


def parse_intent(raw: str | None) -> Intent:
    """Map raw classifier output to an intent, failing closed to conversation."""
    token = (raw or "").strip().lower()
    if token == EDIT_TOKEN:
        return Intent.EDIT_REQUEST
    return Intent.CONVERSATION


class IntentClassifier:
    """Single-shot classification of the latest user utterance."""

    def __init__(self, adapter: GenerationAdapter, model: str) -> None:
        self.adapter = adapter
        self.model = model

    def classify(self, utterance: str) -> Intent:
        raw = self.adapter.generate(
            model=self.model,
            messages=[
                {"role": "system", "content": CLASSIFIER_PROMPT},
                {"role": "user", "content": utterance},
            ],
            temperature=CLASSIFIER_TEMPERATURE,
            max_tokens=CLASSIFIER_MAX_TOKENS,
        )
        intent = parse_intent(raw)
        logger.info("Classified message as %s", intent.value)
        return intent
