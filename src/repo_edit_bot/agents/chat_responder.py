"""Direct conversational reply for non-mutating requests."""

from repo_edit_bot.llm import GenerationAdapter
from repo_edit_bot.models import ConversationTurn, RepoRef

CHAT_TEMPERATURE = 0.7
EMPTY_REPLY = "Sorry, I didn't quite get that. Could you say it again?"


def build_chat_prompt(repo: RepoRef) -> str:
    return f"""You are a friendly programming assistant. You talk naturally and directly.

You are connected to the repository: {repo.full_name}

You can:
- Chat about anything
- Answer programming questions
- Suggest improvements for the project
- Explain technical concepts
- Help plan features

When the user wants you to change the code they will ask for it directly; only then do you act.

Be natural, like a programmer friend. Do not be robotic. NEVER include code blocks in your reply."""


class ConversationResponder:
    """Answers conversational turns without touching the repository."""

    def __init__(self, adapter: GenerationAdapter, model: str) -> None:
        self.adapter = adapter
        self.model = model

    def reply(
        self,
        utterance: str,
        repo: RepoRef,
        history: list[ConversationTurn],
    ) -> str:
        messages = [{"role": "system", "content": build_chat_prompt(repo)}]
        messages.extend(turn.as_message() for turn in history)
        messages.append({"role": "user", "content": utterance})
        text = self.adapter.generate(
            model=self.model,
            messages=messages,
            temperature=CHAT_TEMPERATURE,
        )
        return text.strip() or EMPTY_REPLY
