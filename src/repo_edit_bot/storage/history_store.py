"""Append-only conversation turns and commit records per repository."""

import json
import os
import threading
from abc import ABC, abstractmethod
from pathlib import Path

from repo_edit_bot.models import CommitRecord, ConversationTurn
from repo_edit_bot.storage.exceptions import StoreError

DEFAULT_COMMIT_LIMIT = 50


class HistoryStore(ABC):
    """Persistence sink keyed by repository.

    Turns and commit records are append-only. The only mutation allowed is
    flipping a commit record's ``can_undo`` from True to False, once.
    """

    @abstractmethod
    def append_turn(self, repo_key: str, turn: ConversationTurn) -> None: ...

    @abstractmethod
    def turns(self, repo_key: str) -> list[ConversationTurn]:
        """All turns for ``repo_key``, oldest first."""

    @abstractmethod
    def append_commit(self, repo_key: str, record: CommitRecord) -> None: ...

    @abstractmethod
    def commits(self, repo_key: str) -> list[CommitRecord]:
        """All commit records for ``repo_key``, oldest first."""

    @abstractmethod
    def _set_not_undoable(self, repo_key: str, record_id: str) -> None: ...

    def recent_turns(self, repo_key: str, limit: int) -> list[ConversationTurn]:
        if limit <= 0:
            return []
        return self.turns(repo_key)[-limit:]

    def list_commits(self, repo_key: str, limit: int = DEFAULT_COMMIT_LIMIT) -> list[CommitRecord]:
        """Newest first."""
        return list(reversed(self.commits(repo_key)))[:limit]

    def latest_undoable(self, repo_key: str) -> CommitRecord | None:
        for record in self.list_commits(repo_key):
            if record.can_undo:
                return record
        return None

    def find_commit(self, repo_key: str, commit_sha: str) -> CommitRecord | None:
        """Newest record covering ``commit_sha``; abbreviated shas match by prefix."""
        if not commit_sha:
            return None
        for record in reversed(self.commits(repo_key)):
            if any(sha.startswith(commit_sha) for sha in record.all_shas):
                return record
        return None

    def mark_not_undoable(self, repo_key: str, record_id: str) -> None:
        """Flip ``can_undo`` to False.

        Raises:
            StoreError: If the record is unknown or was already undone.
        """
        record = next((r for r in self.commits(repo_key) if r.id == record_id), None)
        if record is None:
            raise StoreError(f"Unknown commit record {record_id} for {repo_key}")
        if not record.can_undo:
            raise StoreError(f"Commit {record.commit_sha[:7]} was already undone")
        self._set_not_undoable(repo_key, record_id)


class InMemoryHistoryStore(HistoryStore):
    """Process-local store, mostly for tests and one-shot runs."""

    def __init__(self) -> None:
        self._turns: dict[str, list[ConversationTurn]] = {}
        self._commits: dict[str, list[CommitRecord]] = {}
        self._lock = threading.Lock()

    def append_turn(self, repo_key: str, turn: ConversationTurn) -> None:
        with self._lock:
            self._turns.setdefault(repo_key, []).append(turn)

    def turns(self, repo_key: str) -> list[ConversationTurn]:
        return list(self._turns.get(repo_key, []))

    def append_commit(self, repo_key: str, record: CommitRecord) -> None:
        with self._lock:
            self._commits.setdefault(repo_key, []).append(record)

    def commits(self, repo_key: str) -> list[CommitRecord]:
        return list(self._commits.get(repo_key, []))

    def _set_not_undoable(self, repo_key: str, record_id: str) -> None:
        with self._lock:
            for record in self._commits.get(repo_key, []):
                if record.id == record_id:
                    record.can_undo = False


class JsonFileHistoryStore(HistoryStore):
    """Stores everything in one JSON document, rewritten atomically."""

    def __init__(self, path: str | Path) -> None:
        self.path = Path(path).expanduser().resolve()
        self._lock = threading.Lock()

    def _load(self) -> dict:
        if not self.path.exists():
            return {}
        try:
            return json.loads(self.path.read_text(encoding="utf-8"))
        except json.JSONDecodeError as exc:
            raise StoreError(f"History file {self.path} is corrupt: {exc}") from exc

    def _save(self, data: dict) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        temp_file = self.path.with_suffix(self.path.suffix + ".tmp")
        temp_file.write_text(json.dumps(data, indent=2), encoding="utf-8")
        os.replace(temp_file, self.path)

    def _bucket(self, data: dict, repo_key: str) -> dict:
        return data.setdefault(repo_key, {"turns": [], "commits": []})

    def append_turn(self, repo_key: str, turn: ConversationTurn) -> None:
        with self._lock:
            data = self._load()
            self._bucket(data, repo_key)["turns"].append(turn.model_dump(mode="json"))
            self._save(data)

    def turns(self, repo_key: str) -> list[ConversationTurn]:
        bucket = self._load().get(repo_key, {})
        return [ConversationTurn.model_validate(t) for t in bucket.get("turns", [])]

    def append_commit(self, repo_key: str, record: CommitRecord) -> None:
        with self._lock:
            data = self._load()
            self._bucket(data, repo_key)["commits"].append(record.model_dump(mode="json"))
            self._save(data)

    def commits(self, repo_key: str) -> list[CommitRecord]:
        bucket = self._load().get(repo_key, {})
        return [CommitRecord.model_validate(c) for c in bucket.get("commits", [])]

    def _set_not_undoable(self, repo_key: str, record_id: str) -> None:
        with self._lock:
            data = self._load()
            for raw in self._bucket(data, repo_key)["commits"]:
                if raw.get("id") == record_id:
                    raw["can_undo"] = False
            self._save(data)
