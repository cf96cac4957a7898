"""Tests for the history stores."""

import pytest

from repo_edit_bot.models import CommitRecord, ConversationTurn, TurnRole
from repo_edit_bot.storage import InMemoryHistoryStore, JsonFileHistoryStore, StoreError


@pytest.fixture(params=["memory", "json"])
def store(request, tmp_path):
    if request.param == "memory":
        return InMemoryHistoryStore()
    return JsonFileHistoryStore(tmp_path / "history.json")


def _turn(content: str, role: TurnRole = TurnRole.USER) -> ConversationTurn:
    return ConversationTurn(role=role, content=content)


class TestHistoryStore:
    def test_turns_are_per_repository(self, store):
        store.append_turn("acme/site", _turn("a"))
        store.append_turn("acme/other", _turn("b"))
        assert [t.content for t in store.turns("acme/site")] == ["a"]
        assert store.turns("unknown/repo") == []

    def test_recent_turns(self, store):
        for i in range(12):
            store.append_turn("k", _turn(str(i)))
        assert [t.content for t in store.recent_turns("k", 10)] == [str(i) for i in range(2, 12)]
        assert store.recent_turns("k", 0) == []

    def test_list_commits_newest_first(self, store):
        for sha in ("c1", "c2", "c3"):
            store.append_commit("k", CommitRecord(commit_sha=sha, commit_message="m"))
        assert [r.commit_sha for r in store.list_commits("k")] == ["c3", "c2", "c1"]
        assert [r.commit_sha for r in store.list_commits("k", limit=1)] == ["c3"]

    def test_latest_undoable_skips_undone(self, store):
        first = CommitRecord(commit_sha="c1", commit_message="m")
        second = CommitRecord(commit_sha="c2", commit_message="m")
        store.append_commit("k", first)
        store.append_commit("k", second)

        store.mark_not_undoable("k", second.id)

        assert store.latest_undoable("k").commit_sha == "c1"
        assert store.latest_undoable("empty") is None

    def test_mark_not_undoable_only_once(self, store):
        record = CommitRecord(commit_sha="c1", commit_message="m")
        store.append_commit("k", record)
        store.mark_not_undoable("k", record.id)
        with pytest.raises(StoreError):
            store.mark_not_undoable("k", record.id)

    def test_mark_unknown_record(self, store):
        with pytest.raises(StoreError):
            store.mark_not_undoable("k", "missing")

    def test_find_commit_by_any_covered_sha(self, store):
        store.append_commit("k", CommitRecord(commit_sha="aaa111", commit_message="m"))
        multi = CommitRecord(commit_sha="ccc333", commit_shas=["bbb222", "ccc333"], commit_message="m")
        store.append_commit("k", multi)

        assert store.find_commit("k", "bbb222").id == multi.id
        assert store.find_commit("k", "ccc").id == multi.id
        assert store.find_commit("k", "aaa111").commit_sha == "aaa111"
        assert store.find_commit("k", "ddd444") is None
        assert store.find_commit("k", "") is None


class TestJsonFileHistoryStore:
    def test_persists_across_instances(self, tmp_path):
        path = tmp_path / "nested" / "history.json"
        JsonFileHistoryStore(path).append_turn("k", _turn("hello"))
        reopened = JsonFileHistoryStore(path)
        assert [t.content for t in reopened.turns("k")] == ["hello"]
        assert not path.with_suffix(".json.tmp").exists()

    def test_corrupt_file(self, tmp_path):
        path = tmp_path / "history.json"
        path.write_text("{not json", encoding="utf-8")
        with pytest.raises(StoreError):
            JsonFileHistoryStore(path).turns("k")
