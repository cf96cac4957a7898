import hashlib
import itertools
from unittest.mock import MagicMock

import pytest

from repo_edit_bot.gateway import GatewayConflictError, GatewayNotFoundError
from repo_edit_bot.llm import GenerationAdapter, GenerationBackend
from repo_edit_bot.models import CommitDetail, CommitFileChange, LoadedFile, RepoRef


def _blob_sha(content: str, salt: str = "") -> str:
    return hashlib.sha1(f"{salt}{content}".encode("utf-8")).hexdigest()


class FakeRemoteRepo:
    """In-memory stand-in for ContentGateway with GitHub contents semantics.

    Every write or delete is its own commit. Writes must carry the current
    blob sha; a missing or stale sha is rejected with GatewayConflictError.
    """

    def __init__(self, files: dict[str, str] | None = None, branch: str = "main") -> None:
        self.branch = branch
        self._counter = itertools.count(1)
        self.files: dict[str, LoadedFile] = {}
        for path, content in (files or {}).items():
            self.files[path] = LoadedFile(path=path, content=content, sha=_blob_sha(content))
        self.head = "c0000000000"
        self.snapshots: dict[str, dict[str, LoadedFile]] = {self.head: dict(self.files)}
        self.commits: dict[str, CommitDetail] = {
            self.head: CommitDetail(sha=self.head, parent_sha=None, message="initial")
        }
        self.writes: list[tuple[str, str, str]] = []  # (op, path, message)
        self.race_paths: set[str] = set()
        self.fail_reads: set[str] = set()

    def _commit(self, message: str, change: CommitFileChange) -> str:
        sha = f"c{next(self._counter):010d}"
        self.commits[sha] = CommitDetail(
            sha=sha, parent_sha=self.head, message=message, files=[change]
        )
        self.head = sha
        self.snapshots[sha] = dict(self.files)
        return sha

    def _simulate_race(self, path: str) -> None:
        # Someone else rewrote the file between our fetch and our write.
        current = self.files.get(path)
        if path in self.race_paths and current is not None:
            self.files[path] = LoadedFile(
                path=path, content=current.content, sha=_blob_sha(current.content, "race")
            )

    # Gateway surface -------------------------------------------------------

    def default_branch(self) -> str:
        return self.branch

    def list_blob_paths(self, branch: str | None = None) -> list[str]:
        return list(self.files)

    def get_file(self, path: str, ref: str | None = None) -> LoadedFile | None:
        if path in self.fail_reads:
            raise RuntimeError(f"boom reading {path}")
        source = self.snapshots[ref] if ref else self.files
        current = source.get(path)
        return current.model_copy() if current else None

    def put_file(self, path, content, message, sha=None, branch=None) -> str:
        self._simulate_race(path)
        current = self.files.get(path)
        if current is not None and sha != current.sha:
            raise GatewayConflictError(f"{path} does not match {sha}", status_code=409)
        if current is None and sha is not None:
            raise GatewayNotFoundError(f"{path} not found", status_code=404)
        self.files[path] = LoadedFile(path=path, content=content, sha=_blob_sha(content))
        self.writes.append(("put", path, message))
        status = "modified" if current is not None else "added"
        return self._commit(message, CommitFileChange(filename=path, status=status))

    def delete_file(self, path, sha, message, branch=None) -> str:
        current = self.files.get(path)
        if current is None or current.sha != sha:
            raise GatewayConflictError(f"{path} does not match {sha}", status_code=409)
        del self.files[path]
        self.writes.append(("delete", path, message))
        return self._commit(message, CommitFileChange(filename=path, status="removed"))

    def get_commit(self, sha: str) -> CommitDetail:
        if sha not in self.commits:
            raise GatewayNotFoundError(f"Commit {sha} not found", status_code=404)
        return self.commits[sha]


class ScriptedBackend(GenerationBackend):
    """Backend replaying a script of responses; exceptions in it are raised."""

    def __init__(self, script=None, name: str = "scripted", model_override=None) -> None:
        super().__init__(model_override=model_override)
        self.name = name
        self.script = list(script or [])
        self.calls: list[dict] = []

    def complete(self, model, messages, temperature, max_tokens=None) -> str:
        self.calls.append(
            {
                "model": self.resolve_model(model),
                "messages": messages,
                "temperature": temperature,
                "max_tokens": max_tokens,
            }
        )
        if not self.script:
            raise AssertionError("ScriptedBackend ran out of responses")
        item = self.script.pop(0)
        if isinstance(item, BaseException):
            raise item
        return item


@pytest.fixture
def repo_ref():
    return RepoRef(owner="acme", name="site", token="ghp_test")


@pytest.fixture
def remote():
    return FakeRemoteRepo(
        {
            "index.html": "<!doctype html><html><body><div id=root></div></body></html>",
            "package.json": '{"name": "site", "version": "1.0.0"}',
            "src/App.tsx": "export default function App() { return <h1>Hello</h1>; }",
            "src/App.css": "h1 { color: red; }",
            "README.md": "# site",
        }
    )


@pytest.fixture
def no_sleep():
    return MagicMock()


@pytest.fixture
def make_adapter(no_sleep):
    """Build a GenerationAdapter around one or more scripted backends."""

    def _make(*backends, max_attempts: int = 3):
        return GenerationAdapter(list(backends), max_attempts=max_attempts, sleep=no_sleep)

    return _make
