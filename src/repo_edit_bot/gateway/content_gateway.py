"""Thin client over a GitHub-style repository contents API."""

import base64
import logging
import threading
from typing import Any
from urllib.parse import quote

import requests

from repo_edit_bot.gateway.exceptions import (
    GatewayAuthError,
    GatewayConflictError,
    GatewayError,
    GatewayNotFoundError,
    GatewayRequestError,
)
from repo_edit_bot.models import CommitDetail, CommitFileChange, LoadedFile, RepoRef, TreeEntry

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 30
FALLBACK_BRANCH = "main"
ACCEPT_HEADER = "application/vnd.github.v3+json"


def decode_content(encoded: str) -> str:
    """Decode a base64 body as returned by the contents API.

    Bodies are wrapped with newlines; non UTF-8 bytes fall back to latin-1.
    """
    raw = base64.b64decode(encoded.replace("\n", ""))
    try:
        return raw.decode("utf-8")
    except UnicodeDecodeError:
        return raw.decode("latin-1")


def encode_content(content: str) -> str:
    return base64.b64encode(content.encode("utf-8")).decode("ascii")


class ContentGateway:
    """Read/write primitives for one remote repository.

    Every call goes over the network; nothing but the default branch name is
    cached, and only for the lifetime of the instance.
    """

    def __init__(
        self,
        repo: RepoRef,
        session: requests.Session | None = None,
        timeout: int = DEFAULT_TIMEOUT,
    ) -> None:
        self.repo = repo
        self.timeout = timeout
        self._shared_session = session
        if session is not None:
            self._configure(session)
        self._local = threading.local()
        self._default_branch: str | None = None

    def _configure(self, session: requests.Session) -> requests.Session:
        session.headers.update(
            {
                "Authorization": f"Bearer {self.repo.token}",
                "Accept": ACCEPT_HEADER,
            }
        )
        return session

    @property
    def session(self) -> requests.Session:
        """HTTP session for the calling thread.

        Each thread gets its own session unless one was injected.
        """
        if self._shared_session is not None:
            return self._shared_session
        session = getattr(self._local, "session", None)
        if session is None:
            session = self._configure(requests.Session())
            self._local.session = session
        return session

    @property
    def _base(self) -> str:
        return f"{self.repo.api_url.rstrip('/')}/repos/{self.repo.owner}/{self.repo.name}"

    def _contents_url(self, path: str) -> str:
        return f"{self._base}/contents/{quote(path, safe='/')}"

    def _request(self, method: str, url: str, **kwargs: Any) -> requests.Response:
        try:
            response = self.session.request(method, url, timeout=self.timeout, **kwargs)
        except requests.RequestException as exc:
            raise GatewayRequestError(f"{method} {url} failed: {exc}") from exc
        if response.ok:
            return response

        status = response.status_code
        detail = response.text[:300] if response.text else ""
        if status in (401, 403):
            raise GatewayAuthError(
                f"Access to {self.repo.full_name} was denied (status {status}). "
                "Check that the token is valid and has the 'repo' scope.",
                status_code=status,
            )
        if status == 404:
            raise GatewayNotFoundError(f"Not found: {url}", status_code=status)
        if status in (409, 422):
            raise GatewayConflictError(
                f"Write rejected for {url} (status {status}): {detail}",
                status_code=status,
            )
        raise GatewayRequestError(
            f"{method} {url} returned status {status}: {detail}",
            status_code=status,
        )

    def default_branch(self) -> str:
        """Return the repository's default branch, resolved once per instance."""
        if self._default_branch is None:
            data = self._request("GET", self._base).json()
            self._default_branch = data.get("default_branch") or FALLBACK_BRANCH
        return self._default_branch

    def list_tree(self, branch: str | None = None) -> list[TreeEntry]:
        """List every entry of the tree at ``branch`` recursively."""
        ref = branch or self.default_branch()
        url = f"{self._base}/git/trees/{quote(ref, safe='')}"
        data = self._request("GET", url, params={"recursive": "1"}).json()
        entries: list[TreeEntry] = []
        for item in data.get("tree") or []:
            kind = item.get("type")
            path = item.get("path")
            if path and kind in ("blob", "tree", "commit"):
                entries.append(TreeEntry(path=path, kind=kind))
        if data.get("truncated"):
            logger.warning("Tree listing for %s was truncated by the API", self.repo.full_name)
        return entries

    def list_blob_paths(self, branch: str | None = None) -> list[str]:
        return [entry.path for entry in self.list_tree(branch) if entry.kind == "blob"]

    def get_file(self, path: str, ref: str | None = None) -> LoadedFile | None:
        """Fetch and decode a single file.

        Returns:
            The decoded file with its current blob sha, or None when the path
            does not exist at ``ref`` (or is not a regular base64 file).
        """
        params = {"ref": ref} if ref else None
        try:
            data = self._request("GET", self._contents_url(path), params=params).json()
        except GatewayNotFoundError:
            return None
        if not isinstance(data, dict) or data.get("encoding") != "base64":
            return None
        return LoadedFile(
            path=data.get("path") or path,
            content=decode_content(data.get("content") or ""),
            sha=data["sha"],
        )

    def put_file(
        self,
        path: str,
        content: str,
        message: str,
        sha: str | None = None,
        branch: str | None = None,
    ) -> str | None:
        """Create or update ``path``; an absent ``sha`` means create.

        Returns:
            The identifier of the commit the write produced.
        """
        body: dict[str, Any] = {
            "message": message,
            "content": encode_content(content),
            "branch": branch or self.default_branch(),
        }
        if sha:
            body["sha"] = sha
        data = self._request("PUT", self._contents_url(path), json=body).json()
        return (data.get("commit") or {}).get("sha")

    def delete_file(
        self,
        path: str,
        sha: str,
        message: str,
        branch: str | None = None,
    ) -> str | None:
        body = {
            "message": message,
            "sha": sha,
            "branch": branch or self.default_branch(),
        }
        data = self._request("DELETE", self._contents_url(path), json=body).json()
        return (data.get("commit") or {}).get("sha")

    def get_commit(self, sha: str) -> CommitDetail:
        """Fetch a commit's parent and per-file status list."""
        url = f"{self._base}/commits/{quote(sha, safe='')}"
        try:
            data = self._request("GET", url).json()
        except GatewayNotFoundError as exc:
            raise GatewayNotFoundError(
                f"Commit {sha} not found in {self.repo.full_name}", status_code=404
            ) from exc
        parents = data.get("parents") or []
        files = [
            CommitFileChange(
                filename=item["filename"],
                status=item.get("status", "modified"),
                previous_filename=item.get("previous_filename"),
            )
            for item in data.get("files") or []
            if item.get("filename")
        ]
        return CommitDetail(
            sha=data.get("sha") or sha,
            parent_sha=parents[0].get("sha") if parents else None,
            message=(data.get("commit") or {}).get("message", ""),
            files=files,
        )
