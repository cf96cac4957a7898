"""Tests for SafetyValidator."""

import pytest

from repo_edit_bot.agents import CRITICAL_FILES, SafetyValidator
from repo_edit_bot.models import ChangeSet, FileEdit


def _change_set(*edits: tuple[str, str | None]) -> ChangeSet:
    return ChangeSet(changes=[FileEdit(path=p, content=c) for p, c in edits])


class TestSafetyValidator:
    def test_non_critical_changes_allowed(self):
        verdict = SafetyValidator().check(_change_set(("src/App.css", "")))
        assert verdict.allowed

    @pytest.mark.parametrize("content", ["", "   ", None, "{}", "\n  {  }\n"])
    def test_blanking_critical_file_rejected(self, content):
        verdict = SafetyValidator().check(_change_set(("package.json", content)))
        assert not verdict.allowed
        assert verdict.offending_path == "package.json"
        assert "package.json" in verdict.message

    def test_whole_change_set_rejected(self):
        verdict = SafetyValidator().check(
            _change_set(
                ("src/App.css", "h1 { color: blue; }"),
                ("index.html", ""),
            )
        )
        assert not verdict.allowed
        assert verdict.offending_path == "index.html"

    def test_substantial_critical_content_allowed(self):
        verdict = SafetyValidator().check(
            _change_set(("package.json", '{"name": "site", "version": "1.0.1"}'))
        )
        assert verdict.allowed

    def test_critical_match_is_exact_path(self):
        verdict = SafetyValidator().check(_change_set(("docs/package.json", "")))
        assert verdict.allowed

    def test_custom_critical_set(self):
        validator = SafetyValidator(critical_files=["Dockerfile"], min_length=3)
        assert not validator.check(_change_set(("Dockerfile", "x"))).allowed
        assert validator.check(_change_set(("package.json", ""))).allowed

    def test_empty_change_set_allowed(self):
        assert SafetyValidator().check(ChangeSet()).allowed


def test_critical_files_list():
    assert set(CRITICAL_FILES) == {
        "package.json",
        "index.html",
        "tsconfig.json",
        "vite.config.ts",
        "vite.config.js",
        "tailwind.config.ts",
        "tailwind.config.js",
    }
