"""Pytest configuration and fixtures for mergeflow tests.

This module provides a FakeGit runner that answers scripted git commands
without touching a repository, and a ``git_repo`` fixture that builds a real
repository with a bare ``origin`` for integration tests.

IMPORTANT: Environment variables must be set BEFORE importing mergeflow
modules, as ``mergeflow.state`` loads configuration at import time.
"""

from __future__ import annotations

import os

# Set environment variables BEFORE any mergeflow imports
os.environ.setdefault("LOG_LEVEL", "INFO")
for _name in ("JIRA_BASE_URL", "JIRA_EMAIL", "JIRA_API_TOKEN", "GITHUB_TOKEN", "GITHUB_OWNER", "GITHUB_REPO"):
    os.environ.pop(_name, None)

import logging
import subprocess
from collections.abc import Sequence
from dataclasses import dataclass
from pathlib import Path

import pytest

from mergeflow.config import Config
from mergeflow.git.runner import GitRunner

GIT_AVAILABLE = subprocess.run(["git", "--version"], capture_output=True).returncode == 0

MUTATING_SUBCOMMANDS = {"checkout", "pull", "push", "merge", "branch", "commit", "reset"}


class FakeGit(GitRunner):
    """A GitRunner that returns scripted results and records every call.

    Responses are keyed by the exact argument tuple.  When several responses
    are scripted for the same command they are returned in order and the
    last one repeats.  Unscripted commands succeed with empty output.
    """

    def __init__(self) -> None:
        super().__init__(None)
        self.responses: dict[tuple[str, ...], list[dict[str, object]]] = {}
        self.calls: list[list[str]] = []

    def on(self, *args: str, stdout: str = "", stderr: str = "", exit_code: int = 0) -> FakeGit:
        self.responses.setdefault(tuple(args), []).append(
            {"stdout": stdout, "stderr": stderr, "exit_code": exit_code}
        )
        return self

    def run(self, args: Sequence[str]) -> dict[str, object]:
        key = tuple(args)
        self.calls.append(list(args))
        queue = self.responses.get(key)
        if queue:
            response = queue.pop(0) if len(queue) > 1 else queue[0]
        else:
            response = {"stdout": "", "stderr": "", "exit_code": 0}
        return {
            "argv": list(args),
            "exit_code": response["exit_code"],
            "stdout": response["stdout"],
            "stderr": response["stderr"],
            "duration_ms": 0,
            "timed_out": False,
        }

    def mutations(self) -> list[list[str]]:
        return [call for call in self.calls if call and call[0] in MUTATING_SUBCOMMANDS]

    def called(self, *args: str) -> bool:
        return list(args) in self.calls


@pytest.fixture(autouse=True)
def reset_package_logger():
    """Undo ``configure_logging`` so handlers never outlive the test that installed them."""
    yield
    logger = logging.getLogger("mergeflow")
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
    logger.setLevel(logging.NOTSET)
    logger.propagate = True


@pytest.fixture
def fake_git() -> FakeGit:
    return FakeGit()


@pytest.fixture
def config() -> Config:
    """A fully configured Config that never touches the environment."""
    return Config(
        jira_base_url="https://tracker.example.com",
        jira_email="dev@example.com",
        jira_api_token="jira-secret-token",
        github_token="gh-secret-token",
        github_owner="acme",
        github_repo="widgets",
        github_api_url="https://api.github.com",
        git_remote="origin",
        project_type="backend",
        reviewers={"backend": ["alice", "bob"]},
    )


def run_git(cwd: Path, *args: str) -> str:
    result = subprocess.run(
        ["git", *args],
        cwd=str(cwd),
        check=True,
        stdout=subprocess.PIPE,
        stderr=subprocess.PIPE,
        text=True,
    )
    return result.stdout.strip()


def commit_file(repo: Path, name: str, content: str, message: str) -> None:
    (repo / name).write_text(content)
    run_git(repo, "add", name)
    run_git(repo, "commit", "-m", message)


@dataclass
class GitRepo:
    origin: Path
    work: Path
    other: Path

    def git(self, cwd: Path, *args: str) -> str:
        return run_git(cwd, *args)

    def commit(self, cwd: Path, name: str, content: str, message: str) -> None:
        commit_file(cwd, name, content, message)


@pytest.fixture
def isolated_git_env(tmp_path: Path, monkeypatch) -> None:
    """Keep user/system git configuration out of the tests."""
    gitconfig = tmp_path / "gitconfig"
    gitconfig.write_text("")
    monkeypatch.setenv("GIT_CONFIG_GLOBAL", str(gitconfig))
    monkeypatch.setenv("GIT_CONFIG_NOSYSTEM", "1")
    monkeypatch.setenv("GIT_CEILING_DIRECTORIES", str(tmp_path))
    monkeypatch.setenv("GIT_AUTHOR_NAME", "Test")
    monkeypatch.setenv("GIT_AUTHOR_EMAIL", "test@test.com")
    monkeypatch.setenv("GIT_COMMITTER_NAME", "Test")
    monkeypatch.setenv("GIT_COMMITTER_EMAIL", "test@test.com")


@pytest.fixture
def git_repo(tmp_path: Path, isolated_git_env) -> GitRepo:
    """A clone on ``HKBP-50/feature`` whose ``origin/develop`` has one newer commit.

    ``work`` is the clone under test; ``other`` is a second clone used to
    push changes ``work`` has not pulled yet.
    """
    if not GIT_AVAILABLE:
        pytest.skip("git missing")
    origin = tmp_path / "origin.git"
    work = tmp_path / "work"
    other = tmp_path / "other"

    run_git(tmp_path, "init", "--bare", str(origin))
    run_git(origin, "symbolic-ref", "HEAD", "refs/heads/develop")

    work.mkdir()
    run_git(work, "init")
    run_git(work, "symbolic-ref", "HEAD", "refs/heads/develop")
    run_git(work, "remote", "add", "origin", str(origin))
    commit_file(work, "README.md", "hello\n", "init")
    run_git(work, "push", "-u", "origin", "develop")

    run_git(work, "checkout", "-b", "HKBP-50/feature")
    commit_file(work, "feature.txt", "feature\n", "feature work")
    run_git(work, "push", "-u", "origin", "HKBP-50/feature")

    run_git(tmp_path, "clone", "-b", "develop", str(origin), str(other))
    commit_file(other, "develop.txt", "develop\n", "develop work")
    run_git(other, "push", "origin", "develop")

    return GitRepo(origin=origin, work=work, other=other)
