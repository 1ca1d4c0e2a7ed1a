"""Parsers for git command output.

Each function handles exactly one output shape and is free of side effects
so it can be tested against captured output.
"""

from __future__ import annotations

import re
from collections.abc import Iterable
from dataclasses import dataclass


@dataclass(frozen=True)
class DiffStat:
    """Summary line of ``git diff --stat``."""

    files_changed: int = 0
    insertions: int = 0
    deletions: int = 0

    @property
    def is_empty(self) -> bool:
        return self.files_changed == 0

    def __str__(self) -> str:
        return (
            f"{self.files_changed} file(s) changed, "
            f"{self.insertions} insertion(s), {self.deletions} deletion(s)"
        )


_STAT_FILES = re.compile(r"(\d+) files? changed")
_STAT_INSERTIONS = re.compile(r"(\d+) insertions?\(\+\)")
_STAT_DELETIONS = re.compile(r"(\d+) deletions?\(-\)")

_GITHUB_REMOTE_PATTERNS = [
    re.compile(r"^git@github\.com:(?P<repo>[^/]+/[^/]+?)(?:\.git)?/?$"),
    re.compile(r"^ssh://git@github\.com/(?P<repo>[^/]+/[^/]+?)(?:\.git)?/?$"),
    re.compile(r"^https?://(?:[^@/]+@)?github\.com/(?P<repo>[^/]+/[^/]+?)(?:\.git)?/?$"),
    re.compile(r"^git://github\.com/(?P<repo>[^/]+/[^/]+?)(?:\.git)?/?$"),
]


def parse_ref_list(output: str) -> list[str]:
    """Parse ``git for-each-ref --format=%(refname:short)`` output."""
    refs: list[str] = []
    for line in output.splitlines():
        name = line.strip()
        if name and name not in refs:
            refs.append(name)
    return refs


def split_remote_ref(ref: str, remotes: Iterable[str]) -> tuple[str, str] | None:
    """Split ``origin/feature/x`` into ``("origin", "feature/x")``.

    Remote names may themselves contain ``/`` so the longest matching remote
    wins.  A bare remote name (the short form of ``origin/HEAD``) and refs of
    unknown remotes yield ``None``.
    """
    for remote in sorted(remotes, key=len, reverse=True):
        lead = f"{remote}/"
        if ref.startswith(lead):
            branch = ref[len(lead) :]
            if not branch or branch == "HEAD":
                return None
            return remote, branch
    return None


def parse_porcelain_status(output: str) -> list[tuple[str, str]]:
    """Parse ``git status --porcelain`` into ``(code, path)`` entries."""
    entries: list[tuple[str, str]] = []
    for line in output.splitlines():
        if not line.strip():
            continue
        code = line[:2].strip() or "?"
        path = line[3:] if len(line) > 3 else ""
        entries.append((code, path))
    return entries


def parse_diff_stat(output: str) -> DiffStat:
    """Parse the summary line of ``git diff --stat`` / ``--shortstat``."""
    for line in reversed(output.splitlines()):
        files = _STAT_FILES.search(line)
        if not files:
            continue
        insertions = _STAT_INSERTIONS.search(line)
        deletions = _STAT_DELETIONS.search(line)
        return DiffStat(
            files_changed=int(files.group(1)),
            insertions=int(insertions.group(1)) if insertions else 0,
            deletions=int(deletions.group(1)) if deletions else 0,
        )
    return DiffStat()


def parse_upstream(value: str) -> tuple[str, str] | None:
    """Split an upstream short name such as ``origin/x/y`` at the first ``/``."""
    value = value.strip()
    remote, sep, branch = value.partition("/")
    if not sep or not remote or not branch:
        return None
    return remote, branch


def parse_github_slug(remote_url: str) -> str | None:
    """Extract ``owner/repo`` from a GitHub remote URL."""
    for pattern in _GITHUB_REMOTE_PATTERNS:
        match = pattern.match(remote_url.strip())
        if match:
            return match.group("repo")
    return None
