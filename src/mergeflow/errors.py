"""Exception types raised by mergeflow.

Every failure the workflows can report derives from ``MergeFlowError`` so
entrypoints can map them to a single exit code.
"""

from __future__ import annotations

from collections.abc import Sequence


class MergeFlowError(Exception):
    """Base class for all mergeflow failures."""


class NotARepository(MergeFlowError):
    def __init__(self, detail: str = "Not in a Git repository.") -> None:
        super().__init__(detail)


class DirtyWorkingTree(MergeFlowError):
    def __init__(self) -> None:
        super().__init__(
            "Your branch has uncommitted or unstaged changes. "
            "Please commit or stash them before proceeding."
        )


class UnpushedCommitsDeclined(MergeFlowError):
    def __init__(self, branch: str) -> None:
        self.branch = branch
        super().__init__(
            f"Branch '{branch}' has unpushed commits. "
            "Operation aborted. Please push your commits and try again."
        )


class VcsOperationFailed(MergeFlowError):
    """A git command exited with a non-zero status."""

    def __init__(self, argv: Sequence[str], stderr: str, message: str | None = None) -> None:
        self.argv = list(argv)
        self.stderr = stderr
        text = message or f"git {' '.join(self.argv)} failed"
        if stderr:
            text = f"{text}: {stderr}"
        super().__init__(text)


class MergeConflict(MergeFlowError):
    def __init__(self, target: str, merge_branch: str, stderr: str = "") -> None:
        self.target = target
        self.merge_branch = merge_branch
        self.stderr = stderr
        super().__init__(
            f"Merge conflicts occurred merging '{target}' into '{merge_branch}'. "
            f"Branch '{merge_branch}' was kept for manual resolution."
        )


class NotConfigured(MergeFlowError):
    def __init__(self, service: str, missing: Sequence[str]) -> None:
        self.service = service
        self.missing = list(missing)
        super().__init__(
            f"The {service} is not configured; missing: {', '.join(self.missing)}"
        )


class RemoteError(MergeFlowError):
    """An HTTP call failed or returned a non-2xx status."""

    def __init__(self, service: str, status_code: int | None, detail: str) -> None:
        self.service = service
        self.status_code = status_code
        self.detail = detail
        if status_code is None:
            super().__init__(f"{service} request failed: {detail}")
        else:
            super().__init__(f"{service} error {status_code}: {detail}")


class NotFound(MergeFlowError):
    def __init__(self, kind: str, name: str) -> None:
        self.kind = kind
        self.name = name
        super().__init__(f"{kind} '{name}' not found")
