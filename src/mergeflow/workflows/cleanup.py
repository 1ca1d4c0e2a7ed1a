"""Bulk deletion of branches whose names contain a substring.

Deletion is forced (``branch -D``) and covers the remote side too, so it is
gated by a single confirmation for the whole batch.  It is not
transactional: every branch is attempted and reported on its own.
"""

from __future__ import annotations

import logging
from collections import Counter
from collections.abc import Callable, Iterable
from dataclasses import dataclass

from ..errors import VcsOperationFailed
from ..git import inspector
from ..git.parsing import parse_upstream
from ..git.runner import GitRunner

logger = logging.getLogger(__name__)

DELETED = "deleted"
SKIPPED = "skipped"
NOT_FOUND = "not_found"
FAILED = "failed"


@dataclass
class DeletionOutcome:
    branch: str
    status: str
    detail: str = ""


def find_matching(git: GitRunner, substring: str, include_remote: bool = False) -> list[str]:
    return inspector.list_branches(git, substring, include_remote)


def _delete_remote(git: GitRunner, remote: str, branch: str) -> None:
    logger.info("Deleting remote branch: %s/%s", remote, branch)
    git.check(["push", remote, "--delete", branch])


def _delete_one(git: GitRunner, branch: str, local: set[str], remote: str) -> DeletionOutcome:
    if branch not in local:
        if not inspector.remote_branch_exists(git, remote, branch):
            logger.info("Remote branch not found: %s/%s. Skipping.", remote, branch)
            return DeletionOutcome(branch, NOT_FOUND, f"{remote}/{branch} does not exist")
        _delete_remote(git, remote, branch)
        return DeletionOutcome(branch, DELETED, f"deleted {remote}/{branch}")

    done: list[str] = []
    problems: list[str] = []
    upstream = inspector.upstream_of(git, branch)
    tracking = parse_upstream(upstream) if upstream else None
    if tracking is not None:
        try:
            _delete_remote(git, *tracking)
            done.append(f"deleted {upstream}")
        except VcsOperationFailed as exc:
            logger.warning("Could not delete remote tracking branch %s: %s", upstream, exc)
            problems.append(f"{upstream} not deleted: {exc}")

    logger.info("Deleting local branch: %s", branch)
    try:
        git.check(["branch", "-D", branch])
        done.insert(0, f"deleted {branch}")
    except VcsOperationFailed as exc:
        logger.error("Failed to delete %s: %s", branch, exc)
        problems.append(str(exc))

    # Report what already happened alongside what failed.
    if problems:
        return DeletionOutcome(branch, FAILED, "; ".join(done + problems))
    detail = f"deleted {branch} and {upstream}" if tracking else f"deleted {branch}"
    return DeletionOutcome(branch, DELETED, detail)


def delete_branches(
    git: GitRunner,
    branches: Iterable[str],
    current_branch: str | None,
    remote: str,
) -> list[DeletionOutcome]:
    """Delete each branch locally and remotely, never stopping early."""
    local = set(inspector.local_branches(git))
    outcomes: list[DeletionOutcome] = []
    for branch in branches:
        if branch == current_branch:
            logger.warning("Cannot delete the current branch '%s'. Skipping.", branch)
            outcomes.append(DeletionOutcome(branch, SKIPPED, "current branch"))
            continue
        try:
            outcomes.append(_delete_one(git, branch, local, remote))
        except VcsOperationFailed as exc:
            logger.error("Failed to delete %s: %s", branch, exc)
            outcomes.append(DeletionOutcome(branch, FAILED, str(exc)))
    return outcomes


def remove_branches(
    git: GitRunner,
    substring: str,
    include_remote: bool,
    confirm: Callable[[str], bool],
    remote: str,
) -> list[DeletionOutcome]:
    """Find branches containing ``substring`` and delete them after one confirmation."""
    current = inspector.current_branch(git)
    branches = find_matching(git, substring, include_remote)
    if not branches:
        logger.info("No branches found containing '%s'", substring)
        return []

    logger.info("The following branches will be deleted:")
    for branch in branches:
        logger.info("  %s", branch)
    if not confirm("Do you want to continue?"):
        logger.info("Operation aborted by user.")
        return []
    return delete_branches(git, branches, current, remote)


def summarize(outcomes: Iterable[DeletionOutcome]) -> dict[str, int]:
    counts = Counter(outcome.status for outcome in outcomes)
    return {status: counts.get(status, 0) for status in (DELETED, SKIPPED, NOT_FOUND, FAILED)}
