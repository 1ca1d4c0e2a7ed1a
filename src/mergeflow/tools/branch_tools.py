"""Repository and branch tool implementations.

These tools wrap the read-only inspector and the branch cleanup workflow.
``repo_path`` is the working tree to operate on; it defaults to the
server's working directory.
"""

from __future__ import annotations

import logging
from dataclasses import asdict

from .. import state
from ..errors import NotARepository
from ..git import inspector
from ..workflows import cleanup

logger = logging.getLogger(__name__)


def current_branch(repo_path: str = ".") -> dict[str, object]:
    """Return the checked out branch (``None`` on a detached HEAD)."""
    git = state.git_for(repo_path)
    if not inspector.is_repository(git):
        raise NotARepository()
    return {"branch": inspector.current_branch(git)}


def repository_status(repo_path: str = ".") -> dict[str, object]:
    """Return repo-ness, current branch, uncommitted and unpushed state."""
    git = state.git_for(repo_path)
    return asdict(inspector.repository_status(git, state.CONFIG.git_remote))


def find_branches(contains: str, include_remote: bool = False, repo_path: str = ".") -> dict[str, object]:
    """List branches whose name contains ``contains``."""
    git = state.git_for(repo_path)
    return {"branches": cleanup.find_matching(git, contains, include_remote)}


def topic_branches(branch: str | None = None, repo_path: str = ".") -> dict[str, object]:
    """List branches sharing ``branch``'s prefix (default: the current branch)."""
    git = state.git_for(repo_path)
    if branch is None and inspector.current_branch(git) is None:
        raise NotARepository()
    return {"branches": inspector.topic_branches(git, branch)}


def remove_branches(
    contains: str,
    include_remote: bool = False,
    confirmed: bool = False,
    repo_path: str = ".",
) -> dict[str, object]:
    """Force-delete branches containing ``contains`` locally and remotely.

    The client must pass ``confirmed=True`` after showing the user the list
    returned by ``find_branches``; otherwise nothing is deleted.
    """
    git = state.git_for(repo_path)
    if not inspector.is_repository(git):
        raise NotARepository()
    outcomes = cleanup.remove_branches(
        git, contains, include_remote, lambda prompt: confirmed, state.CONFIG.git_remote
    )
    if not confirmed:
        logger.info("remove_branches called without confirmation; nothing deleted")
    return {
        "confirmed": confirmed,
        "outcomes": [asdict(outcome) for outcome in outcomes],
        "summary": cleanup.summarize(outcomes),
    }
