"""Read-only queries against a git repository.

Nothing in this module mutates the repository.  Every answer is computed
fresh from git on each call; nothing is cached between calls.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from ..errors import VcsOperationFailed
from .naming import prefix as branch_prefix
from .parsing import DiffStat, parse_diff_stat, parse_porcelain_status, parse_ref_list, split_remote_ref
from .runner import GitRunner

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RepositoryStatus:
    """Snapshot of the repository state used by the workflows."""

    is_repository: bool
    current_branch: str | None
    has_uncommitted_changes: bool
    has_unpushed_commits: bool


def is_repository(git: GitRunner) -> bool:
    result = git.run(["rev-parse", "--is-inside-work-tree"])
    return result["exit_code"] == 0 and str(result["stdout"]).strip() == "true"


def current_branch(git: GitRunner) -> str | None:
    """Return the checked out branch, or None outside a repository or on a detached HEAD."""
    result = git.run(["rev-parse", "--abbrev-ref", "HEAD"])
    if result["exit_code"] != 0:
        return None
    name = str(result["stdout"]).strip()
    if not name or name == "HEAD":
        return None
    return name


def is_working_tree_clean(git: GitRunner) -> bool:
    """True when there are no staged, unstaged or untracked changes."""
    result = git.run(["status", "--porcelain"])
    if result["exit_code"] != 0:
        raise VcsOperationFailed(["status", "--porcelain"], str(result["stderr"]).strip())
    return not parse_porcelain_status(str(result["stdout"]))


def upstream_of(git: GitRunner, branch: str) -> str | None:
    """Return the upstream short name (``origin/x``) of a local branch."""
    result = git.run(["rev-parse", "--abbrev-ref", f"{branch}@{{upstream}}"])
    if result["exit_code"] != 0:
        return None
    return str(result["stdout"]).strip() or None


def ref_exists(git: GitRunner, ref: str) -> bool:
    return git.ok(["rev-parse", "--verify", "--quiet", ref])


def has_unpushed_commits(git: GitRunner, branch: str, remote: str) -> bool:
    """True when ``branch`` has commits its remote counterpart lacks.

    The configured upstream is preferred, then ``<remote>/<branch>``.  A
    branch without any remote counterpart has never been pushed, so all of
    its commits count as unpushed.
    """
    counterpart = upstream_of(git, branch)
    if counterpart is None and ref_exists(git, f"refs/remotes/{remote}/{branch}"):
        counterpart = f"{remote}/{branch}"
    if counterpart is None:
        logger.debug("Branch %s has no remote counterpart", branch)
        return True
    count = git.check(["rev-list", "--count", f"{counterpart}..{branch}"])
    return int(count or 0) > 0


def remotes(git: GitRunner) -> list[str]:
    return parse_ref_list(git.check(["remote"]))


def remote_url(git: GitRunner, remote: str) -> str | None:
    result = git.run(["remote", "get-url", remote])
    if result["exit_code"] != 0:
        return None
    return str(result["stdout"]).strip() or None


def local_branches(git: GitRunner) -> list[str]:
    return parse_ref_list(git.check(["for-each-ref", "--format=%(refname:short)", "refs/heads"]))


def remote_refs(git: GitRunner) -> list[str]:
    return parse_ref_list(git.check(["for-each-ref", "--format=%(refname:short)", "refs/remotes"]))


def local_branch_exists(git: GitRunner, branch: str) -> bool:
    return git.ok(["show-ref", "--verify", "--quiet", f"refs/heads/{branch}"])


def remote_branch_exists(git: GitRunner, remote: str, branch: str) -> bool:
    """Ask the remote itself (not the local remote-tracking refs)."""
    return git.ok(["ls-remote", "--exit-code", "--heads", remote, branch])


def list_branches(git: GitRunner, contains: str, include_remote: bool = False) -> list[str]:
    """Return branch names containing ``contains``, sorted and deduplicated.

    Remote branches are listed without their remote prefix, so a branch that
    exists locally and remotely appears once.
    """
    names = {name for name in local_branches(git) if contains in name}
    if include_remote:
        known_remotes = remotes(git)
        for ref in remote_refs(git):
            split = split_remote_ref(ref, known_remotes)
            if split and contains in split[1]:
                names.add(split[1])
    return sorted(names)


def list_branches_with_prefix(git: GitRunner, name_prefix: str) -> list[str]:
    """Local branches, then remote refs, whose branch name starts with ``name_prefix``."""
    matches = [name for name in local_branches(git) if name.startswith(name_prefix)]
    known_remotes = remotes(git)
    for ref in remote_refs(git):
        split = split_remote_ref(ref, known_remotes)
        if split and split[1].startswith(name_prefix) and ref not in matches:
            matches.append(ref)
    return matches


def topic_branches(git: GitRunner, branch: str | None = None) -> list[str]:
    """Branches sharing a prefix with ``branch`` (default: the current branch)."""
    if branch is None:
        branch = current_branch(git)
        if branch is None:
            return []
    return list_branches_with_prefix(git, branch_prefix(branch))


def diff_stat(git: GitRunner, base: str, other: str) -> DiffStat:
    return parse_diff_stat(git.check(["diff", "--stat", base, other]))


def unmerged_paths(git: GitRunner) -> list[str]:
    """Paths left in conflict by an unfinished merge."""
    result = git.run(["diff", "--name-only", "--diff-filter=U"])
    if result["exit_code"] != 0:
        return []
    return [line.strip() for line in str(result["stdout"]).splitlines() if line.strip()]


def has_diff(git: GitRunner, base: str, other: str) -> bool:
    """True when the trees of ``base`` and ``other`` differ."""
    args = ["diff", "--quiet", base, other]
    result = git.run(args)
    if result["exit_code"] == 0:
        return False
    if result["exit_code"] == 1:
        return True
    raise VcsOperationFailed(args, str(result["stderr"]).strip())


def repository_status(git: GitRunner, remote: str) -> RepositoryStatus:
    if not is_repository(git):
        return RepositoryStatus(False, None, False, False)
    branch = current_branch(git)
    dirty = not is_working_tree_clean(git)
    unpushed = has_unpushed_commits(git, branch, remote) if branch else False
    return RepositoryStatus(True, branch, dirty, unpushed)
