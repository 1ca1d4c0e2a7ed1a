"""Merge a target branch into a fresh branch cut from the current one.

Given a clean working tree on ``HKBP-50/feature`` and target ``develop`` the
workflow:

1. validates the repository (clean tree, nothing left unpushed),
2. checks out and pulls ``develop``,
3. creates ``HKBP-50/merge_develop_<timestamp>`` from ``HKBP-50/feature``,
4. merges ``develop`` into it,
5. drops the new branch again if it does not differ from ``develop``,
6. otherwise pushes it, opens a pull request against ``develop`` and notes
   the pull request on issue ``HKBP-50``.

Whatever happens, the original branch is checked out again before ``run``
returns.  Steps after the push only produce warnings: the branch and the
pull request already exist and are never rolled back.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum

from ..config import Config
from ..errors import (
    DirtyWorkingTree,
    MergeConflict,
    MergeFlowError,
    NotARepository,
    UnpushedCommitsDeclined,
    VcsOperationFailed,
)
from ..git import inspector
from ..git.naming import derive_issue_key, merge_timestamp, new_merge_branch_name
from ..git.parsing import DiffStat
from ..git.runner import GitRunner
from ..github import api as github_api
from ..github.reviewers import reviewers_for_project
from ..github.templates import generate_merge_pr_body, merge_pr_title
from ..jira import api as jira_api
from ..jira.templates import format_pr_note

logger = logging.getLogger(__name__)

Confirm = Callable[[str], bool]


class MergeState(str, Enum):
    IDLE = "idle"
    VALIDATED = "validated"
    TARGET_SYNCED = "target_synced"
    BRANCHED = "branched"
    MERGED = "merged"
    DIFFERENCE_FOUND = "difference_found"
    NO_DIFFERENCE = "no_difference"
    PUSHED = "pushed"
    PR_CREATED = "pr_created"
    ISSUE_UPDATED = "issue_updated"
    DONE = "done"
    FAILED = "failed"


@dataclass
class MergeWorkflowState:
    """Everything one ``run`` learned.  Lives only for that invocation."""

    target_branch: str
    original_branch: str | None = None
    timestamp: str | None = None
    new_branch: str | None = None
    state: MergeState = MergeState.IDLE
    history: list[MergeState] = field(default_factory=lambda: [MergeState.IDLE])
    diff_stat: DiffStat | None = None
    pr_url: str | None = None
    issue_key: str | None = None
    warnings: list[str] = field(default_factory=list)
    error: str | None = None

    @property
    def succeeded(self) -> bool:
        return self.state in (MergeState.DONE, MergeState.NO_DIFFERENCE)


class MergeBranchWorkflow:
    """Create, merge, push and publish a merge branch.

    ``confirm`` resolves the one interactive decision: whether to push
    unpushed commits on the current branch before starting.  ``clock``
    supplies the timestamp used in the merge branch name.
    """

    def __init__(
        self,
        git: GitRunner,
        config: Config,
        confirm: Confirm,
        project_type: str | None = None,
        clock: Callable[[], datetime] = datetime.now,
    ) -> None:
        self.git = git
        self.config = config
        self.confirm = confirm
        self.project_type = project_type if project_type is not None else config.project_type
        self.clock = clock
        self.state: MergeWorkflowState | None = None
        self._switched = False

    @property
    def remote(self) -> str:
        return self.config.git_remote

    def _advance(self, new_state: MergeState) -> None:
        self.state.state = new_state
        self.state.history.append(new_state)
        logger.debug("Merge workflow -> %s", new_state.value)

    def _warn(self, message: str) -> None:
        self.state.warnings.append(message)
        logger.warning(message)

    def _checkout(self, branch: str) -> None:
        self.git.check(["checkout", branch])
        self._switched = True

    def run(self, target_branch: str) -> MergeWorkflowState:
        self.state = MergeWorkflowState(target_branch=target_branch)
        self._switched = False
        try:
            self._validate()
            self._sync_target()
            self._create_branch()
            self._merge()
            if not self._differs():
                self._discard_branch()
                return self.state
            self._push()
            self._publish()
            self._advance(MergeState.DONE)
            return self.state
        except MergeFlowError as exc:
            self.state.error = str(exc)
            self._advance(MergeState.FAILED)
            raise
        finally:
            self._restore_original()

    def _validate(self) -> None:
        state = self.state
        if not inspector.is_repository(self.git):
            raise NotARepository()
        original = inspector.current_branch(self.git)
        if original is None:
            raise NotARepository("Failed to get current branch.")
        state.original_branch = original

        if not inspector.is_working_tree_clean(self.git):
            raise DirtyWorkingTree()

        if inspector.has_unpushed_commits(self.git, original, self.remote):
            logger.warning("You have unpushed commits on branch %s.", original)
            if not self.confirm("Do you want to push these commits before proceeding?"):
                raise UnpushedCommitsDeclined(original)
            self._push_original(original)

        state.timestamp = merge_timestamp(self.clock())
        state.new_branch = new_merge_branch_name(original, state.target_branch, state.timestamp)
        self._advance(MergeState.VALIDATED)

    def _push_original(self, branch: str) -> None:
        if inspector.upstream_of(self.git, branch):
            args = ["push"]
        else:
            args = ["push", "--set-upstream", self.remote, branch]
        try:
            self.git.check(args)
        except VcsOperationFailed as exc:
            raise VcsOperationFailed(
                exc.argv, exc.stderr, "Failed to push commits. Please push manually and try again"
            ) from exc
        logger.info("Commits pushed successfully.")

    def _sync_target(self) -> None:
        target = self.state.target_branch
        logger.info("Updating %s", target)
        self._checkout(target)
        self.git.check(["pull"])
        self._advance(MergeState.TARGET_SYNCED)

    def _create_branch(self) -> None:
        state = self.state
        self._checkout(state.original_branch)
        self.git.check(["checkout", "-b", state.new_branch])
        logger.info("Created branch %s from %s", state.new_branch, state.original_branch)
        self._advance(MergeState.BRANCHED)

    def _merge(self) -> None:
        state = self.state
        args = ["merge", "--no-edit", state.target_branch]
        result = self.git.run(args)
        if result["exit_code"] != 0:
            stderr = str(result["stderr"]).strip()
            if "CONFLICT" not in str(result["stdout"]) and not inspector.unmerged_paths(self.git):
                raise VcsOperationFailed(
                    args, stderr, f"Failed to merge {state.target_branch} into {state.new_branch}"
                )
            # Leave the branch where it is but without a half-finished merge,
            # otherwise the original branch cannot be checked out again.
            self.git.run(["merge", "--abort"])
            raise MergeConflict(state.target_branch, state.new_branch, stderr)
        self._advance(MergeState.MERGED)

    def _differs(self) -> bool:
        state = self.state
        if not inspector.has_diff(self.git, state.target_branch, state.new_branch):
            return False
        state.diff_stat = inspector.diff_stat(self.git, state.target_branch, state.new_branch)
        logger.info("Differences from %s: %s", state.target_branch, state.diff_stat)
        self._advance(MergeState.DIFFERENCE_FOUND)
        return True

    def _discard_branch(self) -> None:
        state = self.state
        logger.info("No differences found between %s and %s.", state.new_branch, state.target_branch)
        logger.warning(
            "Deleting merge branch %s; any conflict resolution done on it is discarded.",
            state.new_branch,
        )
        self._checkout(state.original_branch)
        self.git.check(["branch", "-D", state.new_branch])
        logger.info("Cleaned up: switched back to %s and deleted %s.", state.original_branch, state.new_branch)
        self._advance(MergeState.NO_DIFFERENCE)

    def _push(self) -> None:
        state = self.state
        try:
            self.git.check(["push", "--set-upstream", self.remote, state.new_branch])
        except VcsOperationFailed as exc:
            raise VcsOperationFailed(
                exc.argv, exc.stderr, f"Failed to push new branch {state.new_branch}"
            ) from exc
        logger.info("Successfully created and pushed merge branch: %s", state.new_branch)
        self._advance(MergeState.PUSHED)

    def _publish(self) -> None:
        state = self.state
        state.issue_key = derive_issue_key(state.original_branch)
        try:
            reviewers = reviewers_for_project(self.config, self.project_type)
            pr = github_api.create_pull_request(
                self.config,
                title=merge_pr_title(state.original_branch, state.target_branch),
                head=state.new_branch,
                base=state.target_branch,
                body=generate_merge_pr_body(
                    state.original_branch,
                    state.target_branch,
                    state.new_branch,
                    diff_stat=state.diff_stat,
                    issue_key=state.issue_key,
                ),
                reviewers=reviewers,
            )
        except MergeFlowError as exc:
            self._warn(f"Pull request was not created: {exc}")
            return
        state.pr_url = pr.url
        if pr.reviewer_error:
            state.warnings.append(f"Reviewers were not assigned: {pr.reviewer_error}")
        self._advance(MergeState.PR_CREATED)

        if state.issue_key is None:
            self._warn(f"No issue key in branch name '{state.original_branch}'; issue not updated")
            return
        note = format_pr_note(self.clock().date(), state.original_branch, state.target_branch, pr.url)
        try:
            jira_api.append_description(self.config, state.issue_key, note)
        except MergeFlowError as exc:
            self._warn(f"Issue {state.issue_key} was not updated: {exc}")
            return
        logger.info("Added pull request details to issue %s", state.issue_key)
        self._advance(MergeState.ISSUE_UPDATED)

    def _restore_original(self) -> None:
        state = self.state
        if not self._switched or state is None or state.original_branch is None:
            return
        if inspector.current_branch(self.git) == state.original_branch:
            return
        result = self.git.run(["checkout", state.original_branch])
        if result["exit_code"] != 0:
            logger.error(
                "Could not switch back to %s: %s", state.original_branch, str(result["stderr"]).strip()
            )
        else:
            logger.info("Switched back to %s", state.original_branch)
