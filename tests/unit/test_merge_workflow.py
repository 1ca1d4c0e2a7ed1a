"""Unit tests for the merge branch workflow against a scripted git runner."""

from __future__ import annotations

from datetime import datetime

import pytest

from mergeflow.errors import (
    DirtyWorkingTree,
    MergeConflict,
    NotARepository,
    RemoteError,
    UnpushedCommitsDeclined,
    VcsOperationFailed,
)
from mergeflow.github.api import PullRequest
from mergeflow.workflows.merge_branch import MergeBranchWorkflow, MergeState

ORIGINAL = "HKBP-50/feature"
NEW_BRANCH = "HKBP-50/merge_develop_20240101_120000"
PR_URL = "https://github.com/acme/widgets/pull/7"


def fixed_clock() -> datetime:
    return datetime(2024, 1, 1, 12, 0, 0)


@pytest.fixture
def repo(fake_git):
    """A clean repository on HKBP-50/feature with nothing unpushed."""
    fake_git.on("rev-parse", "--is-inside-work-tree", stdout="true\n")
    fake_git.on("rev-parse", "--abbrev-ref", "HEAD", stdout=f"{ORIGINAL}\n")
    fake_git.on("rev-parse", "--abbrev-ref", f"{ORIGINAL}@{{upstream}}", stdout=f"origin/{ORIGINAL}\n")
    fake_git.on("rev-list", "--count", f"origin/{ORIGINAL}..{ORIGINAL}", stdout="0\n")
    return fake_git


@pytest.fixture
def differing(repo):
    repo.on("diff", "--quiet", "develop", NEW_BRANCH, exit_code=1)
    repo.on(
        "diff",
        "--stat",
        "develop",
        NEW_BRANCH,
        stdout=" feature.txt | 1 +\n 1 file changed, 1 insertion(+)\n",
    )
    return repo


@pytest.fixture
def create_pr(mocker):
    return mocker.patch(
        "mergeflow.workflows.merge_branch.github_api.create_pull_request",
        return_value=PullRequest(url=PR_URL, number=7, requested_reviewers=["alice", "bob"]),
    )


@pytest.fixture
def append_description(mocker):
    return mocker.patch(
        "mergeflow.workflows.merge_branch.jira_api.append_description",
        return_value="updated",
    )


def make_workflow(git, config, confirm=lambda prompt: False):
    return MergeBranchWorkflow(git, config, confirm=confirm, clock=fixed_clock)


def test_happy_path(differing, config, create_pr, append_description):
    result = make_workflow(differing, config).run("develop")

    assert result.state == MergeState.DONE
    assert result.succeeded
    assert result.new_branch == NEW_BRANCH
    assert result.pr_url == PR_URL
    assert result.issue_key == "HKBP-50"
    assert result.warnings == []
    assert result.history == [
        MergeState.IDLE,
        MergeState.VALIDATED,
        MergeState.TARGET_SYNCED,
        MergeState.BRANCHED,
        MergeState.MERGED,
        MergeState.DIFFERENCE_FOUND,
        MergeState.PUSHED,
        MergeState.PR_CREATED,
        MergeState.ISSUE_UPDATED,
        MergeState.DONE,
    ]
    assert differing.mutations() == [
        ["checkout", "develop"],
        ["pull"],
        ["checkout", ORIGINAL],
        ["checkout", "-b", NEW_BRANCH],
        ["merge", "--no-edit", "develop"],
        ["push", "--set-upstream", "origin", NEW_BRANCH],
    ]


def test_pull_request_contents(differing, config, create_pr, append_description):
    make_workflow(differing, config).run("develop")

    kwargs = create_pr.call_args.kwargs
    assert kwargs["title"] == "Merge HKBP-50/feature into develop"
    assert kwargs["head"] == NEW_BRANCH
    assert kwargs["base"] == "develop"
    assert kwargs["reviewers"] == {"alice", "bob"}
    assert "1 file(s) changed, 1 insertion(s), 0 deletion(s)" in kwargs["body"]
    assert "Related to HKBP-50" in kwargs["body"]


def test_issue_note(differing, config, create_pr, append_description):
    make_workflow(differing, config).run("develop")

    append_description.assert_called_once()
    _, key, note = append_description.call_args.args
    assert key == "HKBP-50"
    assert "(2024-01-01)" in note
    assert "Source branch: HKBP-50/feature" in note
    assert "Target branch: develop" in note
    assert PR_URL in note


def test_not_a_repository(fake_git, config):
    fake_git.on("rev-parse", "--is-inside-work-tree", exit_code=128)
    workflow = make_workflow(fake_git, config)

    with pytest.raises(NotARepository):
        workflow.run("develop")
    assert workflow.state.state == MergeState.FAILED
    assert fake_git.mutations() == []


def test_detached_head_is_rejected(fake_git, config):
    fake_git.on("rev-parse", "--is-inside-work-tree", stdout="true\n")
    fake_git.on("rev-parse", "--abbrev-ref", "HEAD", stdout="HEAD\n")

    with pytest.raises(NotARepository):
        make_workflow(fake_git, config).run("develop")
    assert fake_git.mutations() == []


def test_dirty_tree_touches_nothing(repo, config):
    repo.on("status", "--porcelain", stdout=" M feature.txt\n")
    workflow = make_workflow(repo, config)

    with pytest.raises(DirtyWorkingTree):
        workflow.run("develop")
    assert repo.mutations() == []
    assert workflow.state.error is not None


def test_unpushed_commits_declined(repo, config):
    repo.responses.pop(("rev-list", "--count", f"origin/{ORIGINAL}..{ORIGINAL}"))
    repo.on("rev-list", "--count", f"origin/{ORIGINAL}..{ORIGINAL}", stdout="2\n")
    prompts = []

    def decline(prompt):
        prompts.append(prompt)
        return False

    with pytest.raises(UnpushedCommitsDeclined):
        make_workflow(repo, config, confirm=decline).run("develop")
    assert prompts == ["Do you want to push these commits before proceeding?"]
    assert repo.mutations() == []


def test_unpushed_commits_accepted_pushes_first(differing, config, create_pr, append_description):
    differing.responses.pop(("rev-list", "--count", f"origin/{ORIGINAL}..{ORIGINAL}"))
    differing.on("rev-list", "--count", f"origin/{ORIGINAL}..{ORIGINAL}", stdout="2\n")

    result = make_workflow(differing, config, confirm=lambda prompt: True).run("develop")

    assert result.state == MergeState.DONE
    assert differing.mutations()[0] == ["push"]


def test_never_pushed_branch_gets_upstream(differing, config, create_pr, append_description):
    differing.responses.pop(("rev-parse", "--abbrev-ref", f"{ORIGINAL}@{{upstream}}"))
    differing.on("rev-parse", "--abbrev-ref", f"{ORIGINAL}@{{upstream}}", exit_code=128)
    differing.on("rev-parse", "--verify", "--quiet", f"refs/remotes/origin/{ORIGINAL}", exit_code=1)

    make_workflow(differing, config, confirm=lambda prompt: True).run("develop")

    assert differing.mutations()[0] == ["push", "--set-upstream", "origin", ORIGINAL]


def test_failed_push_of_original_branch(repo, config):
    repo.responses.pop(("rev-list", "--count", f"origin/{ORIGINAL}..{ORIGINAL}"))
    repo.on("rev-list", "--count", f"origin/{ORIGINAL}..{ORIGINAL}", stdout="1\n")
    repo.on("push", stderr="rejected", exit_code=1)

    with pytest.raises(VcsOperationFailed, match="Failed to push commits"):
        make_workflow(repo, config, confirm=lambda prompt: True).run("develop")
    assert not repo.called("checkout", "develop")


def test_no_difference_deletes_branch(repo, config, create_pr, append_description):
    repo.on("diff", "--quiet", "develop", NEW_BRANCH, exit_code=0)

    result = make_workflow(repo, config).run("develop")

    assert result.state == MergeState.NO_DIFFERENCE
    assert result.succeeded
    assert repo.called("branch", "-D", NEW_BRANCH)
    assert not any(call[0] == "push" for call in repo.mutations())
    create_pr.assert_not_called()
    append_description.assert_not_called()


def test_merge_conflict_aborts_and_restores(repo, config, create_pr):
    repo.on(
        "merge", "--no-edit", "develop", stdout="CONFLICT (content): Merge conflict in develop.txt\n", exit_code=1
    )
    # HEAD is on the new branch once the workflow tries to restore
    repo.responses[("rev-parse", "--abbrev-ref", "HEAD")].append(
        {"stdout": f"{NEW_BRANCH}\n", "stderr": "", "exit_code": 0}
    )
    workflow = make_workflow(repo, config)

    with pytest.raises(MergeConflict) as excinfo:
        workflow.run("develop")

    assert excinfo.value.merge_branch == NEW_BRANCH
    assert repo.called("merge", "--abort")
    assert repo.calls[-1] == ["checkout", ORIGINAL]
    assert not repo.called("branch", "-D", NEW_BRANCH)
    assert workflow.state.state == MergeState.FAILED
    create_pr.assert_not_called()


def test_failed_pull_restores_original_branch(repo, config):
    repo.on("pull", stderr="could not resolve host", exit_code=1)
    repo.responses[("rev-parse", "--abbrev-ref", "HEAD")].append(
        {"stdout": "develop\n", "stderr": "", "exit_code": 0}
    )

    with pytest.raises(VcsOperationFailed):
        make_workflow(repo, config).run("develop")
    assert repo.calls[-1] == ["checkout", ORIGINAL]


def test_merge_refusal_is_not_a_conflict(repo, config, create_pr):
    repo.on(
        "merge", "--no-edit", "develop", stderr="fatal: refusing to merge unrelated histories", exit_code=128
    )
    workflow = make_workflow(repo, config)

    with pytest.raises(VcsOperationFailed, match="refusing to merge unrelated histories"):
        workflow.run("develop")

    assert not repo.called("merge", "--abort")
    assert workflow.state.state == MergeState.FAILED
    create_pr.assert_not_called()


def test_conflict_detected_from_unmerged_paths(repo, config):
    repo.on("merge", "--no-edit", "develop", stderr="Automatic merge failed", exit_code=1)
    repo.on("diff", "--name-only", "--diff-filter=U", stdout="develop.txt\n")

    with pytest.raises(MergeConflict):
        make_workflow(repo, config).run("develop")
    assert repo.called("merge", "--abort")


def test_push_failure_of_merge_branch(differing, config, create_pr):
    differing.on("push", "--set-upstream", "origin", NEW_BRANCH, stderr="denied", exit_code=1)

    with pytest.raises(VcsOperationFailed, match=f"Failed to push new branch {NEW_BRANCH}"):
        make_workflow(differing, config).run("develop")
    create_pr.assert_not_called()


def test_pull_request_failure_is_a_warning(differing, config, create_pr, append_description):
    create_pr.side_effect = RemoteError("pull request service", 422, "Validation Failed")

    result = make_workflow(differing, config).run("develop")

    assert result.state == MergeState.DONE
    assert result.pr_url is None
    assert len(result.warnings) == 1
    assert "Pull request was not created" in result.warnings[0]
    append_description.assert_not_called()


def test_reviewer_failure_is_a_warning(differing, config, create_pr, append_description):
    create_pr.return_value = PullRequest(url=PR_URL, number=7, reviewer_error="422 not a collaborator")

    result = make_workflow(differing, config).run("develop")

    assert result.pr_url == PR_URL
    assert result.warnings == ["Reviewers were not assigned: 422 not a collaborator"]
    append_description.assert_called_once()


def test_issue_update_failure_is_a_warning(differing, config, create_pr, append_description):
    append_description.side_effect = RemoteError("issue tracker", 500, "oops")

    result = make_workflow(differing, config).run("develop")

    assert result.state == MergeState.DONE
    assert MergeState.ISSUE_UPDATED not in result.history
    assert "Issue HKBP-50 was not updated" in result.warnings[0]


def test_branch_without_issue_key(fake_git, config, create_pr, append_description):
    original = "feature/login"
    new_branch = "feature/merge_main_20240101_120000"
    fake_git.on("rev-parse", "--is-inside-work-tree", stdout="true\n")
    fake_git.on("rev-parse", "--abbrev-ref", "HEAD", stdout=f"{original}\n")
    fake_git.on("diff", "--quiet", "main", new_branch, exit_code=1)

    result = make_workflow(fake_git, config).run("main")

    assert result.new_branch == new_branch
    assert result.issue_key is None
    assert result.state == MergeState.DONE
    assert "No issue key" in result.warnings[0]
    append_description.assert_not_called()


def test_bug_branch_issue_key(fake_git, config, create_pr, append_description):
    original = "Bug/HKBP-222/crash"
    fake_git.on("rev-parse", "--is-inside-work-tree", stdout="true\n")
    fake_git.on("rev-parse", "--abbrev-ref", "HEAD", stdout=f"{original}\n")
    fake_git.on("diff", "--quiet", "develop", "Bug/HKBP-222/merge_develop_20240101_120000", exit_code=1)

    result = make_workflow(fake_git, config).run("develop")

    assert result.issue_key == "HKBP-222"
    assert append_description.call_args.args[1] == "HKBP-222"


def test_project_type_override(differing, config, create_pr, append_description):
    workflow = MergeBranchWorkflow(
        differing, config, confirm=lambda prompt: False, project_type="mobile", clock=fixed_clock
    )

    workflow.run("develop")

    assert create_pr.call_args.kwargs["reviewers"] == set()


def test_incomplete_pull_request_response_is_a_warning(
    differing, config, mocker, append_description
):
    response = mocker.MagicMock()
    response.status_code = 201
    response.content = b"x"
    response.json.return_value = {"number": 7}
    client = mocker.MagicMock()
    client.__enter__ = mocker.MagicMock(return_value=client)
    client.__exit__ = mocker.MagicMock(return_value=False)
    client.request.return_value = response
    mocker.patch("mergeflow.github.api.get_github_client", return_value=client)

    result = make_workflow(differing, config).run("develop")

    assert result.state == MergeState.DONE
    assert result.error is None
    assert result.pr_url is None
    assert differing.called("push", "--set-upstream", "origin", NEW_BRANCH)
    assert "Pull request was not created" in result.warnings[0]
    append_description.assert_not_called()
