"""Command line interface for mergeflow."""

from __future__ import annotations

import functools
import sys
from collections.abc import Callable
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import click

from .config import Config
from .errors import MergeFlowError, NotARepository
from .git import inspector
from .git.parsing import parse_github_slug
from .git.runner import GitRunner
from .jira import api as jira_api
from .telemetry.logger import configure_logging
from .workflows import cleanup
from .workflows.merge_branch import MergeBranchWorkflow
from .workflows.start_issue import start_issue_branch


@dataclass
class CliContext:
    git: GitRunner
    config: Config


def _handle_errors(func: Callable[..., Any]) -> Callable[..., Any]:
    """Report ``MergeFlowError`` on stderr and exit with status 1."""

    @functools.wraps(func)
    def wrapper(*args: Any, **kwargs: Any) -> Any:
        try:
            return func(*args, **kwargs)
        except MergeFlowError as exc:
            click.echo(f"mergeflow: {exc}", err=True)
            sys.exit(1)

    return wrapper


def _confirmer(assume_yes: bool) -> Callable[[str], bool]:
    if assume_yes:
        return lambda prompt: True
    return lambda prompt: click.confirm(prompt, default=False)


@click.group(context_settings={"help_option_names": ["-h", "--help"]})
@click.option(
    "--repo",
    "repo_path",
    type=click.Path(exists=True, file_okay=False, path_type=Path),
    default=None,
    help="Repository to operate on (default: current directory).",
)
@click.option("--log-level", default=None, help="Logging level (default: LOG_LEVEL or INFO).")
@click.pass_context
def main(ctx: click.Context, repo_path: Path | None, log_level: str | None) -> None:
    """Branch, merge and pull request helpers built on git."""
    config = Config.load_from_env()
    configure_logging(log_level or config.log_level)
    git = GitRunner(repo_path, timeout_s=config.command_timeout_s)
    if config.repo_slug is None:
        url = inspector.remote_url(git, config.git_remote)
        if url:
            config = config.with_repo_slug(parse_github_slug(url))
    ctx.obj = CliContext(git=git, config=config)


@main.command("merge-branch")
@click.argument("target")
@click.option("--project-type", default=None, help="Project type used to pick reviewers.")
@click.option("--yes", "-y", "assume_yes", is_flag=True, help="Push unpushed commits without asking.")
@click.pass_obj
@_handle_errors
def merge_branch(obj: CliContext, target: str, project_type: str | None, assume_yes: bool) -> None:
    """Merge TARGET into a new branch next to the current one and open a pull request."""
    workflow = MergeBranchWorkflow(
        obj.git, obj.config, confirm=_confirmer(assume_yes), project_type=project_type
    )
    state = workflow.run(target)
    if state.pr_url:
        click.echo(f"Pull request: {state.pr_url}")
    click.echo(f"Result: {state.state.value}")


@main.command("cleanup-branches")
@click.argument("substring")
@click.option("--include-remote", is_flag=True, help="Also match branches that only exist on the remote.")
@click.option("--yes", "-y", "assume_yes", is_flag=True, help="Delete without asking.")
@click.pass_obj
@_handle_errors
def cleanup_branches(obj: CliContext, substring: str, include_remote: bool, assume_yes: bool) -> None:
    """Force-delete every branch whose name contains SUBSTRING, locally and remotely."""
    if not inspector.is_repository(obj.git):
        raise NotARepository()
    outcomes = cleanup.remove_branches(
        obj.git, substring, include_remote, _confirmer(assume_yes), obj.config.git_remote
    )
    for outcome in outcomes:
        click.echo(f"{outcome.status:10} {outcome.branch}  {outcome.detail}".rstrip())
    if outcomes:
        counts = cleanup.summarize(outcomes)
        click.echo(", ".join(f"{count} {status}" for status, count in counts.items()))
        if counts[cleanup.FAILED]:
            sys.exit(1)


@main.command("branches")
@click.argument("substring", default="")
@click.option("--include-remote", is_flag=True, help="Include remote branches.")
@click.pass_obj
@_handle_errors
def branches(obj: CliContext, substring: str, include_remote: bool) -> None:
    """List branches whose name contains SUBSTRING."""
    for name in cleanup.find_matching(obj.git, substring, include_remote):
        click.echo(name)


@main.command("topic-branches")
@click.argument("branch", required=False)
@click.pass_obj
@_handle_errors
def topic_branches(obj: CliContext, branch: str | None) -> None:
    """List branches sharing BRANCH's prefix (default: the current branch)."""
    if branch is None and inspector.current_branch(obj.git) is None:
        raise NotARepository()
    for name in inspector.topic_branches(obj.git, branch):
        click.echo(name)


@main.command("current-branch")
@click.pass_obj
@_handle_errors
def current_branch(obj: CliContext) -> None:
    """Print the checked out branch."""
    name = inspector.current_branch(obj.git)
    if name is None:
        raise NotARepository()
    click.echo(name)


@main.command("status")
@click.pass_obj
@_handle_errors
def status(obj: CliContext) -> None:
    """Show whether the repository is ready for merge-branch."""
    snapshot = inspector.repository_status(obj.git, obj.config.git_remote)
    if not snapshot.is_repository:
        raise NotARepository()
    click.echo(f"branch:               {snapshot.current_branch or '(detached)'}")
    click.echo(f"uncommitted changes:  {'yes' if snapshot.has_uncommitted_changes else 'no'}")
    click.echo(f"unpushed commits:     {'yes' if snapshot.has_unpushed_commits else 'no'}")


@main.command("start-issue")
@click.argument("key")
@click.option("--base", default=None, help="Pull BASE and branch from it instead of the current branch.")
@click.pass_obj
@_handle_errors
def start_issue(obj: CliContext, key: str, base: str | None) -> None:
    """Create and check out a work branch named after issue KEY."""
    branch = start_issue_branch(obj.git, obj.config, key, base=base)
    click.echo(branch)


@main.command("show-issue")
@click.argument("key")
@click.pass_obj
@_handle_errors
def show_issue(obj: CliContext, key: str) -> None:
    """Print the summary, type, status and description of issue KEY."""
    issue = jira_api.get_issue(obj.config, key)
    click.echo(f"{issue.key}: {issue.summary}")
    click.echo(f"type: {issue.issue_type or '-'}  status: {issue.status or '-'}")
    if issue.url:
        click.echo(issue.url)
    if issue.description:
        click.echo("")
        click.echo(issue.description)


if __name__ == "__main__":
    main()
