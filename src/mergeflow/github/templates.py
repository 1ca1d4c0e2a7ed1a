"""Templates for generating pull request bodies."""

from __future__ import annotations

from ..git.parsing import DiffStat


def merge_pr_title(source_branch: str, target_branch: str) -> str:
    return f"Merge {source_branch} into {target_branch}"


def generate_merge_pr_body(
    source_branch: str,
    target_branch: str,
    merge_branch: str,
    diff_stat: DiffStat | None = None,
    issue_key: str | None = None,
    issue_url: str | None = None,
) -> str:
    """Return a formatted pull request body for a merge branch.

    The body includes the Summary, Branches and Changes sections, plus a
    Related to section when the source branch names an issue.
    """
    body_parts: list[str] = []
    body_parts.append("### Summary\n")
    body_parts.append(
        f"Brings `{source_branch}` up to date with `{target_branch}` via the merge "
        f"branch `{merge_branch}`.\n\n"
    )
    body_parts.append("### Branches\n")
    body_parts.append(f"- Source: `{source_branch}`\n")
    body_parts.append(f"- Target: `{target_branch}`\n")
    body_parts.append(f"- Merge branch: `{merge_branch}`\n")
    body_parts.append("\n### Changes\n")
    if diff_stat is not None and not diff_stat.is_empty:
        body_parts.append(f"{diff_stat}\n")
    else:
        body_parts.append("See the Files changed tab.\n")
    if issue_key:
        body_parts.append("\n### Related to\n")
        body_parts.append(f"Related to {issue_key}\n")
        if issue_url:
            body_parts.append(f"{issue_url}\n")
    return "".join(body_parts)
