"""Top-level package for mergeflow.

This package automates a branch/merge/pull request workflow on top of the
git command-line interface, a JIRA-style issue tracker and a GitHub-style
pull request service.
"""

__all__ = ["__version__"]
__version__ = "0.1.0"
