"""Global constants for mergeflow.

These values serve as defaults for configuration.  Override them with
environment variables rather than editing this module.
"""

import os

# Git
DEFAULT_REMOTE = os.environ.get("GIT_REMOTE", "origin")
COMMAND_TIMEOUT_S = int(os.environ.get("COMMAND_TIMEOUT_S", 300))
MERGE_TIMESTAMP_FORMAT = "%Y%m%d_%H%M%S"
MAX_SLUG_LENGTH = 50

# HTTP
HTTP_TIMEOUT_S = float(os.environ.get("HTTP_TIMEOUT_S", 30))
DEFAULT_GITHUB_API_URL = "https://api.github.com"
JIRA_API_PATH = "rest/api/2"

# Logging
DEFAULT_LOG_LEVEL = os.environ.get("LOG_LEVEL", "INFO")
