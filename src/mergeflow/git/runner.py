"""Subprocess execution of git commands."""

from __future__ import annotations

import logging
import os
import subprocess
import time
from collections.abc import Sequence
from pathlib import Path

from ..constants import COMMAND_TIMEOUT_S
from ..errors import VcsOperationFailed
from ..policy.redaction import redact_secrets

logger = logging.getLogger(__name__)


class GitRunner:
    """Run git commands in a working directory.

    ``run`` never raises for a non-zero exit status; it returns a result
    dictionary with ``argv``, ``exit_code``, ``stdout``, ``stderr``,
    ``duration_ms`` and ``timed_out`` fields.  ``check`` raises
    ``VcsOperationFailed`` instead.
    """

    def __init__(self, cwd: Path | None = None, timeout_s: int = COMMAND_TIMEOUT_S) -> None:
        self.cwd = cwd
        self.timeout_s = timeout_s

    def _env(self) -> dict[str, str]:
        # Never block on a credential prompt.
        return {**os.environ, "GIT_TERMINAL_PROMPT": "0"}

    def run(self, args: Sequence[str]) -> dict[str, object]:
        argv = ["git", *args]
        logger.debug("Running %s", " ".join(argv))
        timed_out = False
        start_ns = time.time_ns()
        try:
            proc = subprocess.run(
                argv,
                cwd=str(self.cwd) if self.cwd else None,
                stdout=subprocess.PIPE,
                stderr=subprocess.PIPE,
                shell=False,
                timeout=self.timeout_s,
                text=True,
                env=self._env(),
            )
            stdout = proc.stdout or ""
            stderr = proc.stderr or ""
            exit_code = proc.returncode
        except subprocess.TimeoutExpired:
            timed_out = True
            stdout = ""
            stderr = f"Command timed out after {self.timeout_s}s"
            exit_code = 124
        except FileNotFoundError as exc:
            stdout = ""
            stderr = str(exc)
            exit_code = 127

        duration_ms = int((time.time_ns() - start_ns) / 1_000_000)
        return {
            "argv": list(args),
            "exit_code": exit_code,
            "stdout": stdout,
            "stderr": redact_secrets(stderr),
            "duration_ms": duration_ms,
            "timed_out": timed_out,
        }

    def check(self, args: Sequence[str]) -> str:
        """Run a git command and return its stripped stdout.

        Raises ``VcsOperationFailed`` if the command exits non-zero.
        """
        result = self.run(args)
        if result["exit_code"] != 0:
            raise VcsOperationFailed(args, str(result["stderr"]).strip())
        return str(result["stdout"]).strip()

    def ok(self, args: Sequence[str]) -> bool:
        return self.run(args)["exit_code"] == 0
