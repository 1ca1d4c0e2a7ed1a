from __future__ import annotations

import logging

from mergeflow.telemetry import configure_logging


def test_progress_to_stdout_and_problems_to_stderr(capsys):
    configure_logging("INFO")
    log = logging.getLogger("mergeflow.workflows.merge_branch")

    log.info("Created branch x")
    log.warning("No issue key")
    log.debug("hidden")

    captured = capsys.readouterr()
    assert captured.out == "Created branch x\n"
    assert captured.err == "WARNING: No issue key\n"


def test_reconfiguring_does_not_duplicate_handlers(capsys):
    configure_logging("INFO")
    logger = configure_logging("DEBUG")

    assert len(logger.handlers) == 2
    logging.getLogger("mergeflow.git.runner").debug("Running git status")
    assert capsys.readouterr().out == "Running git status\n"


def test_single_stream_mode_uses_stderr(capsys):
    configure_logging("INFO", split_streams=False)

    logging.getLogger("mergeflow.server").info("Starting")

    captured = capsys.readouterr()
    assert captured.out == ""
    assert "[INFO] mergeflow.server: Starting" in captured.err
