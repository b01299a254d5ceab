"""
Subprocess runner — run the build tool with inherited stdio.

Maven's output goes straight to the user's terminal; mvnmin only needs
the exit code.
"""

from __future__ import annotations

import logging
import subprocess
import time
from collections.abc import Mapping
from pathlib import Path

from mvnmin.adapters.base import ProcessRunner
from mvnmin.core.engine.command import Invocation, subprocess_environment
from mvnmin.core.services.printer import ReactorPrinter

logger = logging.getLogger(__name__)


class SubprocessRunner(ProcessRunner):
    """Runs invocations as child processes.

    Args:
        printer: Where to report commands that cannot be started.
        cwd: Working directory for the child (default: cwd).
        env: Base environment (default: ``os.environ``). MAVEN_OPTS is
            always extended with jansi passthrough.
    """

    def __init__(
        self,
        printer: ReactorPrinter | None = None,
        cwd: Path | None = None,
        env: Mapping[str, str] | None = None,
    ):
        self.printer = printer or ReactorPrinter()
        self.cwd = cwd
        self.env = subprocess_environment(env)

    def execute(self, invocation: Invocation) -> int:
        logger.debug("Executing: %s (cwd=%s)", invocation, self.cwd or ".")
        start = time.monotonic()

        try:
            result = subprocess.run(invocation.argv, cwd=self.cwd, env=self.env)
        except OSError as e:
            logger.debug("Could not start %s: %s", invocation.executable, e)
            self.printer.failed_to_execute(invocation.executable)
            return 1

        elapsed_ms = int((time.monotonic() - start) * 1000)
        logger.info(
            "%s exited with code %d after %dms",
            invocation.executable,
            result.returncode,
            elapsed_ms,
        )
        return result.returncode
