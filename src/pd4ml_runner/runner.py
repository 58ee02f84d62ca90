"""Process runner for the external tool."""

import logging
import subprocess

from schemas import CommandInvocation

from .exceptions import ToolNotFoundError

logger = logging.getLogger(__name__)

# Shell convention for "command not found"
EXIT_COMMAND_NOT_FOUND = 127


class ProcessRunner:
    """Run a CommandInvocation and capture its combined output.

    The runner does not interpret the output; a non-zero exit other than
    127 still returns the captured text.
    """

    def execute(self, invocation: CommandInvocation) -> str:
        """Run the invocation and block until it exits.

        Args:
            invocation: The compiled command

        Returns:
            Captured stdout and stderr, verbatim

        Raises:
            ToolNotFoundError: If the process cannot be launched or exits with 127
        """
        try:
            completed = subprocess.run(
                invocation.argv,
                stdout=subprocess.PIPE,
                stderr=subprocess.STDOUT,
                text=True,
                errors="replace",
            )
        except (FileNotFoundError, PermissionError) as e:
            raise ToolNotFoundError(
                f"Could not run PD4ML: {invocation.java_path}: {e}",
                exit_status=EXIT_COMMAND_NOT_FOUND,
            ) from e

        if completed.returncode == EXIT_COMMAND_NOT_FOUND:
            raise ToolNotFoundError(
                f"Could not run PD4ML: {invocation.java_path} exited with status 127",
                exit_status=completed.returncode,
            )

        if completed.returncode != 0:
            logger.warning(f"PD4ML exited with status {completed.returncode}")

        return completed.stdout or ""
