"""Filesystem and process primitives used by the browser scan."""

import asyncio
import logging
import os

logger = logging.getLogger(__name__)

# pipefail makes a failing first stage of a pipeline fail the whole command
SHELL = ("/bin/bash", "-o", "pipefail", "-c")


class CommandError(Exception):
    """External command could not be run or exited with an error."""

    def __init__(self, command: str, returncode: int | None = None, stderr: str = ""):
        self.command = command
        self.returncode = returncode
        self.stderr = stderr
        if returncode is None:
            message = f"Failed to run command: {command}"
        else:
            message = f"Command exited with status {returncode}: {command}"
        if stderr:
            message = f"{message}: {stderr.strip()}"
        super().__init__(message)


async def can_access(path: str) -> bool:
    """
    Check whether a path exists and is accessible.

    Never raises: a missing or unreadable path is reported as False.
    """
    try:
        return await asyncio.to_thread(os.access, path, os.F_OK)
    except (OSError, ValueError) as e:
        logger.debug(f"Access check failed for {path}: {e}")
        return False


async def run_command(command: str) -> str:
    """
    Run a shell command and return its standard output.

    Args:
        command: Shell command line (pipes allowed; any failing stage fails the command)

    Returns:
        Decoded standard output

    Raises:
        CommandError: If the shell cannot be started or the command exits non-zero
    """
    try:
        proc = await asyncio.create_subprocess_exec(
            *SHELL,
            command,
            stdout=asyncio.subprocess.PIPE,
            stderr=asyncio.subprocess.PIPE,
        )
        stdout, stderr = await proc.communicate()
    except OSError as e:
        raise CommandError(command, stderr=str(e)) from e

    if proc.returncode != 0:
        raise CommandError(
            command,
            returncode=proc.returncode,
            stderr=stderr.decode("utf-8", errors="replace"),
        )

    return stdout.decode("utf-8", errors="replace")
