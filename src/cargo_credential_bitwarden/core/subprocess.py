"""Blocking subprocess execution with typed failures.

This is the only module that talks to the operating system's process API. Each
call spawns one child, optionally feeds it stdin, waits for it to exit and
returns its stdout. stderr is inherited so that the child's diagnostics and
interactive prompts reach the user's terminal.
"""

import logging
import subprocess
from collections.abc import Sequence

from cargo_credential_bitwarden.core.errors import (
    ProcessExitError,
    ProcessIOError,
    ProcessSpawnError,
)

logger = logging.getLogger(__name__)


def run_command(cmd: Sequence[str], input_data: bytes | None = None) -> str:
    """Run a command to completion and return its stdout as text.

    Args:
        cmd: Executable followed by its arguments
        input_data: Bytes written to the child's stdin. When None the child
            inherits stdin so it can prompt the user.

    Returns:
        Everything the child wrote to stdout, decoded as UTF-8

    Raises:
        ProcessSpawnError: If the executable cannot be started
        ProcessIOError: If writing stdin or reading stdout fails
        ProcessExitError: If the child exits with a non-zero status
    """
    executable = cmd[0]
    try:
        process = subprocess.Popen(
            list(cmd),
            stdin=subprocess.PIPE if input_data is not None else None,
            stdout=subprocess.PIPE,
        )
    except (OSError, ValueError) as e:
        # ValueError covers arguments Popen rejects, such as embedded null bytes
        raise ProcessSpawnError(executable, str(e)) from e

    try:
        raw_stdout, _ = process.communicate(input=input_data)
    except OSError as e:
        process.kill()
        process.wait()
        raise ProcessIOError(executable, str(e)) from e

    logger.debug("Process `%s` exited with status %d", executable, process.returncode)

    if process.returncode != 0:
        raise ProcessExitError(executable, process.returncode)

    try:
        return raw_stdout.decode("utf-8")
    except UnicodeDecodeError as e:
        raise ProcessIOError(executable, f"output is not valid UTF-8: {e}") from e


def command_exists(executable: str) -> bool:
    """Check whether an executable can be spawned.

    The command is started with every stream discarded and reaped immediately.

    Returns:
        True if the process started, False if the executable was not found

    Raises:
        ProcessSpawnError: If spawning failed for any other reason
    """
    try:
        subprocess.run(
            [executable],
            stdin=subprocess.DEVNULL,
            stdout=subprocess.DEVNULL,
            stderr=subprocess.DEVNULL,
            check=False,
        )
    except FileNotFoundError:
        return False
    except OSError as e:
        raise ProcessSpawnError(executable, str(e)) from e
    return True
