"""Temporarily attaching stdin and stdout to the user's terminal.

While Cargo talks to the provider, stdin and stdout are pipes carrying protocol
messages. `bw login` and the token prompt need the real terminal, so actions
are performed with file descriptors 0 and 1 pointed at the console.
"""

import logging
import os
import sys
from collections.abc import Iterator
from contextlib import ExitStack, contextmanager

logger = logging.getLogger(__name__)


def console_device_names(platform: str) -> tuple[str, str]:
    """Return the (input, output) console device paths for a platform."""
    if platform == "win32":
        return "CONIN$", "CONOUT$"
    return "/dev/tty", "/dev/tty"


@contextmanager
def attached_to_console(platform: str = sys.platform) -> Iterator[None]:
    """Point stdin and stdout at the console for the duration of the block.

    If no console can be opened (e.g. Cargo runs without a terminal) the
    streams are left unchanged.
    """
    input_name, output_name = console_device_names(platform)
    with ExitStack() as stack:
        try:
            console_in = stack.enter_context(open(input_name, "rb", buffering=0))
            console_out = stack.enter_context(open(output_name, "wb", buffering=0))
        except OSError as e:
            logger.debug("No console available, keeping protocol streams: %s", e)
            console_in = console_out = None

        if console_in is None or console_out is None:
            yield
            return

        sys.stdout.flush()
        saved_stdin = os.dup(0)
        saved_stdout = os.dup(1)
        try:
            os.dup2(console_in.fileno(), 0)
            os.dup2(console_out.fileno(), 1)
            yield
        finally:
            sys.stdout.flush()
            os.dup2(saved_stdin, 0)
            os.dup2(saved_stdout, 1)
            os.close(saved_stdin)
            os.close(saved_stdout)
