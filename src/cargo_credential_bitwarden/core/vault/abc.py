"""Abstract interface for invoking the Bitwarden CLI."""

from abc import ABC, abstractmethod
from collections.abc import Sequence


class VaultCli(ABC):
    """Process-based channel to the Bitwarden CLI: arguments in, stdout out.

    Everything above this interface deals in `bw` arguments and text output only.
    Real implementations spawn the `bw` executable; the fake used in tests keeps
    an in-memory vault.
    """

    @abstractmethod
    def run(self, args: Sequence[str], input_data: bytes | None = None) -> str:
        """Run `bw` with the given arguments and return its stdout.

        Args:
            args: Arguments following the executable name
            input_data: Bytes for the child's stdin, or None to inherit stdin

        Returns:
            Text written to stdout

        Raises:
            ProcessSpawnError: If `bw` cannot be started
            ProcessIOError: If the pipes to `bw` fail
            ProcessExitError: If `bw` exits with a non-zero status
        """
        ...
