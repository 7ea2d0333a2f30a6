"""Error types raised by the credential provider.

Every failure surfaces as a subclass of CredentialError. The protocol layer maps
NotFoundError and UnsupportedOperationError onto their dedicated protocol error
kinds; everything else is reported as an "other" error with its message and the
chain of causes.
"""

from collections.abc import Sequence


class CredentialError(Exception):
    """Base class for all provider errors."""


class InvalidArgumentsError(CredentialError):
    """Raised when the provider arguments configured in Cargo are invalid."""


class ToolNotFoundError(CredentialError):
    """Raised at startup when no Bitwarden CLI executable can be found."""

    def __init__(self, candidates: Sequence[str]) -> None:
        self.candidates = list(candidates)
        tried = ", ".join(f"`{name}`" for name in self.candidates)
        super().__init__(f"Could not find Bitwarden CLI (tried {tried})")


class ProcessError(CredentialError):
    """Base class for failed subprocess interactions."""

    def __init__(self, command: str, message: str) -> None:
        self.command = command
        super().__init__(message)


class ProcessSpawnError(ProcessError):
    """Raised when an executable cannot be started."""

    def __init__(self, command: str, reason: str) -> None:
        self.reason = reason
        super().__init__(command, f"failed to spawn `{command}`: {reason}")


class ProcessIOError(ProcessError):
    """Raised when writing to or reading from a child process fails."""

    def __init__(self, command: str, reason: str) -> None:
        self.reason = reason
        super().__init__(command, f"failed to communicate with `{command}`: {reason}")


class ProcessExitError(ProcessError):
    """Raised when a child process exits with a non-zero status."""

    def __init__(self, command: str, exit_code: int) -> None:
        self.exit_code = exit_code
        super().__init__(command, f"`{command}` command exit error: exit status {exit_code}")


class SigninError(CredentialError):
    """Raised when `bw login` fails."""

    def __init__(self, exit_code: int) -> None:
        self.exit_code = exit_code
        super().__init__(f"failed to run `bw login`: exit status {exit_code}")


class VaultCommandError(CredentialError):
    """Raised when a session-scoped `bw` subcommand exits non-zero."""

    def __init__(self, subcommand: str, exit_code: int) -> None:
        self.subcommand = subcommand
        self.exit_code = exit_code
        super().__init__(f"`bw {subcommand}` failed: exit status {exit_code}")


class MalformedResponseError(CredentialError):
    """Raised when `bw` output does not have the expected structure."""

    def __init__(self, source: str, detail: str) -> None:
        self.source = source
        self.detail = detail
        super().__init__(f"failed to deserialize JSON from {source}: {detail}")


class AmbiguousEntryError(CredentialError):
    """Raised when more than one vault login matches a registry index URL."""

    def __init__(self, index_url: str, count: int) -> None:
        self.index_url = index_url
        self.count = count
        super().__init__(
            f"too many Bitwarden logins match registry `{index_url}` ({count} found), "
            "consider deleting the excess entries"
        )


class NotFoundError(CredentialError):
    """Raised when no vault login exists for the requested registry."""

    def __init__(self, index_url: str) -> None:
        self.index_url = index_url
        super().__init__(f"no Bitwarden login found for registry `{index_url}`")


class UnsupportedOperationError(CredentialError):
    """Raised for registry actions this provider does not implement."""

    def __init__(self, kind: str) -> None:
        self.kind = kind
        super().__init__(f"operation `{kind}` is not supported")
