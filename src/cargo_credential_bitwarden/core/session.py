"""Bitwarden executable resolution and session handling.

A `VaultSession` is the session-scoped command builder: every `bw` command
issued after sign-in goes through `VaultSession.run`, which adds the
non-interactive flags and the session token.
"""

import logging
import sys
from collections.abc import Callable, Sequence
from dataclasses import dataclass

from cargo_credential_bitwarden.core.errors import (
    ProcessExitError,
    SigninError,
    ToolNotFoundError,
    VaultCommandError,
)
from cargo_credential_bitwarden.core.subprocess import command_exists
from cargo_credential_bitwarden.core.vault.abc import VaultCli

logger = logging.getLogger(__name__)

BW_COMMAND = "bw"
BW_WINDOWS_COMMAND = "bw.cmd"
NON_INTERACTIVE_FLAGS = ("--nointeraction", "--cleanexit")

# Positional arguments that carry encoded item bodies and must not be logged
_PAYLOAD_ARG_POSITIONS = {("create", "item"): 2, ("edit", "item"): 3}


def vault_executable_candidates(platform: str) -> list[str]:
    """Return the executable names to probe, in order."""
    if platform == "win32":
        return [BW_COMMAND, BW_WINDOWS_COMMAND]
    return [BW_COMMAND]


def resolve_vault_executable(
    probe: Callable[[str], bool] = command_exists,
    platform: str = sys.platform,
) -> str:
    """Find the Bitwarden CLI executable.

    Raises:
        ToolNotFoundError: If none of the candidate names can be spawned
    """
    candidates = vault_executable_candidates(platform)
    for candidate in candidates:
        if probe(candidate):
            logger.debug("Resolved Bitwarden CLI executable: %s", candidate)
            return candidate
    raise ToolNotFoundError(candidates)


def parse_session_token(output: str) -> str:
    """Extract the session token from `bw login --raw` output (its first line)."""
    return output.split("\n", 1)[0].rstrip("\r")


def redact_args(args: Sequence[str]) -> list[str]:
    """Return a copy of `bw` arguments safe to write to the debug log."""
    redacted = list(args)
    for index, arg in enumerate(redacted[:-1]):
        if arg == "--session":
            redacted[index + 1] = "<redacted>"
    command = _subcommand_args(redacted)
    position = _PAYLOAD_ARG_POSITIONS.get(tuple(command[:2]))
    if position is not None and position < len(command):
        offset = len(redacted) - len(command)
        redacted[offset + position] = "<encoded item>"
    return redacted


def _subcommand_args(args: list[str]) -> list[str]:
    index = 0
    while index < len(args) and args[index].startswith("--"):
        index += 2 if args[index] == "--session" else 1
    return args[index:]


@dataclass(frozen=True)
class VaultSession:
    """An unlocked vault: issues session-scoped `bw` commands.

    Attributes:
        vault: Channel to the Bitwarden CLI
        token: Session token from `bw login --raw`, or None when the caller's
            environment already provides `BW_SESSION`
    """

    vault: VaultCli
    token: str | None

    def build_args(self, args: Sequence[str]) -> list[str]:
        full_args = list(NON_INTERACTIVE_FLAGS)
        if self.token is not None:
            full_args.extend(["--session", self.token])
        full_args.extend(args)
        return full_args

    def run(self, *args: str, input_data: bytes | None = None) -> str:
        """Run a `bw` subcommand in this session and return its stdout.

        Raises:
            VaultCommandError: If `bw` exits with a non-zero status
            ProcessSpawnError: If `bw` cannot be started
            ProcessIOError: If the pipes to `bw` fail
        """
        full_args = self.build_args(args)
        logger.debug("Running: bw %s", " ".join(redact_args(full_args)))
        try:
            return self.vault.run(full_args, input_data=input_data)
        except ProcessExitError as e:
            raise VaultCommandError(" ".join(args[:2]), e.exit_code) from e


class SessionManager:
    """Obtains a usable vault session for one credential action."""

    def __init__(
        self,
        vault: VaultCli,
        *,
        account: str | None,
        ambient_session: str | None,
    ) -> None:
        """Create a SessionManager.

        Args:
            vault: Channel to the Bitwarden CLI
            account: Email address to scope `bw login` to, if configured
            ambient_session: Value of `BW_SESSION` in the caller's environment,
                or None if it is unset
        """
        self._vault = vault
        self._account = account
        self._ambient_session = ambient_session

    def signin(self) -> VaultSession:
        """Unlock the vault unless the environment already carries a session.

        A pre-existing session is trusted as-is: `bw` picks it up from the
        environment, so no `--session` argument is added.

        Raises:
            SigninError: If `bw login` exits with a non-zero status
        """
        if self._ambient_session is not None:
            logger.debug("BW_SESSION is set, skipping `bw login`")
            return VaultSession(vault=self._vault, token=None)

        args = ["login", "--raw"]
        if self._account is not None:
            args.append(self._account)

        logger.debug("Running: bw %s", " ".join(args))
        try:
            output = self._vault.run(args)
        except ProcessExitError as e:
            raise SigninError(e.exit_code) from e

        return VaultSession(vault=self._vault, token=parse_session_token(output))
