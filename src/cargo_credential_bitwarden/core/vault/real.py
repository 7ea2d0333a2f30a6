"""Real Bitwarden CLI invocation via subprocess."""

from collections.abc import Sequence

from cargo_credential_bitwarden.core.subprocess import run_command
from cargo_credential_bitwarden.core.vault.abc import VaultCli


class RealVaultCli(VaultCli):
    """Runs a resolved `bw` executable for every call."""

    def __init__(self, executable: str) -> None:
        self.executable = executable

    def run(self, args: Sequence[str], input_data: bytes | None = None) -> str:
        return run_command([self.executable, *args], input_data=input_data)
