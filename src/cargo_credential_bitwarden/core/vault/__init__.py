"""Bitwarden CLI integration."""

from cargo_credential_bitwarden.core.vault.abc import VaultCli
from cargo_credential_bitwarden.core.vault.real import RealVaultCli

__all__ = ["RealVaultCli", "VaultCli"]
