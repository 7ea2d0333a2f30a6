"""Provider context with dependency injection."""

from dataclasses import dataclass

from cargo_credential_bitwarden.core.config import ProviderConfig
from cargo_credential_bitwarden.core.dispatcher import ActionDispatcher
from cargo_credential_bitwarden.core.session import SessionManager, resolve_vault_executable
from cargo_credential_bitwarden.core.vault.abc import VaultCli
from cargo_credential_bitwarden.core.vault.real import RealVaultCli
from cargo_credential_bitwarden.protocol.token import RealTokenReader, TokenReader


@dataclass(frozen=True)
class CredentialContext:
    """Immutable context holding all dependencies for one credential action.

    Created per request from the request's provider arguments. Tests build it
    directly with fake implementations.
    """

    vault: VaultCli
    token_reader: TokenReader
    config: ProviderConfig

    def dispatcher(self) -> ActionDispatcher:
        sessions = SessionManager(
            self.vault,
            account=self.config.account,
            ambient_session=self.config.ambient_session,
        )
        return ActionDispatcher(sessions, self.token_reader, auto_sync=self.config.auto_sync)


def create_context(config: ProviderConfig) -> CredentialContext:
    """Create the production context.

    Raises:
        ToolNotFoundError: If the Bitwarden CLI is not installed
    """
    return CredentialContext(
        vault=RealVaultCli(resolve_vault_executable()),
        token_reader=RealTokenReader(),
        config=config,
    )
