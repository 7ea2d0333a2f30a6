"""Reading a new registry token for `cargo login`."""

import sys
from abc import ABC, abstractmethod

from cargo_credential_bitwarden.core.errors import InvalidArgumentsError
from cargo_credential_bitwarden.output import user_output
from cargo_credential_bitwarden.protocol.types import RegistryInfo, StoreAction


def token_prompt(registry: RegistryInfo, action: StoreAction) -> str:
    """Return the message asking the user to paste a token."""
    if action.login_url is not None:
        return f"please paste the token found on {action.login_url} below"
    if registry.name is not None:
        return f"please paste the token for {registry.name} below"
    return f"please paste the token for {registry.index_url} below"


class TokenReader(ABC):
    """Supplies the token to store for a `cargo login` request."""

    @abstractmethod
    def read_token(self, registry: RegistryInfo, action: StoreAction) -> str:
        """Return the token to store.

        Raises:
            InvalidArgumentsError: If no non-empty token is provided
        """
        ...


class RealTokenReader(TokenReader):
    """Uses the token Cargo sent, or prompts for one on the terminal.

    The prompt goes to stderr and the answer is read from stdin, which the
    protocol runner points at the terminal while an action is performed.
    """

    def read_token(self, registry: RegistryInfo, action: StoreAction) -> str:
        if action.token is not None:
            token = action.token
        else:
            user_output(token_prompt(registry, action))
            token = sys.stdin.readline()

        token = token.strip()
        if not token:
            raise InvalidArgumentsError("please provide a non-empty token")
        return token
