"""Maps Cargo credential actions onto vault operations."""

import logging

from cargo_credential_bitwarden.core.errors import NotFoundError, UnsupportedOperationError
from cargo_credential_bitwarden.core.items import ItemRepository
from cargo_credential_bitwarden.core.session import SessionManager
from cargo_credential_bitwarden.output import user_output
from cargo_credential_bitwarden.protocol.token import TokenReader
from cargo_credential_bitwarden.protocol.types import (
    Action,
    CacheControl,
    CredentialResponse,
    FetchAction,
    FetchResponse,
    RegistryInfo,
    RemoveAction,
    RemoveResponse,
    StoreAction,
    StoreResponse,
)

logger = logging.getLogger(__name__)


class ActionDispatcher:
    """Performs one credential action against the vault.

    Every action signs in first and searches for the registry's item before
    anything is created, modified or deleted. Nothing is kept between calls.
    """

    def __init__(
        self,
        sessions: SessionManager,
        token_reader: TokenReader,
        *,
        auto_sync: bool,
    ) -> None:
        self._sessions = sessions
        self._token_reader = token_reader
        self._auto_sync = auto_sync

    def perform(self, registry: RegistryInfo, action: Action) -> CredentialResponse:
        """Perform `action` for `registry`.

        Raises:
            NotFoundError: If fetching or removing a token that is not stored
            UnsupportedOperationError: If the action kind is not supported
            CredentialError: For any failure talking to the vault
        """
        logger.debug("Performing %s for %s", type(action).__name__, registry.index_url)
        match action:
            case FetchAction():
                return self._fetch(registry)
            case StoreAction():
                return self._store(registry, action)
            case RemoveAction():
                return self._remove(registry)
            case _:
                raise UnsupportedOperationError(action.kind)

    def _items(self) -> ItemRepository:
        session = self._sessions.signin()
        return ItemRepository(session, auto_sync=self._auto_sync)

    def _fetch(self, registry: RegistryInfo) -> FetchResponse:
        item = self._items().search(registry.index_url)
        if item is None:
            raise NotFoundError(registry.index_url)
        return FetchResponse(
            token=item.login.password,
            cache=CacheControl.SESSION,
            operation_independent=True,
        )

    def _store(self, registry: RegistryInfo, action: StoreAction) -> StoreResponse:
        items = self._items()
        item = items.search(registry.index_url)
        if item is not None:
            user_output(f"note: token already exists for `{registry.index_url}`")
            token = self._token_reader.read_token(registry, action)
            items.modify(item, token, registry.name)
        else:
            token = self._token_reader.read_token(registry, action)
            items.create(registry.index_url, token, registry.name)
        return StoreResponse()

    def _remove(self, registry: RegistryInfo) -> RemoveResponse:
        items = self._items()
        item = items.search(registry.index_url)
        if item is None:
            raise NotFoundError(registry.index_url)
        items.delete(item.id)
        return RemoveResponse()
