"""Registry token entries stored as Bitwarden login items."""

import logging
from urllib.parse import urlsplit

from cargo_credential_bitwarden.core.errors import AmbiguousEntryError
from cargo_credential_bitwarden.core.session import VaultSession
from cargo_credential_bitwarden.core.vault.types import (
    ITEM_KIND_LOGIN,
    URI_MATCH_HOST,
    CreateRequest,
    LoginRecord,
    UriMatch,
    VaultItem,
    parse_vault_items,
    serialize_payload,
)

logger = logging.getLogger(__name__)

UNKNOWN_HOST = "<unknown>"


def default_item_name(index_url: str, registry_name: str | None) -> str:
    """Build the item name used when creating an entry.

    Uses the registry name when Cargo provides one, otherwise the host of the
    index URL.
    """
    label = registry_name if registry_name is not None else registry_host(index_url)
    return f"Cargo registry token for {label}"


def registry_host(index_url: str) -> str:
    """Return the host part of an index URL, or "<unknown>" if it has none."""
    try:
        host = urlsplit(index_url).hostname
    except ValueError:
        return UNKNOWN_HOST
    if not host:
        return UNKNOWN_HOST
    return host


class ItemRepository:
    """Find, create, modify and delete the vault item for a registry.

    When auto-sync is enabled, `bw sync` runs before listing items and after
    every mutation.
    """

    def __init__(self, session: VaultSession, *, auto_sync: bool) -> None:
        self._session = session
        self._auto_sync = auto_sync

    def search(self, index_url: str) -> VaultItem | None:
        """Find the login whose URIs include exactly `index_url`.

        `bw list items --url` also matches by host and base domain, so results
        are filtered again on exact URI equality.

        Returns:
            The matching item, or None if there is none

        Raises:
            AmbiguousEntryError: If more than one item matches
            MalformedResponseError: If `bw` prints something other than items
        """
        self.sync()

        output = self._session.run("list", "items", "--url", index_url)
        items = [item for item in parse_vault_items(output) if item.login.has_uri(index_url)]
        logger.debug("Found %d matching item(s) for %s", len(items), index_url)

        if not items:
            return None
        if len(items) > 1:
            raise AmbiguousEntryError(index_url, len(items))
        return items[0]

    def create(self, index_url: str, token: str, name: str | None = None) -> None:
        request = CreateRequest(
            name=default_item_name(index_url, name),
            kind=ITEM_KIND_LOGIN,
            login=LoginRecord(
                password=token,
                username=None,
                uris=(UriMatch(uri=index_url, match_rule=URI_MATCH_HOST),),
            ),
        )
        encoded = self.encode(serialize_payload(request))
        self._session.run("create", "item", encoded)
        self.sync()

    def modify(self, item: VaultItem, token: str, name: str | None = None) -> None:
        """Replace the token of an existing item, and its name if given."""
        updated = item.with_token(token, name)
        encoded = self.encode(serialize_payload(updated))
        self._session.run("edit", "item", item.id, encoded)
        self.sync()

    def delete(self, item_id: str) -> None:
        self._session.run("delete", "item", item_id)
        self.sync()

    def sync(self) -> None:
        """Run `bw sync` if auto-sync is enabled."""
        if not self._auto_sync:
            return
        self._session.run("sync")

    def encode(self, payload: bytes) -> str:
        """Convert a JSON item body into the form `bw create/edit` expect."""
        return self._session.run("encode", input_data=payload).strip()
