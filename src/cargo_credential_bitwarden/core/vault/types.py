"""Bitwarden item types and their JSON wire format.

The wire format is the camelCase JSON printed by `bw list items` and accepted
(after `bw encode`) by `bw create item` / `bw edit item`. Fields this provider
does not model are kept in `extra_fields` so that editing an item sends them
back unchanged.
"""

import json
from collections.abc import Mapping
from dataclasses import dataclass, field, replace
from typing import Any, TypeVar

from cargo_credential_bitwarden.core.errors import MalformedResponseError

ITEM_KIND_LOGIN = 1
URI_MATCH_HOST = 1

T = TypeVar("T")


@dataclass(frozen=True)
class UriMatch:
    """A URI attached to a login, with Bitwarden's match rule (1 = host)."""

    uri: str
    match_rule: int | None = None
    extra_fields: Mapping[str, Any] = field(default_factory=dict, repr=False)

    def to_json(self) -> dict[str, Any]:
        return {**self.extra_fields, "match": self.match_rule, "uri": self.uri}


@dataclass(frozen=True)
class LoginRecord:
    """Login section of an item. `password` holds the registry token."""

    password: str = field(repr=False)
    uris: tuple[UriMatch, ...] = ()
    username: str | None = None
    extra_fields: Mapping[str, Any] = field(default_factory=dict, repr=False)

    def has_uri(self, uri: str) -> bool:
        return any(entry.uri == uri for entry in self.uris)

    def to_json(self) -> dict[str, Any]:
        return {
            **self.extra_fields,
            "username": self.username,
            "password": self.password,
            "uris": [entry.to_json() for entry in self.uris],
        }


@dataclass(frozen=True)
class VaultItem:
    """An existing vault item as listed by `bw list items`."""

    id: str
    kind: int
    name: str
    login: LoginRecord
    extra_fields: Mapping[str, Any] = field(default_factory=dict, repr=False)

    def with_token(self, token: str, name: str | None = None) -> "VaultItem":
        """Return a copy with a new password and, optionally, a new name."""
        login = replace(self.login, password=token)
        if name is None:
            return replace(self, login=login)
        return replace(self, login=login, name=name)

    def to_json(self) -> dict[str, Any]:
        return {
            **self.extra_fields,
            "id": self.id,
            "type": self.kind,
            "name": self.name,
            "login": self.login.to_json(),
        }


@dataclass(frozen=True)
class CreateRequest:
    """Body for `bw create item`: a vault item that has no id yet."""

    name: str
    login: LoginRecord
    kind: int = ITEM_KIND_LOGIN

    def to_json(self) -> dict[str, Any]:
        return {"name": self.name, "login": self.login.to_json(), "type": self.kind}


def serialize_payload(payload: VaultItem | CreateRequest) -> bytes:
    """Serialize an item body to the JSON bytes fed to `bw encode`."""
    return json.dumps(payload.to_json()).encode("utf-8")


def parse_vault_items(text: str) -> list[VaultItem]:
    """Parse the JSON array printed by `bw list items`.

    Raises:
        MalformedResponseError: If the output is not a JSON array of login items
    """
    try:
        data = json.loads(text)
    except json.JSONDecodeError as e:
        raise MalformedResponseError("Bitwarden list", str(e)) from e

    if not isinstance(data, list):
        raise MalformedResponseError(
            "Bitwarden list", f"expected a JSON array, got {type(data).__name__}"
        )
    return [_parse_item(entry, index) for index, entry in enumerate(data)]


def _parse_item(data: object, index: int) -> VaultItem:
    where = f"item {index}"
    obj = _require_object(data, where)
    login = _require_object(_require(obj, "login", where), f"{where}.login")
    raw_uris = _require(login, "uris", f"{where}.login")
    if not isinstance(raw_uris, list):
        raise MalformedResponseError("Bitwarden list", f"{where}.login.uris must be an array")

    return VaultItem(
        id=_require_type(obj, "id", str, where),
        kind=_require_type(obj, "type", int, where),
        name=_require_type(obj, "name", str, where),
        login=LoginRecord(
            password=_require_type(login, "password", str, f"{where}.login"),
            uris=tuple(
                _parse_uri(entry, f"{where}.login.uris[{i}]") for i, entry in enumerate(raw_uris)
            ),
            username=_optional_type(login, "username", str, f"{where}.login"),
            extra_fields=_without(login, "username", "password", "uris"),
        ),
        extra_fields=_without(obj, "id", "type", "name", "login"),
    )


def _parse_uri(data: object, where: str) -> UriMatch:
    obj = _require_object(data, where)
    return UriMatch(
        uri=_require_type(obj, "uri", str, where),
        match_rule=_optional_type(obj, "match", int, where),
        extra_fields=_without(obj, "uri", "match"),
    )


def _require_object(data: object, where: str) -> dict[str, Any]:
    if not isinstance(data, dict):
        raise MalformedResponseError("Bitwarden list", f"{where} must be an object")
    return data


def _require(obj: Mapping[str, Any], key: str, where: str) -> Any:
    if key not in obj:
        raise MalformedResponseError("Bitwarden list", f"missing field `{key}` in {where}")
    return obj[key]


def _require_type(obj: Mapping[str, Any], key: str, expected: type[T], where: str) -> T:
    value = _require(obj, key, where)
    if not _is_instance(value, expected):
        raise MalformedResponseError(
            "Bitwarden list",
            f"field `{key}` in {where} must be {expected.__name__}, got {type(value).__name__}",
        )
    return value


def _optional_type(
    obj: Mapping[str, Any], key: str, expected: type[T], where: str
) -> T | None:
    value = obj.get(key)
    if value is None:
        return None
    if not _is_instance(value, expected):
        raise MalformedResponseError(
            "Bitwarden list",
            f"field `{key}` in {where} must be {expected.__name__}, got {type(value).__name__}",
        )
    return value


def _is_instance(value: object, expected: type) -> bool:
    # bool is an int subclass but never a valid item type or match rule
    if expected is int and isinstance(value, bool):
        return False
    return isinstance(value, expected)


def _without(obj: Mapping[str, Any], *keys: str) -> dict[str, Any]:
    return {key: value for key, value in obj.items() if key not in keys}
