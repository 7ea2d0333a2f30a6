"""Types of Cargo's credential-provider protocol (version 1)."""

from dataclasses import dataclass, field
from enum import Enum

PROTOCOL_VERSION = 1


@dataclass(frozen=True)
class RegistryInfo:
    """The registry a credential request is about.

    Fields:
        index_url: Registry index URL, the key for vault entries
        name: Name of the registry in Cargo's configuration, if it has one
        headers: HTTP headers from the registry, when Cargo has them
    """

    index_url: str
    name: str | None = None
    headers: tuple[str, ...] = ()


@dataclass(frozen=True)
class FetchAction:
    """Cargo needs a token (`kind: get`).

    `operation` names what the token is for (read, publish, yank, ...). This
    provider returns the same token for every operation.
    """

    operation: str = "read"


@dataclass(frozen=True)
class StoreAction:
    """`cargo login`: store a token (`kind: login`)."""

    token: str | None = field(default=None, repr=False)
    login_url: str | None = None


@dataclass(frozen=True)
class RemoveAction:
    """`cargo logout`: remove the token (`kind: logout`)."""


@dataclass(frozen=True)
class UnknownAction:
    """An action kind this provider does not know."""

    kind: str


Action = FetchAction | StoreAction | RemoveAction | UnknownAction


class CacheControl(Enum):
    """How long Cargo may cache a returned token."""

    NEVER = "never"
    SESSION = "session"


@dataclass(frozen=True)
class FetchResponse:
    token: str = field(repr=False)
    cache: CacheControl
    operation_independent: bool


@dataclass(frozen=True)
class StoreResponse:
    pass


@dataclass(frozen=True)
class RemoveResponse:
    pass


CredentialResponse = FetchResponse | StoreResponse | RemoveResponse


@dataclass(frozen=True)
class CredentialRequest:
    """One request line from Cargo."""

    registry: RegistryInfo
    action: Action
    args: tuple[str, ...] = ()
