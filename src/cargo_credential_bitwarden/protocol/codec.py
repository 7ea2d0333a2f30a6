"""JSON encoding of Cargo credential-provider protocol messages.

Messages are single JSON objects, one per line:

    provider -> cargo   {"v":[1]}
    cargo -> provider   {"v":1,"registry":{"index-url":...},"kind":"get",...}
    provider -> cargo   {"Ok":{"kind":"get","token":...}} or {"Err":{...}}
"""

import json
from typing import Any

from cargo_credential_bitwarden.core.errors import (
    CredentialError,
    NotFoundError,
    UnsupportedOperationError,
)
from cargo_credential_bitwarden.protocol.types import (
    PROTOCOL_VERSION,
    Action,
    CredentialRequest,
    CredentialResponse,
    FetchAction,
    FetchResponse,
    RegistryInfo,
    RemoveAction,
    RemoveResponse,
    StoreAction,
    StoreResponse,
    UnknownAction,
)


class ProtocolError(Exception):
    """Raised when Cargo sends a message this provider cannot understand."""


def hello_message() -> str:
    return json.dumps({"v": [PROTOCOL_VERSION]}, separators=(",", ":"))


def parse_request(line: str) -> CredentialRequest:
    """Parse one request line from Cargo.

    Raises:
        ProtocolError: If the line is not a valid version 1 request
    """
    try:
        data = json.loads(line)
    except json.JSONDecodeError as e:
        raise ProtocolError(f"failed to deserialize request: {e}") from e
    if not isinstance(data, dict):
        raise ProtocolError("failed to deserialize request: expected a JSON object")

    version = data.get("v")
    if version != PROTOCOL_VERSION:
        raise ProtocolError(f"unsupported protocol version {version!r}")

    registry = data.get("registry")
    if not isinstance(registry, dict) or not isinstance(registry.get("index-url"), str):
        raise ProtocolError("request is missing `registry.index-url`")

    args = data.get("args") or []
    if not isinstance(args, list) or not all(isinstance(arg, str) for arg in args):
        raise ProtocolError("request `args` must be a list of strings")

    return CredentialRequest(
        registry=RegistryInfo(
            index_url=registry["index-url"],
            name=registry.get("name"),
            headers=tuple(registry.get("headers") or ()),
        ),
        action=_parse_action(data),
        args=tuple(args),
    )


def _parse_action(data: dict[str, Any]) -> Action:
    kind = data.get("kind")
    if kind == "get":
        return FetchAction(operation=data.get("operation", "read"))
    if kind == "login":
        return StoreAction(token=data.get("token"), login_url=data.get("login-url"))
    if kind == "logout":
        return RemoveAction()
    return UnknownAction(kind=str(kind))


def encode_response(response: CredentialResponse) -> str:
    match response:
        case FetchResponse():
            body: dict[str, Any] = {
                "kind": "get",
                "token": response.token,
                "cache": response.cache.value,
                "operation_independent": response.operation_independent,
            }
        case StoreResponse():
            body = {"kind": "login"}
        case RemoveResponse():
            body = {"kind": "logout"}
    return json.dumps({"Ok": body}, separators=(",", ":"))


def encode_error(error: CredentialError) -> str:
    """Encode a provider error as a protocol `Err` message.

    Errors other than not-found and unsupported-operation carry their message
    and the messages of their chained causes.
    """
    if isinstance(error, NotFoundError):
        body: dict[str, Any] = {"kind": "not-found"}
    elif isinstance(error, UnsupportedOperationError):
        body = {"kind": "operation-not-supported"}
    else:
        body = {"kind": "other", "message": str(error)}
        caused_by = _cause_messages(error)
        if caused_by:
            body["caused-by"] = caused_by
    return json.dumps({"Err": body}, separators=(",", ":"))


def _cause_messages(error: BaseException) -> list[str]:
    messages: list[str] = []
    cause = error.__cause__
    while cause is not None:
        messages.append(str(cause))
        cause = cause.__cause__
    return messages
