"""Request loop for Cargo's credential-provider protocol."""

import logging
from collections.abc import Callable, Mapping
from contextlib import AbstractContextManager
from typing import TextIO

from cargo_credential_bitwarden.core.config import ProviderConfig
from cargo_credential_bitwarden.core.context import CredentialContext
from cargo_credential_bitwarden.core.errors import CredentialError, UnsupportedOperationError
from cargo_credential_bitwarden.protocol.codec import (
    encode_error,
    encode_response,
    hello_message,
    parse_request,
)
from cargo_credential_bitwarden.protocol.terminal import attached_to_console
from cargo_credential_bitwarden.protocol.types import CredentialRequest, UnknownAction

logger = logging.getLogger(__name__)

ContextFactory = Callable[[ProviderConfig], CredentialContext]


def perform_request(
    request: CredentialRequest,
    context_factory: ContextFactory,
    environ: Mapping[str, str],
) -> str:
    """Perform one request and return the encoded `Ok` or `Err` message.

    Unknown action kinds are answered without locating or running `bw`.
    """
    if isinstance(request.action, UnknownAction):
        return encode_error(UnsupportedOperationError(request.action.kind))
    try:
        config = ProviderConfig.from_args(request.args, environ)
        ctx = context_factory(config)
        response = ctx.dispatcher().perform(request.registry, request.action)
    except CredentialError as e:
        logger.debug("Request failed: %s: %s", type(e).__name__, e)
        return encode_error(e)
    return encode_response(response)


def serve(
    stdin: TextIO,
    stdout: TextIO,
    context_factory: ContextFactory,
    environ: Mapping[str, str],
    console: Callable[[], AbstractContextManager[None]] = attached_to_console,
) -> None:
    """Serve requests from Cargo until stdin is closed.

    Writes the hello message, then answers each request line with exactly one
    response line.

    Raises:
        ProtocolError: If Cargo sends a request that cannot be parsed
    """
    _send(stdout, hello_message())
    while True:
        line = stdin.readline()
        if not line:
            return
        request = parse_request(line)
        with console():
            message = perform_request(request, context_factory, environ)
        _send(stdout, message)


def _send(stdout: TextIO, message: str) -> None:
    stdout.write(message + "\n")
    stdout.flush()
