"""Command-line entry point for the Bitwarden credential provider."""

import logging
import os

import click

from cargo_credential_bitwarden.core.context import create_context
from cargo_credential_bitwarden.output import error_output, user_output
from cargo_credential_bitwarden.protocol.codec import ProtocolError
from cargo_credential_bitwarden.protocol.runner import serve

DEBUG_ENV_VAR = "CARGO_CREDENTIAL_BITWARDEN_DEBUG"

USAGE_MESSAGE = """\
This is a Cargo credential provider that stores registry tokens in Bitwarden.
It is not meant to be run directly. Configure it in Cargo, for example:

    [registry]
    global-credential-providers = ["cargo-credential-bitwarden --sync"]

Supported provider arguments: --email <address>, --sync"""


@click.command("cargo-credential-bitwarden", context_settings={"ignore_unknown_options": True})
@click.option("--cargo-plugin", is_flag=True, help="Speak the credential-provider protocol.")
@click.argument("provider_args", nargs=-1, type=click.UNPROCESSED)
@click.pass_context
def cli(ctx: click.Context, cargo_plugin: bool, provider_args: tuple[str, ...]) -> None:
    """Store Cargo registry tokens in Bitwarden.

    Cargo repeats the provider arguments in every request, so the copies on the
    command line are accepted but not used.
    """
    if os.getenv(DEBUG_ENV_VAR):
        logging.basicConfig(level=logging.DEBUG, format="[DEBUG %(name)s:%(lineno)d] %(message)s")

    if not cargo_plugin:
        user_output(USAGE_MESSAGE)
        raise SystemExit(1)

    # Tests provide their own context factory
    context_factory = ctx.obj if ctx.obj is not None else create_context

    try:
        serve(
            click.get_text_stream("stdin"),
            click.get_text_stream("stdout"),
            context_factory,
            os.environ,
        )
    except ProtocolError as e:
        error_output(str(e))
        raise SystemExit(1) from e


def main() -> None:
    """CLI entry point used by the `cargo-credential-bitwarden` console script."""
    cli()
