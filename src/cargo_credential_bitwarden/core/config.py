"""Provider configuration from Cargo's provider arguments and the environment."""

from collections.abc import Mapping, Sequence
from dataclasses import dataclass

import click

from cargo_credential_bitwarden.core.errors import InvalidArgumentsError

SESSION_ENV_VAR = "BW_SESSION"


@dataclass(frozen=True)
class ProviderConfig:
    """Settings for one credential action.

    Fields:
        account: Email address passed to `bw login`, from `--email`
        auto_sync: Whether to run `bw sync` around vault access, from `--sync`
        ambient_session: Value of BW_SESSION, or None if it is unset
    """

    account: str | None
    auto_sync: bool
    ambient_session: str | None

    @staticmethod
    def from_args(args: Sequence[str], environ: Mapping[str, str]) -> "ProviderConfig":
        """Build configuration from provider arguments and an environment mapping.

        Raises:
            InvalidArgumentsError: If the arguments are not understood
        """
        account, auto_sync = parse_provider_args(args)
        return ProviderConfig(
            account=account,
            auto_sync=auto_sync,
            ambient_session=environ.get(SESSION_ENV_VAR),
        )


@click.command("provider-args", add_help_option=False)
@click.option("--email", "email", default=None)
@click.option("--sync", "sync", is_flag=True, default=False)
def _provider_args(email: str | None, sync: bool) -> tuple[str | None, bool]:
    return email, sync


def parse_provider_args(args: Sequence[str]) -> tuple[str | None, bool]:
    """Parse `--email <address>` and `--sync` from the provider arguments.

    Returns:
        Tuple of (account email or None, auto-sync flag)

    Raises:
        InvalidArgumentsError: For unknown options, positional arguments, or
            `--email` without a value
    """
    try:
        return _provider_args.main(list(args), standalone_mode=False)
    except click.NoSuchOption as e:
        raise InvalidArgumentsError(f"unknown option {e.option_name}") from e
    except click.BadOptionUsage as e:
        if e.option_name == "--email":
            raise InvalidArgumentsError("--email needs an arg") from e
        raise InvalidArgumentsError(e.format_message()) from e
    except click.UsageError as e:
        if "unexpected extra argument" in e.format_message():
            raise InvalidArgumentsError("too many arguments") from e
        raise InvalidArgumentsError(e.format_message()) from e
