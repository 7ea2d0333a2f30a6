"""Tests for the cargo-credential-bitwarden command."""

import json
from pathlib import Path

import pytest
from click.testing import CliRunner

from cargo_credential_bitwarden.cli.cli import cli
from cargo_credential_bitwarden.core.config import ProviderConfig
from cargo_credential_bitwarden.core.context import CredentialContext
from cargo_credential_bitwarden.protocol import terminal
from tests.fakes.context import fake_context
from tests.fakes.vault_cli import FakeVaultCli

INDEX_URL = "https://example.com/index"


@pytest.fixture(autouse=True)
def no_console(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep the CLI from attaching to a real terminal during tests."""
    missing = str(tmp_path / "no-such-tty")
    monkeypatch.setattr(terminal, "console_device_names", lambda platform: (missing, missing))


def _request(kind: str, **fields: object) -> str:
    return json.dumps({"v": 1, "registry": {"index-url": INDEX_URL}, "kind": kind, **fields})


def _factory(vault: FakeVaultCli):
    def factory(config: ProviderConfig) -> CredentialContext:
        return fake_context(
            vault,
            account=config.account,
            auto_sync=config.auto_sync,
            ambient_session=config.ambient_session,
        )

    return factory


def test_without_cargo_plugin_flag_prints_usage_and_fails() -> None:
    runner = CliRunner()

    result = runner.invoke(cli, [])

    assert result.exit_code == 1
    assert "This is a Cargo credential provider" in result.output


def test_login_fetch_logout_session() -> None:
    """A single process serves several requests in order."""
    vault = FakeVaultCli()
    runner = CliRunner()
    stdin = "".join(
        line + "\n"
        for line in [
            _request("login", token="tok-123"),
            _request("get", operation="read"),
            _request("logout"),
            _request("get", operation="read"),
        ]
    )

    result = runner.invoke(
        cli, ["--cargo-plugin"], input=stdin, obj=_factory(vault), env={"BW_SESSION": None}
    )

    assert result.exit_code == 0, result.output
    messages = [json.loads(line) for line in result.stdout.splitlines()]
    assert messages == [
        {"v": [1]},
        {"Ok": {"kind": "login"}},
        {
            "Ok": {
                "kind": "get",
                "token": "tok-123",
                "cache": "session",
                "operation_independent": True,
            }
        },
        {"Ok": {"kind": "logout"}},
        {"Err": {"kind": "not-found"}},
    ]
    assert vault.items == []


def test_provider_args_on_command_line_are_accepted() -> None:
    runner = CliRunner()

    result = runner.invoke(
        cli,
        ["--sync", "--email", "me@example.com", "--cargo-plugin"],
        input="",
        obj=_factory(FakeVaultCli()),
    )

    assert result.exit_code == 0, result.output
    assert result.stdout.splitlines() == ['{"v":[1]}']


def test_malformed_request_exits_with_error() -> None:
    runner = CliRunner()

    result = runner.invoke(
        cli, ["--cargo-plugin"], input="not json\n", obj=_factory(FakeVaultCli())
    )

    assert result.exit_code == 1
    assert "Error: " in result.output
    assert "failed to deserialize request" in result.output
