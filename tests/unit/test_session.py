"""Tests for executable resolution and vault sessions."""

import pytest

from cargo_credential_bitwarden.core.errors import (
    SigninError,
    ToolNotFoundError,
    VaultCommandError,
)
from cargo_credential_bitwarden.core.session import (
    SessionManager,
    VaultSession,
    parse_session_token,
    redact_args,
    resolve_vault_executable,
)
from tests.fakes.vault_cli import FakeVaultCli


def test_resolve_prefers_bw() -> None:
    probed: list[str] = []

    def probe(name: str) -> bool:
        probed.append(name)
        return True

    assert resolve_vault_executable(probe, platform="win32") == "bw"
    assert probed == ["bw"]


def test_resolve_falls_back_to_bw_cmd_on_windows() -> None:
    """On Windows the npm shim `bw.cmd` is tried after `bw`."""
    result = resolve_vault_executable(lambda name: name == "bw.cmd", platform="win32")

    assert result == "bw.cmd"


def test_resolve_does_not_try_bw_cmd_elsewhere() -> None:
    with pytest.raises(ToolNotFoundError) as exc_info:
        resolve_vault_executable(lambda name: name == "bw.cmd", platform="linux")

    assert exc_info.value.candidates == ["bw"]
    assert "Could not find Bitwarden CLI" in str(exc_info.value)


def test_resolve_reports_all_candidates_when_missing() -> None:
    with pytest.raises(ToolNotFoundError) as exc_info:
        resolve_vault_executable(lambda name: False, platform="win32")

    assert exc_info.value.candidates == ["bw", "bw.cmd"]


def test_parse_session_token_takes_first_line() -> None:
    assert parse_session_token("abc123==\nYou are logged in!\n") == "abc123=="
    assert parse_session_token("abc123==\r\n") == "abc123=="
    assert parse_session_token("abc123==") == "abc123=="


def test_signin_skips_login_when_session_in_environment() -> None:
    """An ambient BW_SESSION is trusted and no unlock command runs."""
    vault = FakeVaultCli()
    manager = SessionManager(vault, account="me@example.com", ambient_session="from-env")

    session = manager.signin()

    assert session.token is None
    assert vault.calls == []


def test_signin_trusts_empty_ambient_session() -> None:
    vault = FakeVaultCli()

    SessionManager(vault, account=None, ambient_session="").signin()

    assert vault.calls == []


def test_signin_runs_login_raw() -> None:
    vault = FakeVaultCli(session_token="tok-session")
    manager = SessionManager(vault, account=None, ambient_session=None)

    session = manager.signin()

    assert session.token == "tok-session"
    assert vault.calls == [(["login", "--raw"], None)]


def test_signin_passes_account_email() -> None:
    vault = FakeVaultCli()

    SessionManager(vault, account="me@example.com", ambient_session=None).signin()

    assert vault.calls == [(["login", "--raw", "me@example.com"], None)]


def test_signin_uses_first_line_of_output() -> None:
    vault = FakeVaultCli(login_output="first-line\nsecond-line\n")

    session = SessionManager(vault, account=None, ambient_session=None).signin()

    assert session.token == "first-line"


def test_signin_failure_raises_signin_error() -> None:
    vault = FakeVaultCli(failing_commands={"login": 1})

    with pytest.raises(SigninError) as exc_info:
        SessionManager(vault, account=None, ambient_session=None).signin()

    assert exc_info.value.exit_code == 1
    assert "failed to run `bw login`" in str(exc_info.value)


def test_session_commands_carry_non_interactive_flags_and_session() -> None:
    vault = FakeVaultCli()
    session = VaultSession(vault=vault, token="S")

    session.run("sync")

    assert vault.calls == [(["--nointeraction", "--cleanexit", "--session", "S", "sync"], None)]


def test_session_commands_without_token_omit_session_flag() -> None:
    vault = FakeVaultCli()

    VaultSession(vault=vault, token=None).run("sync")

    assert vault.calls == [(["--nointeraction", "--cleanexit", "sync"], None)]


def test_session_command_failure_raises_vault_command_error() -> None:
    """A non-zero exit names the subcommand and keeps the exit status."""
    vault = FakeVaultCli(failing_commands={"delete item": 4})
    session = VaultSession(vault=vault, token="S")

    with pytest.raises(VaultCommandError) as exc_info:
        session.run("delete", "item", "abc")

    assert exc_info.value.subcommand == "delete item"
    assert exc_info.value.exit_code == 4
    assert "exit status 4" in str(exc_info.value)


def test_redact_args_hides_session_and_payloads() -> None:
    assert redact_args(["--nointeraction", "--session", "S", "create", "item", "ENC"]) == [
        "--nointeraction",
        "--session",
        "<redacted>",
        "create",
        "item",
        "<encoded item>",
    ]
    assert redact_args(["--cleanexit", "edit", "item", "id-1", "ENC"]) == [
        "--cleanexit",
        "edit",
        "item",
        "id-1",
        "<encoded item>",
    ]
    assert redact_args(["--cleanexit", "list", "items", "--url", "u"]) == [
        "--cleanexit",
        "list",
        "items",
        "--url",
        "u",
    ]
