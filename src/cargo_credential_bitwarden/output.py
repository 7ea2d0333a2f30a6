"""Output helpers for messages meant for the user.

stdout carries protocol messages to Cargo, so everything addressed to the user
is written to stderr.
"""

import click


def user_output(message: str) -> None:
    """Write a message for the user to stderr."""
    click.echo(message, err=True)


def error_output(message: str) -> None:
    """Write an error message for the user to stderr with a red "Error:" prefix."""
    user_output(click.style("Error: ", fg="red") + message)
