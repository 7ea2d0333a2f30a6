"""Cargo credential provider backed by the Bitwarden CLI."""
