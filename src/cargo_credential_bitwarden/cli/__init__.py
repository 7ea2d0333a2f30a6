"""Command-line interface for cargo-credential-bitwarden."""
