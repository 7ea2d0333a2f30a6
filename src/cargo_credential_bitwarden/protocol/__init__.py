"""Cargo credential-provider protocol boundary."""
