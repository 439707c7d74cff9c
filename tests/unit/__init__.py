"""Unit tests for the vault engine: math, state, runtime, token, vault and CLI."""
