"""Shared utilities: configuration, errors, logging and signal handling."""
