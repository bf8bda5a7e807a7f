"""Shared utilities: configuration, errors, logging and validation."""
