"""Shared utilities: structured logging and response messages."""
