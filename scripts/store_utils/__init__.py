"""Shared path configuration and logging for the account layer."""
