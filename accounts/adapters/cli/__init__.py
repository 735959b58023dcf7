"""Command-line adapter for account operations."""
