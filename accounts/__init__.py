"""Accounts: a user-management bounded context.

Registers users, updates their email and password, and authenticates
credentials. Domain events are published after each successful save.
"""

__version__ = "0.1.0"
