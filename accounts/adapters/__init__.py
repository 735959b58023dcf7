"""External adapters for the Accounts user-management context.

This package contains all external dependencies (SQLite, bcrypt, etc.)
and provides implementations of the core port interfaces.

Adapter Organization:

- store/: Adapters for user persistence (in-memory, SQLite)
- hashing/: Adapters for password hashing (bcrypt)
- events/: Adapters for publishing domain events (logging, in-process bus)
- cli/: Command-line interface for account operations
"""
