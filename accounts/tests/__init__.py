"""Test suite for the Accounts user-management context.

Organized into three categories:

1. core/: Unit tests for core domain logic
   - No external dependencies, fast execution
   - Uses in-memory fakes for ports

2. adapters/: Integration tests for adapter implementations
   - SQLite repository against a temporary database
   - Real bcrypt hashing at the lowest cost factor

3. fakes/: Port implementations for testing
   - In-memory implementations of the repository, hasher and publisher
   - Used by core unit tests
"""
