"""User repository adapters for persistence and querying.

Implementations support multiple backends:
- In-memory (demonstration and tests, lost on exit)
- SQLite (zero-config, single-file)
"""
