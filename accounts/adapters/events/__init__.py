"""Domain event publishing adapters.

- log: Writes every event to the application log
- bus: Dispatches events to in-process subscribers by event name
"""
