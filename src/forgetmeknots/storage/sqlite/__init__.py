"""
Low-level SQLite helpers: connections, transactions and the schema.

The project store builds on these; nothing here knows about lifecycle rules.
"""

__all__: list[str] = []
