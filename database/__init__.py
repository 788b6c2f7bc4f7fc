"""
Database Package - SQLite store management and operations
Contains store initialization, connections, data access and the demo script
"""

# Keep initializer lightweight; import concrete modules directly at call sites.
__all__: list[str] = []
