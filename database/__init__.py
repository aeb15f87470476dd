"""
Database Package - Persistence boundary for the tracker
Contains the store protocol, the in-memory store, validation and the service layer
"""

# Keep initializer lightweight; import concrete modules directly at call sites.
__all__: list[str] = []
