from .inmemory_db import InMemoryCollection, InMemoryCursor, InMemoryDatabase

__all__ = ["InMemoryCollection", "InMemoryCursor", "InMemoryDatabase"]
