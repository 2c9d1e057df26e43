# Area: Store
"""
Store - SQLite persistence collaborator.

This package handles:
- Schema initialization and connections
- One repository per table
- The TournamentStore interface consumed by the engine
"""

from .database import init_database, get_connection, BaseRepository
from .store import TournamentStore

__all__ = [
    "init_database",
    "get_connection",
    "BaseRepository",
    "TournamentStore",
]
