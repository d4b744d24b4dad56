"""
Database Module

Owns the SQLAlchemy async engine and session factory. The session factory is
the handle that the realm loader distributes to database-backed realms:

    init_db()  ──►  async_sessionmaker  ──►  RealmLoader  ──►  DatabaseRealm.bind()
    close_db() ◄──  (after every realm has been unbound)

Components:
===========
- session.py: Engine, session factory, and lifecycle functions
"""

from realmgate.db.session import (
    init_db,
    close_db,
    get_sessionmaker,
)

__all__ = [
    "init_db",  # Create the engine on app startup
    "close_db",  # Dispose the engine on app shutdown
    "get_sessionmaker",  # The shared database handle
]
