"""
realmgate - Database-backed security realm loading

Binds a shared SQLAlchemy session factory to the security realms of a
FastAPI application when it starts, and releases it when it stops.
"""

__version__ = "0.1.0"
