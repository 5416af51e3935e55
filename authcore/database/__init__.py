"""
Database module - MongoDB store adapter and database definitions.
"""
from authcore.database.connections import DatabaseAdapter
from authcore.database.databases import auth_db

__all__ = ["DatabaseAdapter", "auth_db"]
