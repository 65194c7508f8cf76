"""
Base model with common fields and methods
"""
import sqlite3

from sqlalchemy import event
from sqlalchemy.engine import Engine

from tooltracker import db
from tooltracker.utils.helpers import utcnow


class TimestampMixin:
    """Mixin adding creation/update timestamps"""
    created_at = db.Column(db.DateTime, default=utcnow, nullable=False)
    updated_at = db.Column(db.DateTime, default=utcnow, onupdate=utcnow, nullable=False)


@event.listens_for(Engine, 'connect')
def _enable_sqlite_foreign_keys(dbapi_connection, connection_record):
    """SQLite ignores foreign keys unless asked; RESTRICT relies on them"""
    if isinstance(dbapi_connection, sqlite3.Connection):
        cursor = dbapi_connection.cursor()
        cursor.execute('PRAGMA foreign_keys=ON')
        cursor.close()
