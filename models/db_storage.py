from __future__ import annotations

from sqlalchemy import create_engine, event
from sqlalchemy.orm import scoped_session, sessionmaker
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.pool import StaticPool

from models.base_model import Base
from models.user import User
from models.refresh_token import RefreshToken
from models.invalid_token import InvalidToken

# Map model names for easy querying
classes = {
    "User": User,
    "RefreshToken": RefreshToken,
    "InvalidToken": InvalidToken,
}


class DBStorage:
    """
    Record store over a SQLAlchemy engine.

    One instance is created per process (see api.create_app) and handed to
    whoever needs it: reload() opens it, close() releases the current scoped
    session (per request), dispose() closes the connection pool at shutdown.
    """
    __engine = None
    __session = None

    def __init__(self, database_url: str, echo: bool = False):
        """Initialize engine for the given database URL"""
        kwargs = {"echo": echo}
        if database_url.startswith("sqlite"):
            kwargs["connect_args"] = {"check_same_thread": False}
            if database_url in ("sqlite://", "sqlite:///:memory:"):
                # one shared connection, otherwise every session gets its own empty db
                kwargs["poolclass"] = StaticPool
        else:
            kwargs["pool_pre_ping"] = True
        self.__engine = create_engine(database_url, **kwargs)

        # Enable SQLite foreign keys (needed for ON DELETE CASCADE)
        if self.__engine.url.get_backend_name() == "sqlite":
            @event.listens_for(self.__engine, "connect")
            def _set_sqlite_pragma(dbapi_connection, connection_record):
                cursor = dbapi_connection.cursor()
                cursor.execute("PRAGMA foreign_keys=ON")
                cursor.close()

    def reload(self):
        """Create tables and start session"""
        Base.metadata.create_all(self.__engine)
        session_factory = sessionmaker(bind=self.__engine, expire_on_commit=False)
        self.__session = scoped_session(session_factory)

    def new(self, obj):
        """Add object to session"""
        self.__session.add(obj)

    def save(self):
        """Commit session"""
        try:
            self.__session.commit()
        except SQLAlchemyError:
            self.__session.rollback()
            raise

    def delete(self, obj=None):
        """Delete object if exists (hard delete, keyed by the instance)"""
        if obj:
            self.__session.delete(obj)

    def get(self, cls, id):
        """Fetch one object by class and ID"""
        if cls in classes.values() and id is not None:
            return self.__session.get(cls, id)
        return None

    def find_one(self, cls, **conditions):
        """First row matching every column=value condition, or None"""
        return self.__session.query(cls).filter_by(**conditions).first()

    def find_all(self, cls, offset: int = 0, limit: int | None = None, order_by=None, **conditions):
        query = self.__session.query(cls).filter_by(**conditions)
        if order_by is not None:
            query = query.order_by(order_by)
        if offset:
            query = query.offset(offset)
        if limit is not None:
            query = query.limit(limit)
        return query.all()

    def update(self, cls, id, **data):
        """Keyed update: set columns on the row with primary key ``id`` and commit"""
        obj = self.get(cls, id)
        if obj is None:
            return None
        for key, value in data.items():
            setattr(obj, key, value)
        self.save()
        return obj

    def delete_where(self, cls, **conditions) -> int:
        """
        Conditional bulk delete, committed immediately.
        Returns the number of rows removed; a single DELETE statement, so two
        callers racing for the same row cannot both see 1.
        """
        if not conditions:
            raise ValueError("delete_where requires at least one condition")
        try:
            removed = (
                self.__session.query(cls)
                .filter_by(**conditions)
                .delete(synchronize_session=False)
            )
            self.__session.commit()
        except SQLAlchemyError:
            self.__session.rollback()
            raise
        return removed

    def count(self, cls, **conditions):
        """Count rows of cls matching every column=value condition"""
        return self.__session.query(cls).filter_by(**conditions).count()

    def close(self):
        """Remove session (for API teardown)"""
        if self.__session is not None:
            self.__session.remove()

    def dispose(self):
        """Close the connection pool (process shutdown)"""
        self.close()
        self.__engine.dispose()
