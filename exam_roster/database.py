from sqlalchemy import create_engine, event
from sqlalchemy.orm import sessionmaker, declarative_base

Base = declarative_base()


class Database:
    """Owns one engine (and its connection pool) plus the session factory bound to it."""

    def __init__(self, url):
        self.url = url
        connect_args = {}
        if url.startswith("sqlite"):
            connect_args = {"check_same_thread": False}

        self.engine = create_engine(url, connect_args = connect_args)

        if url.startswith("sqlite"):
            # sqlite ignores ON DELETE CASCADE unless asked
            @event.listens_for(self.engine, "connect")
            def _enable_foreign_keys(dbapi_connection, connection_record):
                cursor = dbapi_connection.cursor()
                cursor.execute("PRAGMA foreign_keys=ON")
                cursor.close()

        self.SessionLocal = sessionmaker(autocommit = False, autoflush = False, bind = self.engine)

    def create_all(self):
        # registers the tables on Base.metadata
        from . import db_models  # noqa: F401

        Base.metadata.create_all(bind = self.engine)

    def session(self):
        return self.SessionLocal()

    def dispose(self):
        self.engine.dispose()
