"""
Database handle and session management.

The engine lives on an explicitly constructed `Database` object that the
application factory stores on `app.state`; nothing here holds a global engine.
"""

import os
from contextlib import contextmanager
from typing import Iterator

from fastapi import Request
from sqlalchemy import create_engine
from sqlalchemy.orm import Session, declarative_base, sessionmaker
from sqlalchemy.pool import StaticPool

Base = declarative_base()

IN_MEMORY_URLS = {"sqlite://", "sqlite:///:memory:"}


class Database:
    """Engine plus session factory for one backing store."""

    def __init__(self, url: str, echo: bool = False):
        self.url = url
        engine_kwargs = {"echo": echo}

        if url.startswith("sqlite"):
            engine_kwargs["connect_args"] = {"check_same_thread": False}
            if url in IN_MEMORY_URLS:
                # One shared connection, otherwise every checkout sees an empty database
                engine_kwargs["poolclass"] = StaticPool
            else:
                db_dir = os.path.dirname(url.replace("sqlite:///", ""))
                if db_dir:
                    os.makedirs(db_dir, exist_ok=True)

        self.engine = create_engine(url, **engine_kwargs)
        self.SessionLocal = sessionmaker(bind=self.engine, autoflush=False, expire_on_commit=False)

    def create_all(self) -> None:
        # Import models so they are registered on Base.metadata
        from storefront.domain.models import category, product, user  # noqa: F401

        Base.metadata.create_all(bind=self.engine)

    def drop_all(self) -> None:
        Base.metadata.drop_all(bind=self.engine)

    @contextmanager
    def session(self) -> Iterator[Session]:
        db = self.SessionLocal()
        try:
            yield db
        finally:
            db.close()

    def dispose(self) -> None:
        self.engine.dispose()


def get_database(request: Request) -> Database:
    return request.app.state.database


def get_db(request: Request) -> Iterator[Session]:
    """Dependency for getting a request-scoped database session."""
    with get_database(request).session() as db:
        yield db
