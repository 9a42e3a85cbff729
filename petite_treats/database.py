"""
Database engine, per-request sessions and seeding.

A ``Database`` owns one SQLAlchemy engine. Request handlers never share a
session: each request opens one through ``get_session()`` and the
``with`` block closes it on every exit path, returning the connection to
the pool.
"""

from __future__ import annotations

import json
import logging
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator

from fastapi import Request
from sqlalchemy import create_engine, event, func, select
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from .naming import slugify
from .tables import Base, FAQEntry, MacaronFlavor, Product, ProductFlavor


logger = logging.getLogger(__name__)


def _enable_sqlite_foreign_keys(dbapi_connection, connection_record):
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


def build_engine(database_url: str, echo: bool = False) -> Engine:
    """Create the engine for ``database_url``.

    SQLite connections are shared across threads (FastAPI runs sync
    handlers in a thread pool) and an in-memory database is pinned to a
    single connection so every session sees the same tables.
    """
    kwargs = {"echo": echo}
    if database_url.startswith("sqlite"):
        kwargs["connect_args"] = {"check_same_thread": False}
        if database_url in ("sqlite://", "sqlite:///:memory:"):
            kwargs["poolclass"] = StaticPool
    engine = create_engine(database_url, **kwargs)
    if engine.dialect.name == "sqlite":
        event.listen(engine, "connect", _enable_sqlite_foreign_keys)
    return engine


class Database:
    def __init__(self, database_url: str, echo: bool = False):
        self.engine = build_engine(database_url, echo=echo)
        self._sessions = sessionmaker(bind=self.engine, expire_on_commit=False)

    @contextmanager
    def session(self) -> Iterator[Session]:
        with self._sessions() as session:
            yield session

    def create_all(self) -> None:
        Base.metadata.create_all(self.engine)

    def drop_all(self) -> None:
        Base.metadata.drop_all(self.engine)

    def dispose(self) -> None:
        self.engine.dispose()

    def seed(self, seed_path: Path) -> int:
        """Load products, flavors and FAQ entries into an empty catalog.

        Parameters
        ----------
        seed_path : Path
            JSON file with ``products``, ``macaron_flavors`` and ``faq``
            arrays. Each product may list its ``flavors`` and an explicit
            ``description_template``.

        Returns
        -------
        int
            Number of products inserted; ``0`` when the catalog already
            holds data.
        """
        with self.session() as session:
            count = session.scalar(select(func.count()).select_from(Product))
            if count:
                logger.info("Catalog already seeded with %s products", count)
                return 0

            with seed_path.open("r", encoding="utf-8") as f:
                raw = json.load(f)

            for entry in raw.get("products", []):
                product = Product(
                    name=entry["name"],
                    slug=entry.get("slug") or slugify(entry["name"]),
                    price=entry["price"],
                    description=entry["description"],
                    description_template=entry.get("description_template"),
                    image=entry["image"],
                )
                product.flavors = [
                    ProductFlavor(flavor=flavor) for flavor in entry.get("flavors", [])
                ]
                session.add(product)
            for entry in raw.get("macaron_flavors", []):
                session.add(MacaronFlavor(**entry))
            for entry in raw.get("faq", []):
                session.add(FAQEntry(question=entry["question"], answer=entry["answer"]))
            session.commit()

        inserted = len(raw.get("products", []))
        logger.info("Seeded catalog with %s products from %s", inserted, seed_path)
        return inserted


def get_session(request: Request) -> Iterator[Session]:
    """FastAPI dependency yielding a session scoped to one request."""
    database: Database = request.app.state.database
    with database.session() as session:
        yield session
