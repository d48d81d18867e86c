"""Database engine/session management, constructed explicitly per application."""

from collections.abc import Generator

from fastapi import Request
from sqlalchemy import create_engine, text
from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from portal.core.config import Settings


class Database:
    """Owns the engine and session factory for one application instance."""

    def __init__(self, settings: Settings) -> None:
        self.url = settings.DATABASE_URL
        if self.url.startswith("sqlite"):
            in_memory = self.url in ("sqlite://", "sqlite:///:memory:")
            # In-memory SQLite must share one connection across threads (TestClient).
            self.engine: Engine = create_engine(
                self.url,
                connect_args={"check_same_thread": False},
                poolclass=StaticPool if in_memory else None,
                echo=settings.DEBUG,
            )
        else:
            self.engine = create_engine(
                self.url,
                pool_pre_ping=True,
                echo=settings.DEBUG,
            )
        self.SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=self.engine)

    def create_all(self) -> None:
        """Create all tables (tests and local SQLite); production uses Alembic."""
        from portal.models import Base

        Base.metadata.create_all(bind=self.engine)

    def dispose(self) -> None:
        self.engine.dispose()


def get_db(request: Request) -> Generator[Session, None, None]:
    """Dependency that yields a DB session from the app's Database and closes it when done."""
    database: Database = request.app.state.database
    db = database.SessionLocal()
    try:
        yield db
    finally:
        db.close()


def check_db_connected(db: Session) -> bool:
    """Run a trivial query to verify the database is reachable."""
    try:
        db.execute(text("SELECT 1"))
        return True
    except SQLAlchemyError:
        return False
