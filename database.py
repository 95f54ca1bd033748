# database.py
"""
SQLAlchemy database connection and session management.

This module provides:
- Engine configuration (SQL Server in production, SQLite for local runs and tests)
- Session factory for dependency injection
- Connection utilities

Usage:
     from database import get_session, engine

     # In FastAPI routes:
     @router.get("/rentals")
     def list_rentals(db: Session = Depends(get_session)):
          return db.query(Rental).all()
"""
import logging
from contextlib import contextmanager
from typing import Generator

from sqlalchemy import create_engine, event, text
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import QueuePool

import config

logger = logging.getLogger(__name__)


def _enable_sqlite_savepoints(engine: Engine) -> None:
     """
     Let SQLAlchemy own BEGIN on SQLite.

     pysqlite defers BEGIN until the first DML statement, which breaks
     SAVEPOINT handling (the per-rental isolation in invoice generation
     relies on savepoints).
     """

     @event.listens_for(engine, "connect")
     def _on_connect(dbapi_connection, connection_record):
          dbapi_connection.isolation_level = None

     @event.listens_for(engine, "begin")
     def _on_begin(conn):
          conn.exec_driver_sql("BEGIN")


def build_engine(url: str, echo: bool = False) -> Engine:
     """Create an engine for ``url`` with the pool settings suited to its backend."""
     if url.startswith("sqlite"):
          engine = create_engine(
               url,
               echo=echo,
               connect_args={"check_same_thread": False, "timeout": 30},
          )
          _enable_sqlite_savepoints(engine)
          return engine

     return create_engine(
          url,
          poolclass=QueuePool,
          pool_size=5,
          max_overflow=10,
          pool_timeout=30,
          pool_recycle=1800,  # Recycle connections after 30 minutes
          echo=echo,
     )


def build_session_factory(bind: Engine) -> sessionmaker:
     return sessionmaker(
          bind=bind,
          autocommit=False,
          autoflush=False,
          expire_on_commit=False,
     )


# Create SQLAlchemy engine
engine = build_engine(config.DATABASE_URL, echo=config.SQL_ECHO)

# Session factory
SessionLocal = build_session_factory(engine)


def get_session() -> Generator[Session, None, None]:
     """
     FastAPI dependency that provides a database session.

     Engine operations commit their own unit of work; the final commit here
     only covers whatever a route left pending.

     Yields:
          Session: SQLAlchemy database session
     """
     session = SessionLocal()
     try:
          yield session
          session.commit()
     except Exception:
          session.rollback()
          raise
     finally:
          session.close()


@contextmanager
def get_session_context() -> Generator[Session, None, None]:
     """
     Context manager for database sessions (for use outside FastAPI routes,
     e.g. a scheduler triggering monthly invoice generation).

     Usage:
          with get_session_context() as db:
               InvoiceService.generate_monthly_invoices(db, month=1, year=2025)

     Yields:
          Session: SQLAlchemy database session
     """
     session = SessionLocal()
     try:
          yield session
          session.commit()
     except Exception:
          session.rollback()
          raise
     finally:
          session.close()


def init_db(bind: Engine = None) -> None:
     """
     Initialize database tables.

     Creates all tables defined in the models if they don't exist.
     For production, use Alembic migrations instead.
     """
     from models import Base
     Base.metadata.create_all(bind=bind or engine)


def check_connection() -> bool:
     """
     Test database connectivity.

     Returns:
          bool: True if connection successful, False otherwise
     """
     try:
          with engine.connect() as conn:
               conn.execute(text("SELECT 1"))
          return True
     except Exception:
          logger.exception("Database connection failed")
          return False
