# models/base.py
from sqlalchemy.orm import DeclarativeBase
from sqlalchemy import Column, DateTime, func


class Base(DeclarativeBase):
     """
     Base class for all SQLAlchemy models.

     Each model names its table explicitly; the names match the Alembic
     migration.
     """


class TimestampMixin:
     """created_at / updated_at columns maintained by the database."""

     created_at = Column(DateTime, server_default=func.now(), nullable=False)
     updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now(), nullable=False)
