"""Persisted log of applied schema migrations."""

from sqlalchemy import Column, DateTime, Integer, String

from hours.app.core.time import utc_now
from hours.app.db.base_class import Base


class MigrationRecord(Base):
    __tablename__ = "migrations"

    id = Column(Integer, primary_key=True)
    name = Column(String, nullable=False, unique=True)
    applied_at = Column(DateTime, nullable=False, default=utc_now)
