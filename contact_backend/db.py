"""
Database abstraction for contact submissions: a SQLAlchemy implementation
(Postgres in production, SQLite locally) and an in-memory test implementation.
"""

from __future__ import annotations

import itertools
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Dict, Optional, Protocol

from sqlalchemy import (
    Boolean,
    Column,
    DateTime,
    Integer,
    String,
    create_engine,
    func,
    select,
)
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, declarative_base, sessionmaker

from contact_backend.errors import StorageError

NAME_MAX_LENGTH = 100
EMAIL_MAX_LENGTH = 150
SUBJECT_MAX_LENGTH = 200
MESSAGE_MAX_LENGTH = 1000


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class DbClient(Protocol):
    """Interface for contact storage."""

    def insert(self, submission: "ContactSubmission") -> int:
        ...

    def list_all(self) -> list["ContactRecord"]:
        ...

    def find_by_id(self, contact_id: int) -> Optional["ContactRecord"]:
        ...

    def mark_read(self, contact_id: int) -> bool:
        ...


@dataclass
class ContactSubmission:
    name: str
    email: str
    subject: str
    message: str


@dataclass
class ContactRecord:
    id: int
    name: str
    email: str
    subject: str
    message: str
    created_at: datetime
    is_read: bool = False


class InMemoryDbClient:
    """Simple in-memory database for development and tests."""

    def __init__(self):
        self.contacts: Dict[int, ContactRecord] = {}
        self._ids = itertools.count(1)

    def insert(self, submission: ContactSubmission) -> int:
        contact_id = next(self._ids)
        self.contacts[contact_id] = ContactRecord(
            id=contact_id,
            name=submission.name,
            email=submission.email,
            subject=submission.subject,
            message=submission.message,
            created_at=_utcnow(),
            is_read=False,
        )
        return contact_id

    def list_all(self) -> list[ContactRecord]:
        return sorted(
            self.contacts.values(),
            key=lambda record: (record.created_at, record.id),
            reverse=True,
        )

    def find_by_id(self, contact_id: int) -> Optional[ContactRecord]:
        return self.contacts.get(contact_id)

    def mark_read(self, contact_id: int) -> bool:
        record = self.contacts.get(contact_id)
        if not record:
            return False
        record.is_read = True
        return True

    def reset(self) -> None:
        """Clear all stored data (useful in tests)."""
        self.contacts.clear()
        self._ids = itertools.count(1)


class SqlAlchemyDbClient:
    """
    SQLAlchemy-backed implementation. Accepts any SQLAlchemy URL (e.g., Postgres or SQLite for tests).

    Every SQLAlchemy failure surfaces as StorageError with the original
    exception chained as its cause.
    """

    def __init__(self, database_url: str):
        if not database_url:
            raise ValueError("DATABASE_URL is required for SqlAlchemyDbClient")
        try:
            self.engine = create_engine(
                database_url,
                future=True,
                pool_pre_ping=True,
                pool_recycle=1800,
            )
        except (SQLAlchemyError, ImportError) as exc:
            # Unknown dialect or a missing DBAPI driver (e.g. psycopg2).
            raise StorageError("Failed to create database engine") from exc
        self.Session = sessionmaker(
            bind=self.engine, class_=Session, expire_on_commit=False, future=True
        )
        try:
            Base.metadata.create_all(self.engine)
        except SQLAlchemyError as exc:
            raise StorageError("Failed to create contacts schema") from exc

    def _to_record(self, row: "ContactRow") -> ContactRecord:
        created_at = row.created_at
        # SQLite hands timestamps back without tzinfo; they were written as UTC.
        if created_at is not None and created_at.tzinfo is None:
            created_at = created_at.replace(tzinfo=timezone.utc)
        return ContactRecord(
            id=row.id,
            name=row.name,
            email=row.email,
            subject=row.subject,
            message=row.message,
            created_at=created_at,
            is_read=bool(row.is_read),
        )

    def insert(self, submission: ContactSubmission) -> int:
        try:
            with self.Session() as session:
                row = ContactRow(
                    name=submission.name,
                    email=submission.email,
                    subject=submission.subject,
                    message=submission.message,
                    created_at=_utcnow(),
                    is_read=False,
                )
                session.add(row)
                session.commit()
                return row.id
        except SQLAlchemyError as exc:
            raise StorageError("Failed to insert contact") from exc

    def list_all(self) -> list[ContactRecord]:
        try:
            with self.Session() as session:
                stmt = select(ContactRow).order_by(
                    ContactRow.created_at.desc(), ContactRow.id.desc()
                )
                rows = session.execute(stmt).scalars().all()
                return [self._to_record(row) for row in rows]
        except SQLAlchemyError as exc:
            raise StorageError("Failed to list contacts") from exc

    def find_by_id(self, contact_id: int) -> Optional[ContactRecord]:
        try:
            with self.Session() as session:
                row = session.get(ContactRow, contact_id)
                if not row:
                    return None
                return self._to_record(row)
        except SQLAlchemyError as exc:
            raise StorageError(f"Failed to load contact {contact_id}") from exc

    def mark_read(self, contact_id: int) -> bool:
        try:
            with self.Session() as session:
                row = session.get(ContactRow, contact_id)
                if not row:
                    return False
                if not row.is_read:
                    row.is_read = True
                    session.commit()
                return True
        except SQLAlchemyError as exc:
            raise StorageError(f"Failed to mark contact {contact_id} as read") from exc


Base = declarative_base()


class ContactRow(Base):
    __tablename__ = "contacts"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(NAME_MAX_LENGTH), nullable=False)
    email = Column(String(EMAIL_MAX_LENGTH), nullable=False)
    subject = Column(String(SUBJECT_MAX_LENGTH), nullable=False)
    message = Column(String(MESSAGE_MAX_LENGTH), nullable=False)
    created_at = Column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
        index=True,
    )
    is_read = Column(Boolean, nullable=False, default=False)
