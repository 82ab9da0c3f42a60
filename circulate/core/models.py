#!/usr/bin/env python

"""
    Models for Circulate,
    including the catalog's Book table, Members, and the lending
    ledger (active Loans and immutable BookReturn records).

    :copyright: (c) 2025 by AUTHORS
    :license: see LICENSE for more details
"""

from sqlalchemy import (
    Column, String, Boolean, Integer, DateTime, ForeignKey, UniqueConstraint
)
from sqlalchemy.sql import func
from circulate.core.db import Base
from circulate.core.utils import as_utc


class Book(Base):
    __tablename__ = 'books'

    id = Column(Integer, primary_key=True)
    name = Column(String(255), nullable=False)
    author = Column(String(255), nullable=False)
    genre = Column(String(100), nullable=False)
    type = Column(String(50), nullable=False)
    # Only the lending protocol flips this flag
    available = Column(Boolean, default=True, nullable=False)
    created_at = Column(DateTime(timezone=True), default=func.now())
    updated_at = Column(DateTime(timezone=True), default=func.now(), onupdate=func.now())

    @classmethod
    def exists(cls, session, book_id):
        return session.get(cls, book_id)


class Member(Base):
    __tablename__ = 'members'

    id = Column(Integer, primary_key=True)
    name = Column(String(255), nullable=False)
    username = Column(String(50), unique=True, nullable=False)
    email = Column(String(255), unique=True, nullable=False)
    phone = Column(String(10), unique=True, nullable=False)
    password_hash = Column(String(255), nullable=False)
    admin = Column(Boolean, default=False, nullable=False)
    created_at = Column(DateTime(timezone=True), default=func.now())

    @classmethod
    def by_username(cls, session, username):
        return session.query(cls).filter(cls.username == username).first()

    @classmethod
    def taken(cls, session, username, email, phone):
        """True if any of the unique contact fields is already registered."""
        return session.query(cls).filter(
            (cls.username == username) | (cls.email == email) | (cls.phone == phone)
        ).first() is not None


class Loan(Base):
    __tablename__ = 'loans'
    __table_args__ = (
        UniqueConstraint('username', 'book_id', name='uq_loans_username_book'),
    )

    id = Column(Integer, primary_key=True)
    username = Column(String(50), nullable=False, index=True)
    book_id = Column(Integer, ForeignKey('books.id', ondelete='CASCADE'), nullable=False, index=True)
    due_at = Column(DateTime(timezone=True), nullable=False)
    created_at = Column(DateTime(timezone=True), default=func.now(), nullable=False)

    @property
    def due(self):
        """`due_at` as an aware UTC datetime, whatever the backend returned."""
        return as_utc(self.due_at)

    @classmethod
    def exists(cls, session, username, book_id):
        return session.query(cls).filter(
            cls.username == username,
            cls.book_id == book_id,
        ).first()


class BookReturn(Base):
    __tablename__ = 'returns'

    id = Column(Integer, primary_key=True)
    username = Column(String(50), nullable=False, index=True)
    book_id = Column(Integer, ForeignKey('books.id', ondelete='CASCADE'), nullable=False)
    due_at = Column(DateTime(timezone=True), nullable=False)
    fine = Column(Integer, nullable=False, default=0)
    created_at = Column(DateTime(timezone=True), default=func.now(), nullable=False)
