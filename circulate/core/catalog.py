import logging
from typing import Optional
from circulate.core.db import transaction
from circulate.core.models import Book, Member
from circulate.core.exceptions import BookNotFoundError, ValidationError

logger = logging.getLogger(__name__)


class Catalog:

    MAX_LIMIT = 500

    def __init__(self, sessions):
        self.sessions = sessions

    @classmethod
    def _page(cls, offset: Optional[int], limit: Optional[int]):
        """Without a `limit` every matching row is returned."""
        offset = 0 if offset is None else offset
        if offset < 0 or (limit is not None and not 1 <= limit <= cls.MAX_LIMIT):
            raise ValidationError(f"offset must be >= 0 and limit between 1 and {cls.MAX_LIMIT}")
        return offset, limit

    def available_books(self, offset=None, limit=None):
        offset, limit = self._page(offset, limit)
        with transaction(self.sessions) as session:
            return Book.get_many(session, offset=offset, limit=limit, available=True)

    def add_book(self, name: str, author: str, genre: str, type: str) -> Book:
        with transaction(self.sessions) as session:
            book = Book(name=name, author=author, genre=genre, type=type, available=True)
            session.add(book)
            session.flush()
            session.refresh(book)
        logger.info(f"Added book {book.id}: {book.name}")
        return book

    def update_book(self, book_id: int, **changes) -> Book:
        """Updates catalog metadata. The availability flag is not editable here."""
        changes.pop('available', None)
        with transaction(self.sessions) as session:
            book = Book.exists(session, book_id)
            if not book:
                raise BookNotFoundError("Book not found")
            for field, value in changes.items():
                if value is not None:
                    setattr(book, field, value)
            session.flush()
            session.refresh(book)
        return book

    def members(self, offset=None, limit=None):
        offset, limit = self._page(offset, limit)
        with transaction(self.sessions) as session:
            return Member.get_many(session, offset=offset, limit=limit)
