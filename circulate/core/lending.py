#!/usr/bin/env python

"""
    Lending Service for Circulate.

    Borrow and return each read the catalog and the ledger, check the
    lending rules, then write both. The writes are guarded statements
    (`UPDATE ... WHERE available`, `DELETE ... WHERE id`) executed in the
    same transaction as the reads, so of several concurrent callers racing
    for one book exactly one wins and the rest see the book as taken.

    :copyright: (c) 2025 by AUTHORS
    :license: see LICENSE for more details
"""

import logging
from datetime import datetime, timedelta
from typing import Callable
from sqlalchemy import update, delete
from sqlalchemy.exc import IntegrityError
from circulate.configs import LOAN_DAYS, LATE_FINE
from circulate.core import auth
from circulate.core.db import transaction
from circulate.core.models import Book, Loan, BookReturn
from circulate.core.utils import utcnow, as_utc
from circulate.core.exceptions import (
    BookNotFoundError,
    BookUnavailableError,
    ExistingLoanError,
    LoanNotFoundError,
)

logger = logging.getLogger(__name__)

LOAN_PERIOD = timedelta(days=LOAN_DAYS)


def calculate_fine(due_at: datetime, now: datetime, penalty: int = LATE_FINE) -> int:
    """Flat penalty for any late return; nothing when returned on or before `due_at`."""
    if as_utc(now) <= as_utc(due_at):
        return 0
    return penalty


class LendingService:

    def __init__(self, sessions, clock: Callable[[], datetime] = utcnow,
                 loan_period: timedelta = LOAN_PERIOD, fine_policy=calculate_fine):
        self.sessions = sessions
        self.clock = clock
        self.loan_period = loan_period
        self.fine_policy = fine_policy

    def borrow(self, identity, username: str, book_id: int) -> Loan:
        """
        Lend book `book_id` to `username`.

        Returns:
            The new Loan, due `loan_period` from now.

        Raises:
            ForbiddenError: If `username` is not the authenticated member.
            BookNotFoundError: If no such book exists.
            BookUnavailableError: If the book is on loan.
            ExistingLoanError: If this member already holds the book.
        """
        auth.authorize_self(identity, username)
        now = self.clock()
        with transaction(self.sessions) as session:
            book = Book.exists(session, book_id)
            if not book:
                raise BookNotFoundError("Book not found")
            if not book.available:
                raise BookUnavailableError("Book is not available")
            if Loan.exists(session, username, book_id):
                raise ExistingLoanError("You have already borrowed this book")

            claimed = session.execute(
                update(Book)
                .where(Book.id == book_id, Book.available.is_(True))
                .values(available=False)
                .execution_options(synchronize_session=False)
            ).rowcount
            if claimed != 1:
                # Another borrower flipped the flag after our read
                raise BookUnavailableError("Book is not available")

            loan = Loan(username=username, book_id=book_id,
                        due_at=now + self.loan_period, created_at=now)
            session.add(loan)
            try:
                session.flush()
            except IntegrityError:
                raise ExistingLoanError("You have already borrowed this book")
        logger.info(f"{username} borrowed book {book_id}, due {loan.due_at.isoformat()}")
        return loan

    def return_book(self, identity, username: str, book_id: int) -> BookReturn:
        """
        Close the member's loan on `book_id`, recording the fine owed.

        Raises:
            ForbiddenError: If `username` is not the authenticated member.
            LoanNotFoundError: If the member holds no loan on this book.
        """
        auth.authorize_self(identity, username)
        now = self.clock()
        with transaction(self.sessions) as session:
            loan = Loan.exists(session, username, book_id)
            if not loan:
                raise LoanNotFoundError("No record found for this borrowed book")
            due_at = loan.due

            removed = session.execute(
                delete(Loan)
                .where(Loan.id == loan.id)
                .execution_options(synchronize_session=False)
            ).rowcount
            if removed != 1:
                # A concurrent return of the same loan won
                raise LoanNotFoundError("No record found for this borrowed book")

            record = BookReturn(username=username, book_id=book_id, due_at=due_at,
                                fine=self.fine_policy(due_at, now), created_at=now)
            session.add(record)
            session.execute(
                update(Book)
                .where(Book.id == book_id)
                .values(available=True)
                .execution_options(synchronize_session=False)
            )
            session.flush()
        logger.info(f"{username} returned book {book_id}, fine {record.fine}")
        return record

    def active_loans(self, username: str):
        with transaction(self.sessions) as session:
            return Loan.get_many(session, username=username)

    def returns(self, username: str):
        with transaction(self.sessions) as session:
            return BookReturn.get_many(session, username=username)
