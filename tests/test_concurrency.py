import threading
import pytest
from concurrent.futures import ThreadPoolExecutor
from datetime import timedelta
from circulate.core.db import transaction
from circulate.core.models import Book, Loan, BookReturn
from circulate.core.exceptions import ConflictError, LoanNotFoundError
from conftest import T0

WORKERS = 8


def race(n, attempt):
    """Runs `attempt(i)` on `n` threads released together; returns
    (results, errors)."""
    barrier = threading.Barrier(n)

    def run(i):
        barrier.wait()
        try:
            return attempt(i), None
        except Exception as e:
            return None, e

    with ThreadPoolExecutor(max_workers=n) as pool:
        outcomes = list(pool.map(run, range(n)))
    return [r for r, _ in outcomes if r is not None], [e for _, e in outcomes if e is not None]


@pytest.fixture
def members(make_member, as_identity):
    return [as_identity(make_member(f"reader{i}")) for i in range(WORKERS)]


def test_concurrent_borrows_of_one_book_have_one_winner(lending, sessions, book, members):
    loans, errors = race(WORKERS, lambda i: lending.borrow(members[i], members[i].username, book.id))

    assert len(loans) == 1
    assert len(errors) == WORKERS - 1
    assert all(isinstance(e, ConflictError) for e in errors), errors
    with transaction(sessions) as session:
        assert session.get(Book, book.id).available is False
        stored = session.query(Loan).filter(Loan.book_id == book.id).all()
        assert [l.username for l in stored] == [loans[0].username]


def test_concurrent_borrows_by_same_member(lending, sessions, alice, book, as_identity):
    identity = as_identity(alice)
    loans, errors = race(WORKERS, lambda i: lending.borrow(identity, "alice", book.id))

    assert len(loans) == 1
    assert all(isinstance(e, ConflictError) for e in errors), errors
    with transaction(sessions) as session:
        assert session.query(Loan).filter(Loan.username == "alice").count() == 1


def test_concurrent_returns_record_once(lending, clock, sessions, alice, book, as_identity):
    identity = as_identity(alice)
    lending.borrow(identity, "alice", book.id)
    clock.now = T0 + timedelta(days=20)

    records, errors = race(WORKERS, lambda i: lending.return_book(identity, "alice", book.id))

    assert len(records) == 1
    assert records[0].fine == 100
    assert all(isinstance(e, LoanNotFoundError) for e in errors), errors
    with transaction(sessions) as session:
        assert session.get(Book, book.id).available is True
        assert session.query(Loan).count() == 0
        assert session.query(BookReturn).count() == 1


def test_many_books_many_readers_keep_invariant(lending, sessions, catalog, members):
    books = [
        catalog.add_book(name=f"Volume {i}", author="Anon", genre="Reference", type="Paperback")
        for i in range(3)
    ]

    def attempt(i):
        target = books[i % len(books)]
        return lending.borrow(members[i], members[i].username, target.id)

    loans, errors = race(WORKERS, attempt)

    assert len(loans) == len(books)
    assert all(isinstance(e, ConflictError) for e in errors), errors
    with transaction(sessions) as session:
        for stored in session.query(Book).all():
            on_loan = session.query(Loan).filter(Loan.book_id == stored.id).count()
            assert on_loan == 1
            assert stored.available is False
