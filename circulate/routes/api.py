#!/usr/bin/env python

"""
    API routes for Circulate,
    including the catalog listing, catalog administration and the
    borrow/return endpoints.

    :copyright: (c) 2025 by AUTHORS
    :license: see LICENSE for more details
"""

import logging
from typing import List, Optional
from fastapi import APIRouter, Depends, Path, Query, Request, status
from circulate.core.catalog import Catalog
from circulate.core.lending import LendingService
from circulate.core.exceptions import (
    CirculateAPIError,
    ConflictError,
    NotFoundError,
    ValidationError,
)
from circulate.routes.guard import http_error, require_admin, require_member
from circulate.routes.schemas import MAX_ID, LendingRequest
from circulate.schemas.book import Book, BookCreate, BookUpdate
from circulate.schemas.loan import Loan, BookReturn
from circulate.schemas.member import Identity, Member

logger = logging.getLogger(__name__)

router = APIRouter()

# Lending rule violations are all reported as bad requests
LENDING_RULE_ERRORS = (NotFoundError, ConflictError, ValidationError)


def get_lending(request: Request) -> LendingService:
    return request.app.state.lending


def get_catalog(request: Request) -> Catalog:
    return request.app.state.catalog


@router.get("/library", response_model=List[Book])
def get_library(
        offset: Optional[int] = Query(None, ge=0, le=MAX_ID),
        limit: Optional[int] = Query(None, ge=1, le=Catalog.MAX_LIMIT),
        identity: Identity = Depends(require_member),
        catalog: Catalog = Depends(get_catalog)):
    try:
        return catalog.available_books(offset=offset, limit=limit)
    except CirculateAPIError as e:
        raise http_error(e)


@router.post("/library", status_code=status.HTTP_201_CREATED, response_model=Book)
def add_book(
        book: BookCreate,
        identity: Identity = Depends(require_admin),
        catalog: Catalog = Depends(get_catalog)):
    try:
        return catalog.add_book(**book.model_dump())
    except CirculateAPIError as e:
        raise http_error(e)


@router.put("/library/{book_id}", response_model=Book)
def update_book(
        changes: BookUpdate,
        book_id: int = Path(..., ge=1, le=MAX_ID),
        identity: Identity = Depends(require_admin),
        catalog: Catalog = Depends(get_catalog)):
    try:
        return catalog.update_book(book_id, **changes.model_dump(exclude_unset=True))
    except CirculateAPIError as e:
        raise http_error(e)


@router.get("/manage/users", response_model=List[Member])
def get_members(
        offset: Optional[int] = Query(None, ge=0, le=MAX_ID),
        limit: Optional[int] = Query(None, ge=1, le=Catalog.MAX_LIMIT),
        identity: Identity = Depends(require_admin),
        catalog: Catalog = Depends(get_catalog)):
    try:
        return catalog.members(offset=offset, limit=limit)
    except CirculateAPIError as e:
        raise http_error(e)


@router.get("/profile")
def profile(
        identity: Identity = Depends(require_member),
        lending: LendingService = Depends(get_lending)):
    """
    Returns the caller's identity, the books they hold and their return history.
    """
    try:
        loans = [Loan.model_validate(loan) for loan in lending.active_loans(identity.username)]
        returns = [BookReturn.model_validate(r) for r in lending.returns(identity.username)]
    except CirculateAPIError as e:
        raise http_error(e)
    return {
        "username": identity.username,
        "admin": identity.admin,
        "loans": loans,
        "loan_count": len(loans),
        "returns": returns,
        "fines_total": sum(r.fine for r in returns),
    }


@router.post("/borrow-book", status_code=status.HTTP_201_CREATED)
def borrow_book(
        body: LendingRequest,
        identity: Identity = Depends(require_member),
        lending: LendingService = Depends(get_lending)):
    try:
        loan = lending.borrow(identity, body.username, body.bookId)
    except LENDING_RULE_ERRORS as e:
        raise http_error(e, status.HTTP_400_BAD_REQUEST)
    except CirculateAPIError as e:
        raise http_error(e)
    return {
        "message": "Book borrowed successfully",
        "loan": Loan.model_validate(loan),
    }


@router.post("/return-book", status_code=status.HTTP_201_CREATED)
def return_book(
        body: LendingRequest,
        identity: Identity = Depends(require_member),
        lending: LendingService = Depends(get_lending)):
    try:
        record = lending.return_book(identity, body.username, body.bookId)
    except LENDING_RULE_ERRORS as e:
        raise http_error(e, status.HTTP_400_BAD_REQUEST)
    except CirculateAPIError as e:
        raise http_error(e)
    return {
        "message": f"Book returned successfully. Fine: ${record.fine}",
        "fine": record.fine,
        "return": BookReturn.model_validate(record),
    }
