#!/usr/bin/env python

"""
    Authorization guard for Circulate routes.

    `require_member` resolves the bearer token into an `Identity` before a
    route body runs; `require_admin` additionally demands the admin flag.
    Neither touches the database.

    :copyright: (c) 2025 by AUTHORS
    :license: see LICENSE for more details
"""

from fastapi import Depends, HTTPException, Request, status
from circulate.core import auth
from circulate.core.exceptions import CirculateAPIError, UnauthenticatedError
from circulate.schemas.member import Identity


def extract_token(request: Request):
    auth_header = request.headers.get("Authorization")
    if auth_header and auth_header.startswith("Bearer "):
        return auth_header.split(" ", 1)[1].strip() or None
    return None


def http_error(e: CirculateAPIError, status_code: int = None) -> HTTPException:
    headers = None
    if e.status_code == status.HTTP_401_UNAUTHORIZED:
        headers = {"WWW-Authenticate": "Bearer"}
    elif retry_after := getattr(e, "retry_after", None):
        headers = {"Retry-After": str(retry_after)}
    return HTTPException(status_code=status_code or e.status_code, detail=str(e), headers=headers)


def require_member(request: Request) -> Identity:
    token = extract_token(request)
    if not token:
        raise http_error(UnauthenticatedError("Authentication required"))
    try:
        identity = auth.verify_token(token)
    except CirculateAPIError as e:
        raise http_error(e)
    request.state.identity = identity
    return identity


def require_admin(identity: Identity = Depends(require_member)) -> Identity:
    try:
        auth.authorize_admin(identity)
    except CirculateAPIError as e:
        raise http_error(e)
    return identity
