#!/usr/bin/env python

"""
    Identity & session tokens for Circulate.

    Accounts are created and verified here; a successful sign-in yields a
    signed JWT carrying the member's id, username and admin flag so the
    lending core can trust the caller without a database round trip.

    :copyright: (c) 2025 by AUTHORS
    :license: see LICENSE for more details
"""

import jwt
import logging
from datetime import datetime, timedelta, timezone
from typing import Optional
from sqlalchemy.exc import IntegrityError
from circulate.configs import SECRET, TOKEN_TTL_MINUTES
from circulate.core.models import Member
from circulate.core.utils import hash_password, verify_password
from circulate.core.exceptions import (
    ForbiddenError,
    InvalidCredentialsError,
    MemberExistsError,
)
from circulate.schemas.member import Identity

logger = logging.getLogger(__name__)

ALGORITHM = "HS256"
ISSUER = "circulate-identity"
AUDIENCE = "circulate-api"


def _get_secret() -> str:
    if not SECRET:
        raise RuntimeError("CIRCULATE_SECRET is not configured.")
    return SECRET


def create_token(member, ttl_minutes: int = TOKEN_TTL_MINUTES, now: Optional[datetime] = None) -> str:
    """Returns a signed access token for `member`."""
    now = now or datetime.now(timezone.utc)
    payload = {
        "iss": ISSUER,
        "aud": AUDIENCE,
        "sub": str(member.id),
        "id": member.id,
        "username": member.username,
        "admin": bool(member.admin),
        "iat": now,
        "exp": now + timedelta(minutes=ttl_minutes),
    }
    return jwt.encode(payload, _get_secret(), algorithm=ALGORITHM)


def verify_token(token: str) -> Identity:
    """Verifies signature, expiry and claims of `token`.

    Raises:
        ForbiddenError: If the token is malformed, tampered with or expired.
    """
    try:
        data = jwt.decode(
            token, _get_secret(),
            algorithms=[ALGORITHM],
            audience=AUDIENCE,
            issuer=ISSUER,
            options={"require": ["exp", "sub"]},
        )
    except jwt.ExpiredSignatureError:
        logger.info("Rejected expired session token")
        raise ForbiddenError("Session token expired.")
    except jwt.InvalidTokenError as e:
        logger.info(f"Rejected invalid session token: {e}")
        raise ForbiddenError("Invalid session token.")
    if not data.get("username"):
        raise ForbiddenError("Invalid session token.")
    try:
        return Identity(id=int(data["sub"]), username=data["username"], admin=bool(data.get("admin")))
    except (TypeError, ValueError):
        raise ForbiddenError("Invalid session token.")


def authorize_self(identity: Identity, username: str):
    """Members may only act on their own behalf."""
    if identity.username != username:
        logger.warning(f"{identity.username} attempted to act as {username}")
        raise ForbiddenError("Unauthorized action")


def authorize_admin(identity: Identity):
    if not identity.admin:
        raise ForbiddenError("Admin privileges required")


def signup(session, name: str, username: str, password: str, email: str, phone: str, admin: bool = False) -> Member:
    """Registers a new member. Caller owns the transaction."""
    username, email = username.strip(), email.strip().lower()
    if Member.taken(session, username, email, phone):
        raise MemberExistsError("Username, email, or phone already registered")
    member = Member(
        name=name.strip(),
        username=username,
        email=email,
        phone=phone,
        password_hash=hash_password(password),
        admin=admin,
    )
    session.add(member)
    try:
        session.flush()
    except IntegrityError:
        raise MemberExistsError("Username, email, or phone already registered")
    logger.info(f"Registered member {member.username}")
    return member


def signin(session, username: str, password: str) -> tuple:
    """Returns `(token, member)` for valid credentials."""
    member = Member.by_username(session, username)
    if not member or not verify_password(password, member.password_hash):
        raise InvalidCredentialsError("Invalid username or password")
    return create_token(member), member
