import logging
from fastapi import APIRouter, Request, status
from circulate.core import auth
from circulate.core.db import transaction
from circulate.core.exceptions import CirculateAPIError, MemberExistsError
from circulate.routes.guard import http_error
from circulate.routes.schemas import SignupRequest, SigninRequest

logger = logging.getLogger(__name__)
router = APIRouter()


@router.post("/signup", status_code=status.HTTP_201_CREATED)
def signup(body: SignupRequest, request: Request):
    try:
        with transaction(request.app.state.sessions) as session:
            auth.signup(session, **body.model_dump())
    except MemberExistsError as e:
        raise http_error(e, status.HTTP_400_BAD_REQUEST)
    except CirculateAPIError as e:
        raise http_error(e)
    return {"message": "Registration successful"}


@router.post("/signin")
def signin(body: SigninRequest, request: Request):
    try:
        with transaction(request.app.state.sessions) as session:
            token, member = auth.signin(session, body.username, body.password)
            is_admin = member.admin
    except CirculateAPIError as e:
        raise http_error(e)
    logger.info(f"{body.username} signed in")
    return {
        "message": "Login successful",
        "token": token,
        "isAdmin": is_admin,
    }
