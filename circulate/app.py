#!/usr/bin/env python

import logging
from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse
from sqlalchemy.exc import OperationalError
from circulate.routes import api, auth
from circulate.configs import OPTIONS, DB_URI, CORS_ORIGINS
from circulate.core import db
from circulate.core.catalog import Catalog
from circulate.core.lending import LendingService
from circulate import __version__ as VERSION

logger = logging.getLogger(__name__)


def create_app(db_uri: str = DB_URI, engine=None) -> FastAPI:
    app = FastAPI(
        title="Circulate API",
        description="Circulate: a lending service for library books",
        version=VERSION,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.exception_handler(RequestValidationError)
    async def validation_error(request: Request, exc: RequestValidationError):
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content={"detail": "Invalid request", "errors": jsonable_encoder(exc.errors())},
        )

    engine = engine or db.make_engine(db_uri)
    try:
        db.init(engine)
    except OperationalError as e:
        logger.warning(f"[WARNING] Database initialization failed: {e}")
    app.state.engine = engine
    app.state.sessions = db.make_sessionmaker(engine)
    app.state.lending = LendingService(app.state.sessions)
    app.state.catalog = Catalog(app.state.sessions)

    app.include_router(auth.router)
    app.include_router(api.router)
    return app


app = create_app()

if __name__ == "__main__":
    import uvicorn
    uvicorn.run("circulate.app:app", **OPTIONS)
