from typing import Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from loguru import logger

from campuslease.api.router import api_router
from campuslease.core.config import APP_ENV, CORS_ORIGINS, DATABASE_URL, SEED_EXAMPLE_LISTINGS
from campuslease.core.db import make_engine, make_session_factory
from campuslease.core.errors import register_exception_handlers
from campuslease.core.init_db import init_db
from campuslease.core.logging import setup_logging


def create_app(database_url: Optional[str] = None, seed: Optional[bool] = None) -> FastAPI:
    """
    Build the CampusLease API.

    The database is brought up to date (tables, missing columns, legacy
    back-fill, example listings) before the app is returned; if that fails
    the error propagates and nothing is served.
    """
    setup_logging()

    database_url = database_url or DATABASE_URL
    seed = SEED_EXAMPLE_LISTINGS if seed is None else seed
    logger.info(f"Starting CampusLease backend | env={APP_ENV}")

    engine = make_engine(database_url)
    report = init_db(engine, seed=seed)

    app = FastAPI(
        title="CampusLease Backend",
        version="0.1.0",
    )
    app.state.engine = engine
    app.state.session_factory = make_session_factory(engine)
    app.state.schema = report

    # credentialed CORS: reflect the caller's origin unless FRONTEND_URL pins it
    if CORS_ORIGINS:
        app.add_middleware(
            CORSMiddleware,
            allow_origins=CORS_ORIGINS,
            allow_credentials=True,
            allow_methods=["*"],
            allow_headers=["*"],
        )
    else:
        app.add_middleware(
            CORSMiddleware,
            allow_origin_regex=".*",
            allow_credentials=True,
            allow_methods=["*"],
            allow_headers=["*"],
        )

    register_exception_handlers(app)
    app.include_router(api_router)

    return app
