from loguru import logger
from sqlalchemy.engine import Engine

from campuslease.core.db import Base
from campuslease.core.schema_evolution import EvolutionReport, SEED_LISTINGS, evolve_schema

# Import all models so SQLAlchemy registers them
from campuslease.models.user import User, LoginEvent
from campuslease.models.listing import Listing, Application
from campuslease.models.roommate import RoommateProfile
from campuslease.modules.messaging.models import Thread, Message


def init_db(engine: Engine, seed: bool = True) -> EvolutionReport:
    logger.info("Creating database tables")
    try:
        Base.metadata.create_all(bind=engine)
        report = evolve_schema(engine, seed_rows=SEED_LISTINGS if seed else ())
    except Exception:
        logger.exception("Database initialization failed, refusing to start")
        raise
    logger.info("Database ready")
    return report
