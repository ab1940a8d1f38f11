import logging

from sqlalchemy import create_engine               # SQLAlchemy engine factory
from sqlalchemy.orm import declarative_base        # base class for the models
from sqlalchemy.orm import sessionmaker            # session factory
from sqlalchemy.pool import StaticPool

from config.settings import settings

logger = logging.getLogger(__name__)


def _engine_kwargs(url: str) -> dict:
    # an in-memory SQLite database only lives as long as its single connection
    if url.startswith("sqlite"):
        kwargs = {"connect_args": {"check_same_thread": False}}
        if ":memory:" in url or url.rstrip("/") == "sqlite:":
            kwargs["poolclass"] = StaticPool
        return kwargs
    return {"pool_pre_ping": True}


# process-wide engine (connection pool), lives for the process lifetime
engine = create_engine(
    settings.DATABASE_URL,
    echo=settings.DB_ECHO,
    **_engine_kwargs(settings.DATABASE_URL),
)

# one session per request, see dependencies/db.py
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

# declarative base for every model
Base = declarative_base()


def init_db() -> None:
    """Create all tables from the model definitions (no versioned migrations)."""
    from models import attendance, teachers  # noqa: F401  registers the tables on Base.metadata

    logger.info(f"Creating tables on {engine.url.render_as_string(hide_password=True)}")
    Base.metadata.create_all(bind=engine)


def dispose_db() -> None:
    engine.dispose()
