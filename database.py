from datetime import datetime, timezone
from sqlalchemy import JSON, create_engine
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import declarative_base, sessionmaker
import os
from dotenv import load_dotenv

# Load environment variables from .env file
load_dotenv()

# Fetch DATABASE_URL from environment, fallback to a local SQLite file if not set
DATABASE_URL = os.getenv("DATABASE_URL", "sqlite:///./buddhaceo.db")

# For SQLite, need connect_args
if DATABASE_URL.startswith("sqlite"):
    engine = create_engine(DATABASE_URL, connect_args={"check_same_thread": False})
else:
    # The pool tracks its own connection health, so there is no separate
    # "connected" flag to maintain between requests.
    engine = create_engine(
        DATABASE_URL,
        pool_size=5,          # modest pool to reduce wait timeouts
        max_overflow=5,       # allow short bursts
        pool_pre_ping=True,   # recycle dead/stale connections automatically
        pool_recycle=1800,    # recycle every 30 minutes
        pool_timeout=30
    )

SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)
Base = declarative_base()

# JSON payload columns; JSONB on PostgreSQL so they can be indexed
JSONType = JSON().with_variant(JSONB(), "postgresql")


def utcnow():
    """Naive UTC timestamp, matching how DateTime columns are stored."""
    return datetime.now(timezone.utc).replace(tzinfo=None)


def init_db():
    """Create any missing tables. Alembic owns the schema in deployed environments."""
    import models  # noqa: F401  registers every table on Base.metadata
    Base.metadata.create_all(bind=engine)


def get_db():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
