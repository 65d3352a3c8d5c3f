# app/database.py
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

from app.config import settings
from app.models import Base

connect_args = {}
if settings.DATABASE_URL.startswith("sqlite"):
    # sessions are opened from FastAPI's worker threads
    connect_args["check_same_thread"] = False

# Use SQLAlchemy engine (sync)
engine = create_engine(settings.DATABASE_URL, pool_pre_ping=True, future=True, connect_args=connect_args)

SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


def init_db(bind=None):
    """Create tables if not present."""
    Base.metadata.create_all(bind=bind or engine)
