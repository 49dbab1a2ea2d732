from contextlib import contextmanager

from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, declarative_base

from clinicpay.config import database_url

DATABASE_URL = database_url()
IS_SQLITE = DATABASE_URL.startswith("sqlite")

# Route handlers run in FastAPI's threadpool, so sqlite connections cross threads.
engine = create_engine(
    DATABASE_URL,
    connect_args={"check_same_thread": False} if IS_SQLITE else {},
    pool_pre_ping=not IS_SQLITE,
)

SessionLocal = sessionmaker(bind=engine, autocommit=False, autoflush=False)
Base = declarative_base()


@contextmanager
def payment_session():
    """One session per request or webhook delivery, always closed."""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
