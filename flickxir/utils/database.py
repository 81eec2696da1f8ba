"""
Database engine, session factory and table helpers
"""
from sqlalchemy import create_engine
from sqlalchemy.orm import declarative_base, sessionmaker

from flickxir.config import DATABASE_URL

connect_args = {"check_same_thread": False} if DATABASE_URL.startswith("sqlite") else {}

engine = create_engine(DATABASE_URL, connect_args=connect_args, pool_pre_ping=True)
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

Base = declarative_base()


def get_db():
    """FastAPI dependency yielding a session that is always closed"""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def create_tables(bind=None):
    # models must be imported so their tables are registered on Base.metadata
    import flickxir.models  # noqa: F401

    Base.metadata.create_all(bind=bind or engine)


def drop_tables(bind=None):
    import flickxir.models  # noqa: F401

    Base.metadata.drop_all(bind=bind or engine)
