from fastapi import Request
from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import declarative_base, sessionmaker

# Create Base class for models
Base = declarative_base()


def build_engine(database_url: str) -> Engine:
    """
    Create the SQLAlchemy engine for a database URL.

    Called once at process start-up by the application lifespan (and by the
    Celery worker / operator scripts); nothing connects at import time.
    """
    if database_url.startswith("sqlite"):
        return create_engine(
            database_url,
            connect_args={"check_same_thread": False},
        )

    return create_engine(
        database_url,
        pool_pre_ping=True,  # Verify connections before using them
        pool_size=10,  # Connection pool size
        max_overflow=20  # Allow up to 20 connections beyond pool_size
    )


def build_session_factory(engine: Engine) -> sessionmaker:
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


def get_db(request: Request):
    """
    Dependency function to get database session.
    Used in FastAPI endpoints with Depends(get_db)

    The session factory is created by the lifespan handler and shared with
    every request through the lifespan state.
    """
    db = request.state.session_factory()
    try:
        yield db
    finally:
        db.close()


def init_db(engine: Engine, create_tables: bool = False) -> None:
    """
    Initialize database.

    Alembic owns the schema in deployed environments ("alembic upgrade head").
    For SQLite development databases set AUTO_CREATE_TABLES=true to create the
    tables directly from the models.
    """
    from recruiting.models import application, admin_user, revoked_token  # noqa: F401 - register models

    if create_tables:
        Base.metadata.create_all(bind=engine)
