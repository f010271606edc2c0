import os

from sqlalchemy.orm import declarative_base, sessionmaker
from sqlalchemy import create_engine
from sqlalchemy.pool import StaticPool


def make_engine(database_url: str):
    if database_url.startswith("sqlite"):
        if database_url.startswith("sqlite:///./"):
            os.makedirs(os.path.dirname(database_url.replace("sqlite:///", "")) or ".", exist_ok=True)
        kwargs = {"connect_args": {"check_same_thread": False}}
        # In-memory databases vanish per connection unless a single one is shared
        if database_url in ("sqlite://", "sqlite:///:memory:"):
            kwargs["poolclass"] = StaticPool
        return create_engine(database_url, future=True, **kwargs)
    # Configure connection pool for better performance
    return create_engine(
        database_url,
        future=True,
        pool_pre_ping=True,
        pool_size=5,
        max_overflow=10,
        pool_recycle=3600,  # Recycle connections after 1 hour
    )


def make_session_factory(engine):
    # Fresh Session per unit of work; never share one across requests
    return sessionmaker(bind=engine, autoflush=False, autocommit=False, future=True)


Base = declarative_base()
