from sqlalchemy import create_engine, event
from sqlalchemy.orm import sessionmaker, declarative_base

from app.core.config import settings

_is_sqlite = settings.database_url.startswith("sqlite")

# SQLite needs connect_args for FastAPI's threadpool; Postgres gets stale-connection checks
if _is_sqlite:
    engine = create_engine(settings.database_url, connect_args={"check_same_thread": False})

    # Foreign keys are off by default in SQLite; documents.created_by_user_id relies on them
    @event.listens_for(engine, "connect")
    def _set_sqlite_pragma(dbapi_conn, connection_record):
        cursor = dbapi_conn.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()
else:
    engine = create_engine(settings.database_url, pool_pre_ping=True)

SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

Base = declarative_base()


def init_db() -> None:
    """Create all tables that do not exist yet."""
    import app.models  # noqa: F401  registers mappers on Base.metadata

    Base.metadata.create_all(bind=engine)


def get_db():
    """Yield a request-scoped session."""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
