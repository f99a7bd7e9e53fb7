from pathlib import Path
from sqlalchemy import create_engine
from sqlalchemy.orm import DeclarativeBase, sessionmaker

from jobs_api.config import settings


class Base(DeclarativeBase):
    pass


def get_engine(db_path: Path | None = None):
    path = db_path or settings.geonames_db_path
    return create_engine(
        f"sqlite:///{path}",
        connect_args={"check_same_thread": False},
    )


engine = get_engine()
SessionLocal = sessionmaker(bind=engine, autoflush=False, autocommit=False)


def get_db():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def init_db(bind=None):
    # Registers the mapped tables on Base.metadata before create_all.
    import jobs_api.models  # noqa: F401

    Base.metadata.create_all(bind=bind or engine)
