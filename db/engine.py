import os

from sqlalchemy import create_engine, text
from sqlalchemy.orm import declarative_base, sessionmaker

DATABASE_URL = os.getenv("SAFESPEND_DATABASE_URL", "sqlite:///safespend.db")

IS_SQLITE = DATABASE_URL.startswith("sqlite")

engine = create_engine(DATABASE_URL, connect_args={"check_same_thread": False} if IS_SQLITE else {})
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)
Base = declarative_base()


def _ensure_column(table: str, column: str, ddl: str) -> None:
    with engine.begin() as conn:
        cols = conn.execute(text(f"PRAGMA table_info({table})")).fetchall()
        names = {c[1] for c in cols}
        if column not in names:
            conn.execute(text(f"ALTER TABLE {table} ADD COLUMN {ddl}"))


def init_db() -> None:
    from db import models  # noqa: F401

    Base.metadata.create_all(bind=engine)
    if not IS_SQLITE:
        return

    # Lightweight schema evolution for existing local DBs.
    _ensure_column("profiles", "safety_threshold_comfort", "safety_threshold_comfort FLOAT")
    _ensure_column("categories", "is_variable", "is_variable BOOLEAN DEFAULT 0")
    _ensure_column("transactions", "is_forecast", "is_forecast BOOLEAN DEFAULT 0")
    _ensure_column("transactions", "project_id", "project_id INTEGER")
    _ensure_column("projects", "linked_account_id", "linked_account_id INTEGER")
