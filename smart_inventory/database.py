from contextlib import contextmanager
from datetime import datetime, timezone

from sqlalchemy import create_engine, event, inspect, text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import DeclarativeBase, Session, sessionmaker

from smart_inventory.config import settings
from smart_inventory.errors import PersistenceError

connect_args = {}
if settings.DATABASE_URL.startswith("sqlite"):
    connect_args["check_same_thread"] = False

engine = create_engine(settings.DATABASE_URL, connect_args=connect_args)
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


class Base(DeclarativeBase):
    pass


def utcnow() -> datetime:
    """Naive UTC timestamp; SQLite drops tzinfo on the way back anyway."""
    return datetime.now(timezone.utc).replace(tzinfo=None)


@event.listens_for(engine, "connect")
def _sqlite_foreign_keys(dbapi_conn, _record):
    if settings.DATABASE_URL.startswith("sqlite"):
        cursor = dbapi_conn.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()


def get_db():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def commit(db: Session) -> None:
    """Commit or roll back, surfacing store failures as PersistenceError."""
    try:
        db.commit()
    except SQLAlchemyError as e:
        db.rollback()
        raise PersistenceError(f"Could not save changes: {e}") from e


@contextmanager
def read_snapshot(db: Session):
    """Run several reads against one consistent view of the store.

    pysqlite only opens a transaction before writes, so plain SELECTs each see
    the latest commit. An explicit BEGIN pins them to one snapshot; the
    transaction is rolled back on exit since nothing was written.
    """
    conn = db.connection()
    if conn.dialect.name == "sqlite" and not conn.connection.dbapi_connection.in_transaction:
        conn.exec_driver_sql("BEGIN")
    try:
        yield
    finally:
        db.rollback()


def init_db(bind=None):
    # Import all models so Base.metadata knows about them
    import smart_inventory.models.app_setting  # noqa: F401
    import smart_inventory.models.count_adjustment  # noqa: F401
    import smart_inventory.models.item  # noqa: F401
    import smart_inventory.models.storage  # noqa: F401
    import smart_inventory.models.uom  # noqa: F401

    bind = bind or engine
    Base.metadata.create_all(bind=bind)

    # Add columns introduced after a table was first created
    existing = {col["name"] for col in inspect(bind).get_columns("count_adjustments")}
    if "sequence" not in existing:
        with bind.begin() as conn:
            conn.execute(text("ALTER TABLE count_adjustments ADD COLUMN sequence INTEGER DEFAULT 0"))
