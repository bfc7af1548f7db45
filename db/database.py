from sqlalchemy import create_engine, event, text
from sqlalchemy.engine import Engine
from sqlalchemy.orm import declarative_base, sessionmaker
from sqlalchemy.pool import QueuePool, StaticPool
from dotenv import load_dotenv

load_dotenv()

# Import settings for centralized configuration
from utils.config import settings
from utils.logging import get_logger

logger = get_logger(__name__)

DATABASE_URL = settings.DATABASE_URL

def create_db_engine(database_url: str = DATABASE_URL) -> Engine:
    """
    Build the SQLAlchemy engine for ``database_url``.

    SQLite (the local-first default) gets a single shared connection and the
    pragmas the app relies on, most importantly foreign keys so that deleting
    a novel cascades to its chapters and story elements.
    """
    if database_url.startswith("sqlite"):
        if ":memory:" not in database_url and database_url != "sqlite://":
            settings.DATA_DIR.mkdir(parents=True, exist_ok=True)

        db_engine = create_engine(
            database_url,
            connect_args={
                "check_same_thread": False,
                "timeout": 20,
            },
            poolclass=StaticPool,
            echo=settings.DB_ECHO
        )

        @event.listens_for(db_engine, "connect")
        def set_sqlite_pragma(dbapi_connection, connection_record):
            """Configure SQLite for the local single-user workload."""
            cursor = dbapi_connection.cursor()
            cursor.execute("PRAGMA journal_mode=WAL")
            cursor.execute("PRAGMA busy_timeout=30000")
            cursor.execute("PRAGMA foreign_keys=ON")
            cursor.execute("PRAGMA synchronous=NORMAL")
            cursor.close()

        return db_engine

    return create_engine(
        database_url,
        poolclass=QueuePool,
        pool_size=settings.DB_POOL_SIZE,
        max_overflow=settings.DB_MAX_OVERFLOW,
        pool_timeout=settings.DB_POOL_TIMEOUT,
        pool_pre_ping=settings.DB_POOL_PRE_PING,
        pool_recycle=settings.DB_POOL_RECYCLE,
        echo=settings.DB_ECHO
    )

engine = create_db_engine()

SessionLocal = sessionmaker(
    autocommit=False,
    autoflush=False,
    bind=engine,
    expire_on_commit=True
)

Base = declarative_base()

def get_db():
    """
    Dependency function to get database session.
    Used by FastAPI Depends() for automatic session management.
    """
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()

def test_database_connection():
    """
    Test database connection and return connection info.

    Returns:
        Dictionary with connection test results
    """
    safe_url = DATABASE_URL.split('@')[-1] if '@' in DATABASE_URL else DATABASE_URL
    try:
        with engine.connect() as conn:
            row = conn.execute(text("SELECT 1")).fetchone()
            return {
                "connected": True,
                "database_url": safe_url,
                "test_query_result": row[0] if row else None
            }
    except Exception as e:
        logger.error(f"Database connection test failed: {e}")
        return {
            "connected": False,
            "error": str(e),
            "database_url": safe_url,
        }
