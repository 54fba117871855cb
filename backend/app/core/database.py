"""
SQLAlchemy engine, session factory and the request-scoped session dependency
"""
from typing import Any, Dict, Generator, Optional

from sqlalchemy import create_engine, text
from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, declarative_base, sessionmaker
from sqlalchemy.pool import StaticPool

from app.core.config import Settings, get_settings
from app.core.logging_config import LoggingConfig

logger = LoggingConfig.get_logger(__name__)

Base = declarative_base()

# Built on first use so importing models never opens a connection
_engine: Optional[Engine] = None
_SessionLocal: Optional[sessionmaker] = None

IN_MEMORY_SQLITE_URLS = ("sqlite://", "sqlite:///:memory:")


def _engine_options(url: str, timeout: int, pool_size: int, max_overflow: int) -> Dict[str, Any]:
    """create_engine() keyword arguments for the backend named by the URL"""
    if url.startswith("sqlite"):
        options: Dict[str, Any] = {"connect_args": {"check_same_thread": False, "timeout": timeout}}
        # An in-memory database only exists inside its one connection
        if url in IN_MEMORY_SQLITE_URLS:
            options["poolclass"] = StaticPool
        return options

    return {
        "pool_size": pool_size,
        "max_overflow": max_overflow,
        "pool_pre_ping": True,
        "connect_args": {"connect_timeout": timeout},
    }


def build_engine(settings: Settings) -> Engine:
    return create_engine(
        settings.database_url,
        echo=settings.log_sqlalchemy,
        **_engine_options(
            settings.database_url,
            timeout=settings.database_timeout_seconds,
            pool_size=settings.database_pool_size,
            max_overflow=settings.database_max_overflow,
        ),
    )


def get_engine() -> Engine:
    global _engine
    if _engine is None:
        _engine = build_engine(get_settings())
        logger.info("Database engine created", extra={"dialect": _engine.dialect.name})
    return _engine


def get_session_local() -> sessionmaker:
    global _SessionLocal
    if _SessionLocal is None:
        _SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=get_engine())
    return _SessionLocal


def init_db(engine: Optional[Engine] = None) -> None:
    """Create every table the models define (no-op for existing tables)"""
    import app.models  # noqa: F401 - registers models on Base.metadata

    Base.metadata.create_all(bind=engine or get_engine())


def ping(db: Session) -> Optional[str]:
    """None when the database answers, otherwise the error type name"""
    try:
        db.execute(text("SELECT 1"))
    except SQLAlchemyError as e:
        db.rollback()
        return type(e).__name__
    return None


def get_db() -> Generator[Session, None, None]:
    """FastAPI dependency: one session per request, always closed"""
    db = get_session_local()()
    try:
        yield db
    finally:
        db.close()
