from typing import Generator, Optional
from sqlalchemy.engine import Engine
from sqlmodel import create_engine, Session
import logging

from core.config import DatabaseConfig, get_database_config
from core.exceptions import DatabaseConfigError

logger = logging.getLogger(__name__)

def get_database_url(config: Optional[DatabaseConfig] = None) -> str:
    """
    Builds the SQLite URL for the configured database file.
    Uses the shared configuration when none is given.
    """
    config = config or get_database_config()
    return f"sqlite:///{config.database_file}"

def create_db_engine(config: Optional[DatabaseConfig] = None, echo: bool = False) -> Engine:
    """
    Creates an engine for the configured database file.

    When `create_database` is on, the parent directory is created if needed and SQLite
    creates the file on first connect. When it is off, the file must already exist.

    Raises:
        DatabaseConfigError: If the file is missing and creation is turned off.
    """
    config = config or get_database_config()
    database_file = config.database_file

    if config.create_database:
        database_file.parent.mkdir(parents=True, exist_ok=True)
    elif not database_file.exists():
        raise DatabaseConfigError(
            f"Database file {database_file} does not exist and database creation is turned off."
        )

    # check_same_thread=False lets sessions be used outside the creating thread.
    engine = create_engine(get_database_url(config), echo=echo, connect_args={"check_same_thread": False})
    logger.info(f"Database engine created for {database_file}.")
    return engine

def get_session(engine: Engine) -> Generator[Session, None, None]:
    """
    Provides a database session context.
    Commits when the caller is done, rolls back and re-raises on error.
    """
    with Session(engine) as session:
        try:
            yield session
            session.commit()
        except Exception as e:
            logger.error(f"Error during database session: {e}", exc_info=True)
            session.rollback()
            raise
