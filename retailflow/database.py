"""Database configuration and initialization."""
import logging
import time

from sqlalchemy import BigInteger, Integer, create_engine, event, text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import scoped_session, sessionmaker, declarative_base

logger = logging.getLogger(__name__)

# Create SQLAlchemy base
Base = declarative_base()

# Primary key type: BIGINT, but INTEGER on SQLite so ids autoincrement
BigIntId = BigInteger().with_variant(Integer, 'sqlite')

# Global session and engine
engine = None
db_session = None


def _engine_options(url, config):
    """Build create_engine keyword arguments for the given database URL."""
    options = {
        'echo': config.get('SQLALCHEMY_ECHO', False),
        'pool_pre_ping': True,  # Enable connection health checks
    }

    if url.startswith('sqlite'):
        options['connect_args'] = {'check_same_thread': False, 'timeout': 30}
        return options

    options.update(
        pool_size=config.get('DB_POOL_SIZE', 10),
        max_overflow=config.get('DB_MAX_OVERFLOW', 20),
        pool_timeout=config.get('DB_POOL_TIMEOUT', 30),
    )
    connect_args = {'connect_timeout': config.get('DB_CONNECT_TIMEOUT', 10)}
    if url.startswith('postgresql'):
        statement_timeout = config.get('DB_STATEMENT_TIMEOUT_MS')
        if statement_timeout:
            connect_args['options'] = f'-c statement_timeout={int(statement_timeout)}'
    options['connect_args'] = connect_args
    return options


def _build_engine(url, config):
    """Create an engine and enable foreign keys on SQLite."""
    new_engine = create_engine(url, **_engine_options(url, config))

    if new_engine.dialect.name == 'sqlite':
        @event.listens_for(new_engine, 'connect')
        def _enable_sqlite_foreign_keys(dbapi_connection, connection_record):
            cursor = dbapi_connection.cursor()
            cursor.execute('PRAGMA foreign_keys=ON')
            cursor.close()

    return new_engine


def _try_connect(url, config):
    """Return a verified engine for url, or raise the connection error."""
    candidate = _build_engine(url, config)
    try:
        with candidate.connect() as connection:
            connection.execute(text('SELECT 1'))
    except SQLAlchemyError:
        candidate.dispose()
        raise
    return candidate


def connect_engine(config):
    """
    Connect to the primary database, falling back to the local one.

    The primary database is attempted once plus DB_CONNECT_RETRIES more
    times, waiting DB_RETRY_DELAY seconds between attempts. When every
    attempt fails and LOCAL_DATABASE_URL is configured, the local database
    is used instead.

    Args:
        config: Mapping with the SQLALCHEMY_* and DB_* settings (app.config)

    Returns:
        Engine: connected SQLAlchemy engine

    Raises:
        SQLAlchemyError: If neither the primary nor the local database answers
    """
    primary_url = config['SQLALCHEMY_DATABASE_URI']
    retries = max(int(config.get('DB_CONNECT_RETRIES', 2)), 0)
    delay = float(config.get('DB_RETRY_DELAY', 1.0))
    last_error = None

    for attempt in range(1, retries + 2):
        try:
            logger.info(f"[DB] Connecting to primary database (attempt {attempt}/{retries + 1})")
            connected = _try_connect(primary_url, config)
            logger.info("[DB] Primary database connection successful")
            return connected
        except SQLAlchemyError as e:
            last_error = e
            logger.error(f"[DB] Primary database connection failed: {e}")
            if attempt <= retries and delay:
                time.sleep(delay)

    local_url = config.get('LOCAL_DATABASE_URL')
    if not local_url:
        raise last_error

    logger.warning("[DB] Max retries reached. Falling back to local database")
    try:
        connected = _try_connect(local_url, config)
    except SQLAlchemyError as e:
        logger.error(f"[DB] Local database connection failed: {e}")
        raise
    logger.info("[DB] Local database connection successful")
    return connected


def init_db(app):
    """Initialize database connection."""
    global engine, db_session

    engine = connect_engine(app.config)

    db_session = scoped_session(
        sessionmaker(autocommit=False, autoflush=False, bind=engine)
    )

    Base.query = db_session.query_property()

    # Register teardown
    @app.teardown_appcontext
    def shutdown_session(exception=None):
        """Close database session and rollback on error."""
        if exception:
            db_session.rollback()
        db_session.remove()


def create_schema():
    """Create all tables that do not exist yet."""
    # Models must be imported so their tables are registered on Base.metadata
    import retailflow.models  # noqa: F401
    Base.metadata.create_all(bind=engine)


def get_session():
    """Get database session."""
    return db_session
