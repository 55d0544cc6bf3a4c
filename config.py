"""Configuration module for Flask application."""
import os
from dotenv import load_dotenv

# Load environment variables from .env file
load_dotenv()


class Config:
    """Base configuration class."""

    # Flask
    SECRET_KEY = os.getenv('SECRET_KEY', 'dev-secret-key-change-in-production')
    DEBUG = os.getenv('FLASK_DEBUG', '1') == '1'
    ENV = os.getenv('FLASK_ENV', 'development')
    JSON_SORT_KEYS = False

    # Authentication (bearer tokens)
    JWT_SECRET = os.getenv('JWT_SECRET', 'default_secret')
    JWT_EXPIRES_SECONDS = int(os.getenv('JWT_EXPIRES_SECONDS', '3600'))

    # Session store (role of the last logged-in user)
    SESSION_FILE = os.getenv('SESSION_FILE', os.path.join(os.getcwd(), 'session.json'))

    # Database - primary (remote) connection
    # Priority: DATABASE_URL > DB_*
    DATABASE_URL = os.getenv('DATABASE_URL')

    if not DATABASE_URL:
        DB_HOST = os.getenv('DB_HOST', 'localhost')
        DB_PORT = os.getenv('DB_PORT', '5432')
        DB_NAME = os.getenv('DB_NAME', 'retailflow')
        DB_USER = os.getenv('DB_USERNAME') or os.getenv('DB_USER', 'retailflow')
        DB_PASSWORD = os.getenv('DB_PASSWORD', 'retailflow')

        DATABASE_URL = (
            f"postgresql://{DB_USER}:{DB_PASSWORD}"
            f"@{DB_HOST}:{DB_PORT}/{DB_NAME}"
        )

    # Database - local fallback, used when the primary is unreachable
    LOCAL_DATABASE_URL = os.getenv('LOCAL_DATABASE_URL')

    # Connection retries before falling back to the local database
    DB_CONNECT_RETRIES = int(os.getenv('DB_CONNECT_RETRIES', '2'))
    DB_RETRY_DELAY = float(os.getenv('DB_RETRY_DELAY', '1.0'))  # seconds

    # Timeouts
    DB_CONNECT_TIMEOUT = int(os.getenv('DB_CONNECT_TIMEOUT', '10'))  # seconds
    DB_STATEMENT_TIMEOUT_MS = int(os.getenv('DB_STATEMENT_TIMEOUT_MS', '15000'))
    DB_POOL_SIZE = int(os.getenv('DB_POOL_SIZE', '10'))
    DB_MAX_OVERFLOW = int(os.getenv('DB_MAX_OVERFLOW', '20'))
    DB_POOL_TIMEOUT = int(os.getenv('DB_POOL_TIMEOUT', '30'))

    # SQLAlchemy
    SQLALCHEMY_DATABASE_URI = DATABASE_URL
    SQLALCHEMY_ECHO = os.getenv('SQLALCHEMY_ECHO', 'false').lower() == 'true'

    # Uploads (local disk pass-through)
    UPLOAD_FOLDER = os.getenv('UPLOAD_FOLDER', os.path.join(os.getcwd(), 'uploads'))
    MAX_CONTENT_LENGTH = int(os.getenv('MAX_UPLOAD_SIZE', 5 * 1024 * 1024))  # 5MB
    ALLOWED_EXTENSIONS = {'jpg', 'jpeg', 'png', 'gif', 'webp'}

    # CORS - comma separated list, '*' allows any origin
    CORS_ORIGINS = os.getenv('CORS_ORIGINS', '*')

    # Redis cache for reports
    REDIS_URL = os.getenv('REDIS_URL', 'redis://localhost:6379/0')
    CACHE_ENABLED = os.getenv('CACHE_ENABLED', 'true').lower() == 'true'
    CACHE_DEFAULT_TTL = int(os.getenv('CACHE_DEFAULT_TTL', '60'))  # seconds
    CACHE_REPORTS_TTL = int(os.getenv('CACHE_REPORTS_TTL', '300'))
    CACHE_KEY_PREFIX = os.getenv('CACHE_KEY_PREFIX', 'retailflow')

    # Error tracking (production only)
    SENTRY_DSN = os.getenv('SENTRY_DSN')


class TestConfig(Config):
    """Configuration used by the test suite."""

    TESTING = True
    DEBUG = False
    ENV = 'testing'
    SQLALCHEMY_DATABASE_URI = os.getenv('TEST_DATABASE_URL', 'sqlite:///retailflow-test.db')
    LOCAL_DATABASE_URL = None
    DB_CONNECT_RETRIES = 0
    DB_RETRY_DELAY = 0
    SQLALCHEMY_ECHO = False
    CACHE_ENABLED = False
    JWT_SECRET = 'test-secret'
