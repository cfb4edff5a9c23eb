import os
from datetime import timedelta
from dotenv import load_dotenv

load_dotenv()

DEFAULT_SECRET_KEY = "dev-secret"


def _database_url(default=None):
    url = os.getenv("DATABASE_URL") or default
    # Heroku/old url fix
    if url and url.startswith("postgres://"):
        url = url.replace("postgres://", "postgresql://", 1)
    return url


class BaseConfig:
    SECRET_KEY = os.getenv("SECRET_KEY", DEFAULT_SECRET_KEY)
    SQLALCHEMY_TRACK_MODIFICATIONS = False
    SQLALCHEMY_DATABASE_URI = _database_url("sqlite:///mindsync.db")
    # "database" (SQLAlchemy) or "memory" (process-local dicts)
    STORAGE_BACKEND = os.getenv("STORAGE_BACKEND", "database").lower()
    # Keep CREATE_DB False in production
    CREATE_DB = False

    # Server-side sessions, see extensions.server_session
    SESSION_COOKIE_NAME = "sessionId"
    SESSION_COOKIE_HTTPONLY = True
    SESSION_COOKIE_SAMESITE = "Lax"
    SESSION_COOKIE_SECURE = False
    SESSION_PERMANENT = True
    PERMANENT_SESSION_LIFETIME = timedelta(days=1)
    SESSION_SQLALCHEMY_TABLE = "sessions"

    # Origin of the single-page frontend
    CORS_ORIGIN = os.getenv("CORS_ORIGIN", "http://localhost:3000")

    LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
    LOG_FORMAT = os.getenv("LOG_FORMAT", "text")  # "json" or "text"


class ProdConfig(BaseConfig):
    SESSION_COOKIE_SECURE = True
    LOG_FORMAT = os.getenv("LOG_FORMAT", "json")


class DevConfig(BaseConfig):
    DEBUG = True
    CREATE_DB = True
    SQLALCHEMY_DATABASE_URI = _database_url("sqlite:///dev.db")


class TestConfig(BaseConfig):
    TESTING = True
    SECRET_KEY = "test-secret-key-for-sessions"
    SQLALCHEMY_DATABASE_URI = "sqlite:///:memory:"
    STORAGE_BACKEND = "database"
    CREATE_DB = True
    # One session store per app instance
    SESSION_TYPE = "cachelib"

