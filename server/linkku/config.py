# server/linkku/config.py

import os
import tempfile
from datetime import timedelta


def _env_bool(name: str, default: bool = False) -> bool:
    value = os.environ.get(name)
    if value is None:
        return default
    return value.strip().lower() in ("1", "true", "yes", "on")


def _database_url() -> str:
    url = os.environ.get("DATABASE_URL", "sqlite:///linkku.db")
    # Heroku/Render style URLs
    if url.startswith("postgres://"):
        url = url.replace("postgres://", "postgresql://", 1)
    return url


class Config:
    FLASK_ENV = "production"
    SERVICE_NAME = "linkku-backend"
    VERSION = "1.0.0"

    SECRET_KEY = os.environ.get("SECRET_KEY", "change-me-in-production")

    # Database
    SQLALCHEMY_DATABASE_URI = _database_url()
    SQLALCHEMY_TRACK_MODIFICATIONS = False
    SQLALCHEMY_ENGINE_OPTIONS = {"pool_pre_ping": True}

    # JWT
    JWT_SECRET_KEY = os.environ.get("JWT_SECRET_KEY", SECRET_KEY)
    JWT_ACCESS_TOKEN_EXPIRES = timedelta(hours=int(os.environ.get("JWT_ACCESS_TOKEN_HOURS", 24)))
    JWT_TOKEN_LOCATION = ["headers"]

    # Redis (optional)
    REDIS_URL = os.environ.get("REDIS_URL")
    CACHE_TTL_LINKTREE = int(os.environ.get("CACHE_TTL_LINKTREE", 300))
    CACHE_TTL_BLACKLIST = 86400 * 2

    # Rate limiting
    RATELIMIT_ENABLED = True
    RATELIMIT_STORAGE_URI = os.environ.get("RATELIMIT_STORAGE_URI", REDIS_URL or "memory://")
    RATELIMIT_HEADERS_ENABLED = True

    # URLs
    PUBLIC_BASE_URL = os.environ.get("PUBLIC_BASE_URL", "https://linkku.web.id")
    CORS_ORIGINS = [
        origin.strip()
        for origin in os.environ.get(
            "CORS_ORIGINS", "http://localhost:3000,https://linkku.web.id"
        ).split(",")
        if origin.strip()
    ]

    # Uploads
    UPLOAD_FOLDER = os.environ.get(
        "UPLOAD_FOLDER",
        os.path.join(os.path.dirname(os.path.dirname(os.path.abspath(__file__))), "public", "uploads"),
    )
    MAX_UPLOAD_SIZE = int(os.environ.get("MAX_UPLOAD_SIZE", 5 * 1024 * 1024))
    # Multipart overhead on top of the file ceiling
    MAX_CONTENT_LENGTH = MAX_UPLOAD_SIZE + 1024 * 1024

    # Pagination
    DEFAULT_ADMIN_PAGE_SIZE = 10
    DEFAULT_PUBLIC_PAGE_SIZE = 6
    MAX_PAGE_SIZE = 100

    # Reserved linktree slugs (top-level frontend routes)
    RESERVED_SLUGS = {
        "admin", "api", "articles", "dashboard", "login", "register",
        "superadmin", "uploads", "sitemap", "static", "health", "ping",
    }


class DevelopmentConfig(Config):
    FLASK_ENV = "development"
    DEBUG = True


class TestingConfig(Config):
    FLASK_ENV = "testing"
    TESTING = True
    SQLALCHEMY_DATABASE_URI = "sqlite:///:memory:"
    SQLALCHEMY_ENGINE_OPTIONS = {}
    JWT_SECRET_KEY = "test-jwt-secret-key-that-is-long-enough"
    SECRET_KEY = "test-secret-key"
    REDIS_URL = None
    RATELIMIT_ENABLED = False
    RATELIMIT_STORAGE_URI = "memory://"
    UPLOAD_FOLDER = os.path.join(tempfile.gettempdir(), "linkku-test-uploads")


class ProductionConfig(Config):
    FLASK_ENV = "production"
    DEBUG = False
    PREFERRED_URL_SCHEME = "https"
    SESSION_COOKIE_SECURE = _env_bool("SESSION_COOKIE_SECURE", True)


config_by_name = {
    "development": DevelopmentConfig,
    "testing": TestingConfig,
    "production": ProductionConfig,
}
