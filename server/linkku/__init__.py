# server/linkku/__init__.py

import logging
import os
import uuid

from flask import Flask, g, request
from flask_cors import CORS
from sqlalchemy import text
from werkzeug.exceptions import HTTPException

from .config import Config, config_by_name
from .errors import ApiError
from .extensions import db, migrate, jwt, limiter
from .utils.helpers import utcnow
from .utils.responses import ApiResponse

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)

HTTP_ERROR_CODES = {
    400: "BAD_REQUEST",
    401: "AUTH_REQUIRED",
    403: "PERMISSION_DENIED",
    404: "NOT_FOUND",
    405: "METHOD_NOT_ALLOWED",
    409: "CONFLICT",
    413: "FILE_TOO_LARGE",
    429: "RATE_LIMITED",
}


def create_app(config_class=Config):
    """Create and configure the Flask application"""
    if isinstance(config_class, str):
        config_class = config_by_name.get(config_class, Config)

    app = Flask(__name__)
    app.config.from_object(config_class)
    app.api_response = ApiResponse()

    initialize_extensions(app)

    with app.app_context():
        initialize_database(app)

    register_middleware(app)
    register_blueprints(app)
    register_error_handlers(app)
    register_root_endpoints(app)

    from .commands import register_commands
    register_commands(app)

    logger.info(f"Application initialized in {app.config.get('FLASK_ENV', 'production')} mode")

    return app


def initialize_extensions(app):
    """Initialize Flask extensions"""
    db.init_app(app)
    migrate.init_app(app, db, directory=os.path.join(os.path.dirname(__file__), "migrations"))
    jwt.init_app(app)
    limiter.init_app(app)

    cors_origins = list(filter(None, dict.fromkeys(app.config.get("CORS_ORIGINS", []))))

    CORS(app,
         resources={r"/api/*": {"origins": cors_origins}},
         supports_credentials=True,
         allow_headers=['Content-Type', 'Authorization', 'X-Requested-With'],
         methods=['GET', 'POST', 'PUT', 'DELETE', 'OPTIONS', 'PATCH'],
         max_age=3600)

    register_jwt_callbacks()

    logger.info(f"CORS initialized with origins: {cors_origins}")


def register_jwt_callbacks():
    """Answer token problems with the standard error envelope"""
    from .services.redis_service import RedisService

    def auth_error(message: str):
        return ApiResponse.error(message, 401, "AUTH_REQUIRED")

    @jwt.unauthorized_loader
    def missing_token(reason):
        return auth_error("Authentication required")

    @jwt.invalid_token_loader
    def invalid_token(reason):
        return auth_error("Invalid token")

    @jwt.expired_token_loader
    def expired_token(jwt_header, jwt_payload):
        return auth_error("Session expired. Please log in again.")

    @jwt.revoked_token_loader
    def revoked_token(jwt_header, jwt_payload):
        return auth_error("Session has been revoked. Please log in again.")

    @jwt.token_in_blocklist_loader
    def is_token_revoked(jwt_header, jwt_payload):
        return RedisService().is_token_blacklisted(jwt_payload.get("jti", ""))


def initialize_database(app):
    """Create tables that do not exist yet; migrations handle changes"""
    from . import models  # noqa: F401  registers every table

    try:
        with db.engine.connect() as conn:
            conn.execute(text("SELECT 1"))
        db.create_all()
        logger.info("Database tables created/verified")
    except Exception as e:
        logger.error(f"Database initialization error: {e}", exc_info=True)
        if app.config.get("FLASK_ENV") == "production":
            raise


def register_middleware(app):
    """Register application middleware"""

    @app.before_request
    def assign_request_id():
        g.request_id = request.headers.get("X-Request-ID") or str(uuid.uuid4())

        if app.config.get("FLASK_ENV") == "development":
            logger.debug(f"{request.method} {request.path} from {request.remote_addr}")

    @app.after_request
    def add_security_headers(response):
        response.headers["X-Content-Type-Options"] = "nosniff"
        response.headers["X-Frame-Options"] = "DENY"
        response.headers["Referrer-Policy"] = "strict-origin-when-cross-origin"

        if app.config.get("FLASK_ENV") == "production" and request.is_secure:
            response.headers["Strict-Transport-Security"] = "max-age=31536000; includeSubDomains"

        request_id = getattr(g, "request_id", None)
        if request_id:
            response.headers["X-Request-ID"] = request_id

        return response


def register_blueprints(app):
    """Register all application blueprints"""
    from .routes import (
        auth_bp,
        profile_bp,
        linktree_bp,
        links_bp,
        categories_bp,
        articles_bp,
        tracking_bp,
        admin_users_bp,
        admin_bp,
        uploads_bp,
        sitemap_bp,
    )

    app.register_blueprint(auth_bp, url_prefix="/api/auth")
    app.register_blueprint(profile_bp, url_prefix="/api")
    app.register_blueprint(linktree_bp, url_prefix="/api")
    app.register_blueprint(links_bp, url_prefix="/api/links")
    app.register_blueprint(categories_bp, url_prefix="/api")
    app.register_blueprint(articles_bp, url_prefix="/api")
    app.register_blueprint(tracking_bp, url_prefix="/api/track")
    app.register_blueprint(admin_users_bp, url_prefix="/api/admin/users")
    app.register_blueprint(admin_bp, url_prefix="/api/admin")
    app.register_blueprint(uploads_bp)
    app.register_blueprint(sitemap_bp)

    logger.info("Blueprints registered")


def register_error_handlers(app):
    """Map known errors onto the JSON envelope; everything else is a 500"""

    @app.errorhandler(ApiError)
    def handle_api_error(error):
        db.session.rollback()
        if error.status_code >= 500:
            logger.error(f"{error.code}: {error.message}")
        else:
            logger.info(f"{request.method} {request.path} -> {error.status_code} {error.code}")

        payload = error.to_dict()
        return ApiResponse.error(payload["message"], error.status_code, payload["code"], payload.get("fields"))

    @app.errorhandler(HTTPException)
    def handle_http_exception(error):
        if error.code == 429:
            message = "Rate limit exceeded. Please try again later"
        elif error.code == 405:
            message = f"The {request.method} method is not allowed for this endpoint"
        else:
            message = error.description or error.name

        return ApiResponse.error(message, error.code, HTTP_ERROR_CODES.get(error.code, error.name.upper()))

    @app.errorhandler(Exception)
    def unhandled_exception(error):
        db.session.rollback()
        logger.error(f"Unhandled exception: {error}", exc_info=True)

        return ApiResponse.error("An unexpected error occurred", 500, "INTERNAL_ERROR")


def register_root_endpoints(app):
    """Register root-level endpoints"""
    from .services.redis_service import RedisService

    @app.route("/")
    def index():
        return app.api_response.success(data={
            "service": app.config.get("SERVICE_NAME"),
            "version": app.config.get("VERSION"),
            "status": "online",
            "timestamp": utcnow().isoformat() + "Z",
            "environment": app.config.get("FLASK_ENV", "production"),
        })

    @app.route("/health")
    def health_check():
        checks = {}
        status = "healthy"

        try:
            db.session.execute(text("SELECT 1"))
            checks["database"] = {"status": "healthy"}
        except Exception as e:
            db.session.rollback()
            logger.error(f"Database health check failed: {e}")
            checks["database"] = {"status": "unhealthy"}
            status = "degraded"

        if app.config.get("REDIS_URL"):
            if RedisService().ping():
                checks["redis"] = {"status": "healthy"}
            else:
                checks["redis"] = {"status": "unhealthy"}
                status = "degraded"
        else:
            checks["redis"] = {"status": "not_configured"}

        return app.api_response.success(
            data={
                "status": status,
                "service": app.config.get("SERVICE_NAME"),
                "timestamp": utcnow().isoformat() + "Z",
                "checks": checks,
            },
            status=200 if status == "healthy" else 503,
        )

    @app.route("/ping")
    def ping():
        return app.api_response.success(data={"pong": True})
