"""
Courier order-management service: Flask application.
"""

import time
from datetime import datetime, timezone

import click
import structlog
from flasgger import Swagger
from flask import Flask, g, jsonify, request
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from werkzeug.exceptions import HTTPException

from courier.config import Config
from courier.errors import CourierError, StartupFailure
from courier.extensions import db, jwt
from courier.logger import setup_logging
from courier.migrations import run_migrations
from courier.responses import error_response
from courier.routes import register_blueprints
from courier.services import Services

logger = structlog.get_logger(__name__)

SWAGGER_CONFIG = {
    "headers": [],
    "specs": [
        {
            "endpoint": 'apispec_1',
            "route": '/apispec_1.json',
            "rule_filter": lambda rule: True,
            "model_filter": lambda tag: True,
        }
    ],
    "static_url_path": "/flasgger_static",
    "swagger_ui": True,
    "specs_route": "/apidocs/"
}

SWAGGER_TEMPLATE = {
    "info": {
        "title": "Courier Order Management API",
        "version": "1.0.0",
    },
    "securityDefinitions": {
        "Bearer": {
            "type": "apiKey",
            "name": "Authorization",
            "in": "header",
            "description": "Bearer <access token>",
        }
    },
}


def register_error_handlers(app):
    @app.errorhandler(CourierError)
    def handle_courier_error(e):
        if e.status_code >= 500:
            logger.error("Request failed", path=request.path, error=type(e).__name__,
                         detail=e.detail if e.expose_detail else None)
        return error_response(e.message, e.status_code, e.payload_errors())

    @app.errorhandler(HTTPException)
    def handle_http_error(e):
        return error_response(e.description or e.name, e.code)

    @app.errorhandler(Exception)
    def handle_unexpected_error(e):
        logger.exception("Unhandled exception", path=request.path)
        return error_response("Internal server error", 500, [str(e)])


def register_commands(app):
    @app.cli.command("migrate")
    def migrate_command():
        """Apply pending schema migrations."""
        applied = run_migrations(db.engine)
        click.echo(f"Applied {len(applied)} migration(s): {', '.join(applied) or '-'}")

    @app.cli.command("cleanup-sessions")
    def cleanup_sessions_command():
        """Delete expired user sessions."""
        deleted = app.extensions["courier"].sessions.cleanup_expired_sessions()
        click.echo(f"Deleted {deleted} expired session(s)")


def create_app(config=None):
    config = config or Config()
    log = setup_logging(config.SERVICE_NAME, config.LOG_LEVEL, config.LOG_FORMAT)

    app = Flask(__name__)
    app.config.update(config.flask_settings())

    # Initialize Extensions
    db.init_app(app)
    jwt.init_app(app)
    Swagger(app, config=SWAGGER_CONFIG, template=SWAGGER_TEMPLATE)

    if config.AUTO_MIGRATE:
        with app.app_context():
            try:
                applied = run_migrations(db.engine)
            except SQLAlchemyError as e:
                log.error("Migration failed", error=str(e))
                raise StartupFailure("failed to run database migrations", detail=str(e)) from e
        log.info("Migrations complete", applied=applied)

    app.extensions["courier"] = Services(config)

    register_error_handlers(app)
    register_blueprints(app)
    register_commands(app)

    @app.before_request
    def start_timer():
        g.request_started = time.perf_counter()

    @app.after_request
    def log_request(response):
        started = g.get("request_started")
        duration_ms = round((time.perf_counter() - started) * 1000, 2) if started else None
        logger.info("Request handled", method=request.method, path=request.path,
                    status=response.status_code, duration_ms=duration_ms)
        return response

    # --- Health check ---------------------------------------------------
    @app.route("/health")
    def health():
        try:
            db.session.execute(text("SELECT 1"))
            status, code = "healthy", 200
        except SQLAlchemyError as e:
            logger.warning("Health check failed", error=str(e))
            status, code = "unhealthy", 503
        return jsonify({
            "status": status,
            "service": config.SERVICE_NAME,
            "timestamp": datetime.now(timezone.utc).isoformat(),
        }), code

    log.info("Application created", port=config.PORT,
             replica=bool(config.DATABASE_REPLICA_URL))
    return app


if __name__ == "__main__":
    config = Config()
    app = create_app(config)
    app.run(host="0.0.0.0", port=config.PORT)
