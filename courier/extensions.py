from flask import current_app
from flask_jwt_extended import JWTManager
from flask_sqlalchemy import SQLAlchemy

db = SQLAlchemy()
jwt = JWTManager()

REPLICA_BIND = "replica"


def read_engine():
    """Engine for read-heavy queries; the primary when no replica is configured."""
    engines = db.engines
    return engines.get(REPLICA_BIND) or engines[None]


def get_services():
    """Service registry built by create_app for the current application."""
    return current_app.extensions["courier"]
