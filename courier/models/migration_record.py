from courier.clock import utcnow
from courier.extensions import db


class MigrationRecord(db.Model):
    __tablename__ = "schema_migrations"

    version = db.Column(db.String(255), primary_key=True)
    applied_at = db.Column(db.DateTime, nullable=False, default=utcnow)
