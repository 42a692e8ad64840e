"""
Schema migrations.

Applied versions are recorded in `schema_migrations`. Pending migrations run
in ascending version order, each inside its own transaction together with
its record, so a version is applied exactly once.
"""

import structlog
from sqlalchemy import insert, select

from courier.clock import utcnow
from courier.extensions import db
from courier.models import DeliveryType, ItemType, MigrationRecord

logger = structlog.get_logger(__name__)


class Migration:
    def __init__(self, version, up):
        self.version = version
        self.up = up

    def __repr__(self):
        return f"<Migration {self.version}>"


def _initial_schema(connection):
    tables = [
        table for name, table in db.metadata.tables.items()
        if name != MigrationRecord.__tablename__
    ]
    db.metadata.create_all(bind=connection, tables=tables)


def _seed_reference_data(connection):
    now = utcnow()
    connection.execute(
        insert(DeliveryType.__table__),
        [
            {"name": "Normal Delivery", "created_at": now, "updated_at": now},
            {"name": "On Demand Delivery", "created_at": now, "updated_at": now},
        ],
    )
    connection.execute(
        insert(ItemType.__table__),
        [
            {"name": "Parcel", "created_at": now, "updated_at": now},
            {"name": "Document", "created_at": now, "updated_at": now},
        ],
    )


MIGRATIONS = [
    Migration("0001_initial_schema", _initial_schema),
    Migration("0002_seed_reference_data", _seed_reference_data),
]


def applied_versions(engine):
    with engine.connect() as connection:
        return set(connection.execute(select(MigrationRecord.version)).scalars())


def run_migrations(engine, migrations=None):
    """Applies pending migrations and returns the versions applied."""
    migrations = sorted(migrations if migrations is not None else MIGRATIONS,
                        key=lambda m: m.version)
    MigrationRecord.__table__.create(bind=engine, checkfirst=True)
    done = applied_versions(engine)

    applied = []
    for migration in migrations:
        if migration.version in done:
            logger.debug("Skipping already applied migration", version=migration.version)
            continue

        logger.info("Applying migration", version=migration.version)
        with engine.begin() as connection:
            migration.up(connection)
            connection.execute(
                insert(MigrationRecord.__table__).values(
                    version=migration.version, applied_at=utcnow()
                )
            )
        applied.append(migration.version)
        logger.info("Applied migration", version=migration.version)

    return applied
