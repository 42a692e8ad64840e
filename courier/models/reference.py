"""
Reference data: cities, zones, stores, item types and delivery types.
"""

from decimal import Decimal

from courier.clock import utcnow
from courier.extensions import db

_pk = db.BigInteger().with_variant(db.Integer, "sqlite")


def _iso(value):
    return value.isoformat() if value else None


class City(db.Model):
    __tablename__ = "cities"

    id = db.Column(_pk, primary_key=True)
    name = db.Column(db.String(100), nullable=False, unique=True)
    base_delivery_fee = db.Column(db.Numeric(10, 2), nullable=False, default=Decimal("100.00"))
    created_at = db.Column(db.DateTime, nullable=False, default=utcnow)
    updated_at = db.Column(db.DateTime, nullable=False, default=utcnow, onupdate=utcnow)

    def to_dict(self):
        return {
            "id": self.id,
            "name": self.name,
            "base_delivery_fee": float(self.base_delivery_fee),
            "updated_at": _iso(self.updated_at),
        }


class Zone(db.Model):
    __tablename__ = "zones"
    __table_args__ = (db.UniqueConstraint("city_id", "name", name="uq_zones_city_name"),)

    id = db.Column(_pk, primary_key=True)
    city_id = db.Column(db.BigInteger, db.ForeignKey("cities.id"), nullable=False, index=True)
    name = db.Column(db.String(100), nullable=False)
    created_at = db.Column(db.DateTime, nullable=False, default=utcnow)
    updated_at = db.Column(db.DateTime, nullable=False, default=utcnow, onupdate=utcnow)

    def to_dict(self):
        return {
            "id": self.id,
            "city_id": self.city_id,
            "name": self.name,
            "created_at": _iso(self.created_at),
            "updated_at": _iso(self.updated_at),
        }


class Store(db.Model):
    __tablename__ = "stores"

    id = db.Column(_pk, primary_key=True)
    name = db.Column(db.String(255), nullable=False, unique=True)
    contact_phone = db.Column(db.String(20))
    address = db.Column(db.Text)
    created_at = db.Column(db.DateTime, nullable=False, default=utcnow)
    updated_at = db.Column(db.DateTime, nullable=False, default=utcnow, onupdate=utcnow)

    def to_dict(self):
        return {
            "id": self.id,
            "name": self.name,
            "contact_phone": self.contact_phone,
            "address": self.address,
            "updated_at": _iso(self.updated_at),
        }


class ItemType(db.Model):
    __tablename__ = "item_types"

    id = db.Column(_pk, primary_key=True)
    name = db.Column(db.String(50), nullable=False, unique=True)
    created_at = db.Column(db.DateTime, nullable=False, default=utcnow)
    updated_at = db.Column(db.DateTime, nullable=False, default=utcnow, onupdate=utcnow)

    def to_dict(self):
        return {
            "id": self.id,
            "name": self.name,
            "created_at": _iso(self.created_at),
            "updated_at": _iso(self.updated_at),
        }


class DeliveryType(db.Model):
    __tablename__ = "delivery_types"

    id = db.Column(_pk, primary_key=True)
    name = db.Column(db.String(50), nullable=False, unique=True)
    created_at = db.Column(db.DateTime, nullable=False, default=utcnow)
    updated_at = db.Column(db.DateTime, nullable=False, default=utcnow, onupdate=utcnow)

    def to_dict(self):
        return {
            "id": self.id,
            "name": self.name,
            "created_at": _iso(self.created_at),
            "updated_at": _iso(self.updated_at),
        }
