from courier.models.migration_record import MigrationRecord
from courier.models.order import Order
from courier.models.reference import City, DeliveryType, ItemType, Store, Zone
from courier.models.user import User
from courier.models.user_session import UserSession

__all__ = [
    "City",
    "DeliveryType",
    "ItemType",
    "MigrationRecord",
    "Order",
    "Store",
    "User",
    "UserSession",
    "Zone",
]
