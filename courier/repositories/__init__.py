from courier.repositories.order_repository import OrderRepository
from courier.repositories.reference_repository import (
    CityRepository,
    DeliveryTypeRepository,
    ItemTypeRepository,
    StoreRepository,
    ZoneRepository,
)
from courier.repositories.session_repository import SessionRepository
from courier.repositories.user_repository import UserRepository

__all__ = [
    "CityRepository",
    "DeliveryTypeRepository",
    "ItemTypeRepository",
    "OrderRepository",
    "SessionRepository",
    "StoreRepository",
    "UserRepository",
    "ZoneRepository",
]
