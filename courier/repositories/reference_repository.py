from sqlalchemy import select

from courier.models import City, DeliveryType, ItemType, Store, Zone
from courier.repositories.base import NamedRepository, Repository


class CityRepository(NamedRepository):
    model = City


class StoreRepository(NamedRepository):
    model = Store


class ItemTypeRepository(NamedRepository):
    model = ItemType


class DeliveryTypeRepository(NamedRepository):
    model = DeliveryType


class ZoneRepository(Repository):
    model = Zone

    def get_by_name_and_city(self, name, city_id):
        statement = select(Zone).where(Zone.name == name, Zone.city_id == city_id)
        return self._read(statement).scalar_one_or_none()

    def list_by_city(self, city_id, limit, offset):
        statement = (
            select(Zone)
            .where(Zone.city_id == city_id)
            .order_by(Zone.id)
            .limit(limit)
            .offset(offset)
        )
        return list(self._read(statement).scalars())
