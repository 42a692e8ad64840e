"""
Reference data services: cities, stores, zones, item types, delivery types.

All of them are create/read/update/delete with a uniqueness check on the
name; zones are unique per city and must point at an existing city.
"""

from decimal import Decimal

from courier.errors import Conflict, InvalidReference, NotFound, storage_errors
from courier.models import City, DeliveryType, ItemType, Store, Zone
from courier.validators import (
    CITY_RULES,
    NAME_RULES,
    STORE_RULES,
    ZONE_CREATE_RULES,
    validate,
)

DEFAULT_BASE_DELIVERY_FEE = Decimal("100.00")


class ReferenceService:
    label = "record"
    model = None
    create_rules = NAME_RULES

    def __init__(self, repository):
        self.repository = repository

    @property
    def update_rules(self):
        return self.create_rules

    def _duplicate_message(self, name):
        return f"{self.label} with name '{name}' already exists"

    def _ensure_unique(self, name, current=None):
        with storage_errors():
            existing = self.repository.get_by_name(name)
        if existing is not None and (current is None or existing.id != current.id):
            raise Conflict(self._duplicate_message(name))

    def build(self, data):
        return self.model(**data)

    def apply(self, instance, data):
        for field, value in data.items():
            setattr(instance, field, value)

    def create(self, payload):
        data = validate(payload, self.create_rules)
        self._ensure_unique(data["name"])
        instance = self.build(data)
        with storage_errors(self._duplicate_message(data["name"])):
            self.repository.create(instance)
        return instance

    def get(self, id):
        with storage_errors():
            instance = self.repository.get_by_id(id)
        if instance is None:
            raise NotFound(f"{self.label} not found", detail=f"{self.label} with ID {id} not found")
        return instance

    def list(self, limit, offset):
        with storage_errors():
            return self.repository.list(limit, offset)

    def update(self, id, payload):
        instance = self.get(id)
        data = validate(payload, self.update_rules)
        if data["name"] != instance.name:
            self._ensure_unique(data["name"], current=instance)
        self.apply(instance, data)
        with storage_errors(self._duplicate_message(data["name"])):
            self.repository.save(instance)
        return instance

    def delete(self, id):
        instance = self.get(id)
        with storage_errors():
            self.repository.delete_by_id(instance.id)


class CityService(ReferenceService):
    label = "city"
    model = City
    create_rules = CITY_RULES

    def build(self, data):
        data.setdefault("base_delivery_fee", DEFAULT_BASE_DELIVERY_FEE)
        return City(**data)

    def get_by_name(self, name):
        with storage_errors():
            city = self.repository.get_by_name(name)
        if city is None:
            raise NotFound("City not found", detail=f"city with name '{name}' not found")
        return city


class StoreService(ReferenceService):
    label = "store"
    model = Store
    create_rules = STORE_RULES

    @property
    def update_rules(self):
        # contact phone may be left out on update
        return [
            (field, kind, required and field != "contact_phone", constraints)
            for field, kind, required, constraints in STORE_RULES
        ]


class ItemTypeService(ReferenceService):
    label = "item type"
    model = ItemType


class DeliveryTypeService(ReferenceService):
    label = "delivery type"
    model = DeliveryType


class ZoneService(ReferenceService):
    label = "zone"
    model = Zone
    create_rules = ZONE_CREATE_RULES
    update_rules = [("name", "str", True, {"max": 100})]

    def __init__(self, repository, cities):
        super().__init__(repository)
        self.cities = cities

    def _duplicate_message(self, name):
        return f"zone with name '{name}' already exists in this city"

    def _ensure_unique(self, name, current=None, city_id=None):
        city_id = current.city_id if current is not None else city_id
        with storage_errors():
            existing = self.repository.get_by_name_and_city(name, city_id)
        if existing is not None and (current is None or existing.id != current.id):
            raise Conflict(self._duplicate_message(name))

    def _require_city(self, city_id):
        with storage_errors():
            city = self.cities.get_by_id(city_id)
        if city is None:
            raise InvalidReference(
                {"city_id": [f"city with ID {city_id} does not exist"]}
            )
        return city

    def create(self, payload):
        data = validate(payload, self.create_rules)
        self._require_city(data["city_id"])
        self._ensure_unique(data["name"], city_id=data["city_id"])
        zone = Zone(**data)
        with storage_errors(self._duplicate_message(data["name"])):
            self.repository.create(zone)
        return zone

    def list_by_city(self, city_id, limit, offset):
        with storage_errors():
            city = self.cities.get_by_id(city_id)
            if city is None:
                raise NotFound("city not found", detail=f"city with ID {city_id} not found")
            return self.repository.list_by_city(city_id, limit, offset)
