from courier.extensions import db
from courier.repositories import (
    CityRepository,
    DeliveryTypeRepository,
    ItemTypeRepository,
    OrderRepository,
    SessionRepository,
    StoreRepository,
    UserRepository,
    ZoneRepository,
)
from courier.services.auth_service import AuthService
from courier.services.order_service import OrderService
from courier.services.reference_service import (
    CityService,
    DeliveryTypeService,
    ItemTypeService,
    StoreService,
    ZoneService,
)
from courier.services.session_service import SessionService
from courier.services.user_service import UserService


class Services:
    """Wires repositories into services; one instance per application."""

    def __init__(self, config, session=None):
        session = session if session is not None else db.session
        self.config = config

        users = UserRepository(session)
        user_sessions = SessionRepository(session)
        cities = CityRepository(session)

        self.users = UserService(users, user_sessions)
        self.sessions = SessionService(user_sessions, config)
        self.auth = AuthService(users, self.sessions)

        self.cities = CityService(cities)
        self.zones = ZoneService(ZoneRepository(session), cities)
        self.stores = StoreService(StoreRepository(session))
        self.item_types = ItemTypeService(ItemTypeRepository(session))
        self.delivery_types = DeliveryTypeService(DeliveryTypeRepository(session))

        self.orders = OrderService(OrderRepository(session), self.stores, self.cities, config)
