from courier.routes.auth import auth_bp
from courier.routes.orders import order_bp
from courier.routes.reference import cities_bp, delivery_types_bp, item_types_bp, stores_bp
from courier.routes.users import user_bp
from courier.routes.zones import zone_bp

API_PREFIX = "/api/v1"


def register_blueprints(app):
    app.register_blueprint(auth_bp, url_prefix=f"{API_PREFIX}/auth")
    app.register_blueprint(user_bp, url_prefix=f"{API_PREFIX}/users")
    app.register_blueprint(order_bp, url_prefix=f"{API_PREFIX}/orders")
    app.register_blueprint(cities_bp, url_prefix=f"{API_PREFIX}/cities")
    app.register_blueprint(zone_bp, url_prefix=f"{API_PREFIX}/zones")
    app.register_blueprint(stores_bp, url_prefix=f"{API_PREFIX}/stores")
    app.register_blueprint(item_types_bp, url_prefix=f"{API_PREFIX}/item-types")
    app.register_blueprint(delivery_types_bp, url_prefix=f"{API_PREFIX}/delivery-types")
