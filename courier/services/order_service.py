"""
Order Service
Handles the order lifecycle: create, read, list, update, cancel, delete.

Fees (all amounts in Decimal, rounded half-up to 2 places):
    delivery_fee      = city base fee (60.00 if the city can't be read)
                        + 10.00 per kg above the first kg
    cod_fee           = 1% of order_amount
    total_fee         = delivery_fee + cod_fee - promo_discount - discount
    amount_to_collect = order_amount + total_fee

Every read or write of an existing order is scoped to its owner.
"""

import math
import uuid
from decimal import ROUND_HALF_UP, Decimal

import structlog

from courier.errors import (
    AccessDenied,
    InvalidReference,
    NotFound,
    TransientStorageFailure,
    ValidationFailed,
    storage_errors,
)
from courier.models import Order
from courier.models.order import (
    ORDER_STATUS_CANCELLED,
    ORDER_STATUS_PENDING,
    ORDER_STATUSES,
    ORDER_TYPE_DELIVERY,
)
from courier.validators import ORDER_CREATE_RULES, ORDER_UPDATE_RULES, validate

logger = structlog.get_logger(__name__)

CONSIGNMENT_PREFIX = "CON"

CENT = Decimal("0.01")
ZERO = Decimal("0")
FALLBACK_BASE_DELIVERY_FEE = Decimal("60.00")
FREE_WEIGHT_KG = Decimal("1.0")
PER_KG_FEE = Decimal("10.0")
COD_FEE_RATE = Decimal("0.01")

DEFAULT_PAGE = 1
DEFAULT_PAGE_LENGTH = 10
MAX_PAGE_LENGTH = 100

# Fields a partial update may overwrite; order_amount is handled separately
UPDATABLE_FIELDS = (
    "merchant_order_id",
    "recipient_name",
    "recipient_phone",
    "recipient_address",
    "item_weight",
    "special_instruction",
)


def money(value):
    return Decimal(value).quantize(CENT, rounding=ROUND_HALF_UP)


def generate_consignment_id():
    return f"{CONSIGNMENT_PREFIX}{uuid.uuid4().hex.upper()}"


def calculate_delivery_fee(base_fee, item_weight):
    surcharge = max(ZERO, Decimal(item_weight) - FREE_WEIGHT_KG) * PER_KG_FEE
    return money(Decimal(base_fee) + surcharge)


def calculate_cod_fee(order_amount):
    return money(Decimal(order_amount) * COD_FEE_RATE)


def calculate_total_fee(delivery_fee, cod_fee, promo_discount=ZERO, discount=ZERO):
    return money(
        Decimal(delivery_fee) + Decimal(cod_fee) - Decimal(promo_discount) - Decimal(discount)
    )


def build_pagination(total, page, page_length):
    total_pages = math.ceil(total / page_length) if total else 0
    return {
        "total": total,
        "total_pages": total_pages,
        "current_page": page,
        "per_page": page_length,
        "last_page": total_pages,
    }


class OrderService:
    def __init__(self, orders, stores, cities, config):
        self.orders = orders
        self.stores = stores
        self.cities = cities
        self.config = config

    # --- fees -------------------------------------------------------------

    def base_delivery_fee(self, city_id):
        try:
            city = self.cities.get(city_id)
        except (NotFound, TransientStorageFailure) as e:
            logger.warning("City lookup failed, using fallback base fee",
                           city_id=city_id, error=e.message)
            return FALLBACK_BASE_DELIVERY_FEE
        return Decimal(city.base_delivery_fee)

    def apply_fees(self, order):
        """Recomputes delivery, COD and total fees from the order's own fields."""
        order.delivery_fee = calculate_delivery_fee(
            self.base_delivery_fee(order.recipient_city), order.item_weight
        )
        order.cod_fee = calculate_cod_fee(order.order_amount)
        order.total_fee = calculate_total_fee(
            order.delivery_fee, order.cod_fee, order.promo_discount, order.discount
        )

    # --- lookups ----------------------------------------------------------

    def _owned_order(self, consignment_id, user_id):
        with storage_errors():
            order = self.orders.get_by_consignment_id(consignment_id)
        if order is None:
            raise NotFound(
                "Order not found",
                detail=f"order with consignment ID '{consignment_id}' not found",
            )
        if order.user_id != user_id:
            raise AccessDenied()
        return order

    def get_order(self, consignment_id, user_id):
        return self._owned_order(consignment_id, user_id)

    def list_orders(self, user_id, status=None, page=DEFAULT_PAGE, page_length=DEFAULT_PAGE_LENGTH):
        """Returns (orders, pagination) for one page of the caller's orders."""
        if status and status not in ORDER_STATUSES:
            raise ValidationFailed(
                {"order_status": [f"The order status must be one of: {', '.join(ORDER_STATUSES)}."]}
            )
        page = page if page and page > 0 else DEFAULT_PAGE
        page_length = page_length if page_length and page_length > 0 else DEFAULT_PAGE_LENGTH
        page_length = min(page_length, MAX_PAGE_LENGTH)

        with storage_errors():
            orders, total = self.orders.list_for_owner(user_id, status or None, page, page_length)
        return orders, build_pagination(total, page, page_length)

    # --- writes -----------------------------------------------------------

    def create_order(self, payload, user_id):
        data = validate(payload, ORDER_CREATE_RULES)

        try:
            self.stores.get(data["store_id"])
        except NotFound as e:
            raise InvalidReference(
                {"store_id": ["The store field is required", "Wrong Store selected"]}
            ) from e

        order = Order(
            consignment_id=generate_consignment_id(),
            user_id=user_id,
            store_id=data["store_id"],
            merchant_order_id=data.get("merchant_order_id"),
            recipient_name=data["recipient_name"],
            recipient_phone=data["recipient_phone"],
            recipient_address=data["recipient_address"],
            recipient_city=data["recipient_city"],
            recipient_zone=data["recipient_zone"],
            recipient_area=data.get("recipient_area"),
            order_type=ORDER_TYPE_DELIVERY,
            delivery_type_id=data["delivery_type"],
            item_type=data["item_type"],
            item_quantity=data["item_quantity"],
            item_weight=data["item_weight"],
            item_description=data.get("item_description"),
            special_instruction=data.get("special_instruction"),
            order_amount=data["order_amount"],
            promo_discount=data.get("promo_discount", ZERO),
            discount=data.get("discount", ZERO),
            order_status=ORDER_STATUS_PENDING,
        )
        self.apply_fees(order)
        order.amount_to_collect = money(order.order_amount + order.total_fee)

        with storage_errors("consignment ID already exists"):
            self.orders.create(order)

        logger.info("Order created", consignment_id=order.consignment_id, user_id=user_id,
                    store_id=order.store_id, total_fee=str(order.total_fee))
        return order

    def update_order(self, payload, user_id):
        """
        Partial update: only supplied, non-empty fields overwrite. Supplying
        order_amount recomputes the fees and amount_to_collect.
        """
        data = validate(payload, ORDER_UPDATE_RULES)
        order = self._owned_order(data["consignment_id"], user_id)

        for field in UPDATABLE_FIELDS:
            if field in data:
                setattr(order, field, data[field])

        if "order_amount" in data:
            order.order_amount = data["order_amount"]
            self.apply_fees(order)
            if self.config.ACCUMULATE_AMOUNT_TO_COLLECT:
                # legacy behaviour: the new total fee is added on top
                order.amount_to_collect = money(Decimal(order.amount_to_collect) + order.total_fee)
            else:
                order.amount_to_collect = money(order.order_amount + order.total_fee)

        with storage_errors():
            self.orders.save(order)
        logger.info("Order updated", consignment_id=order.consignment_id, user_id=user_id,
                    fields=sorted(k for k in data if k != "consignment_id"))
        return order

    def update_order_status(self, consignment_id, user_id, status):
        if status not in ORDER_STATUSES:
            raise ValidationFailed(
                {"order_status": [f"The order status must be one of: {', '.join(ORDER_STATUSES)}."]}
            )
        order = self._owned_order(consignment_id, user_id)
        with storage_errors():
            updated = self.orders.update_status(order.id, status)
        if not updated:
            raise NotFound("Order not found", detail=f"order with ID {order.id} not found")
        logger.info("Order status changed", consignment_id=consignment_id, status=status)

    def cancel_order(self, consignment_id, user_id):
        self.update_order_status(consignment_id, user_id, ORDER_STATUS_CANCELLED)

    def delete_order(self, consignment_id, user_id):
        order = self._owned_order(consignment_id, user_id)
        with storage_errors():
            deleted = self.orders.soft_delete(order.id)
        if not deleted:
            raise NotFound("Order not found", detail=f"order with ID {order.id} not found")
        logger.info("Order deleted", consignment_id=consignment_id, user_id=user_id)
