import os
import shutil
import tempfile
import unittest
from concurrent.futures import ThreadPoolExecutor
from decimal import Decimal

from sqlalchemy import select

from courier.errors import AccessDenied, InvalidReference, NotFound, ValidationFailed
from courier.extensions import db
from courier.models import Order
from courier.validators import PHONE_MESSAGE
from tests.base import CourierTestCase


class TestOrderService(CourierTestCase):
    def setUp(self):
        super().setUp()
        self.owner = self.create_user()
        self.other = self.create_user()
        self.city = self.create_city("Dhaka", 80.0)
        self.store = self.create_store("S1")
        self.orders = self.services.orders

    def create_order(self, user=None, **overrides):
        user = user or self.owner
        payload = self.order_payload(self.store.id, self.city.id, **overrides)
        return self.orders.create_order(payload, user.id)

    def test_create_order_computes_fees(self):
        order = self.create_order()

        self.assertTrue(order.consignment_id.startswith("CON"))
        self.assertEqual(order.delivery_fee, Decimal("95.00"))
        self.assertEqual(order.cod_fee, Decimal("5.00"))
        self.assertEqual(order.total_fee, Decimal("100.00"))
        self.assertEqual(order.amount_to_collect, Decimal("600.00"))
        self.assertEqual(order.order_status, "pending")
        self.assertEqual(order.order_type, "delivery")

    def test_discounts_reduce_total_fee(self):
        order = self.create_order(promo_discount=10, discount=5)
        self.assertEqual(order.total_fee, Decimal("85.00"))
        self.assertEqual(order.amount_to_collect, Decimal("585.00"))

    def test_unknown_city_uses_fallback_base_fee(self):
        order = self.create_order(recipient_city=9999)
        # 60.00 fallback + 1.5kg surcharge
        self.assertEqual(order.delivery_fee, Decimal("75.00"))
        self.assertEqual(order.total_fee, Decimal("80.00"))
        self.assertEqual(order.amount_to_collect, Decimal("580.00"))

    def test_unknown_store_is_invalid_reference(self):
        payload = self.order_payload(9999, self.city.id)
        with self.assertRaises(InvalidReference) as ctx:
            self.orders.create_order(payload, self.owner.id)
        self.assertEqual(ctx.exception.errors, {
            "store_id": ["The store field is required", "Wrong Store selected"],
        })

    def test_validation_errors_are_collected_per_field(self):
        payload = self.order_payload(
            self.store.id, self.city.id,
            recipient_phone="12345", item_weight=0, recipient_name="",
        )
        with self.assertRaises(ValidationFailed) as ctx:
            self.orders.create_order(payload, self.owner.id)

        errors = ctx.exception.errors
        self.assertEqual(errors["recipient_phone"], [PHONE_MESSAGE])
        self.assertEqual(errors["item_weight"], ["The item weight field is required."])
        self.assertEqual(errors["recipient_name"], ["The recipient name field is required."])

    def test_get_order_is_scoped_to_owner(self):
        order = self.create_order()

        fetched = self.orders.get_order(order.consignment_id, self.owner.id)
        self.assertEqual(fetched.id, order.id)

        with self.assertRaises(AccessDenied):
            self.orders.get_order(order.consignment_id, self.other.id)
        with self.assertRaises(NotFound):
            self.orders.get_order("CONDOESNOTEXIST", self.owner.id)

    def test_update_recomputes_amount_to_collect(self):
        order = self.create_order()

        updated = self.orders.update_order(
            {"consignment_id": order.consignment_id, "order_amount": 1000}, self.owner.id
        )
        self.assertEqual(updated.cod_fee, Decimal("10.00"))
        self.assertEqual(updated.total_fee, Decimal("105.00"))
        self.assertEqual(updated.amount_to_collect, Decimal("1105.00"))

        # repeated updates do not drift
        updated = self.orders.update_order(
            {"consignment_id": order.consignment_id, "order_amount": 1000}, self.owner.id
        )
        self.assertEqual(updated.amount_to_collect, Decimal("1105.00"))

    def test_partial_update_keeps_other_fields(self):
        order = self.create_order()

        updated = self.orders.update_order({
            "consignment_id": order.consignment_id,
            "recipient_name": "Karim",
            "recipient_address": "",
        }, self.owner.id)

        self.assertEqual(updated.recipient_name, "Karim")
        self.assertEqual(updated.recipient_address, "House 10, Road 5, Banani")
        self.assertEqual(updated.amount_to_collect, Decimal("600.00"))

    def test_weight_update_alone_keeps_fees(self):
        order = self.create_order()
        updated = self.orders.update_order(
            {"consignment_id": order.consignment_id, "item_weight": 5}, self.owner.id
        )
        self.assertEqual(updated.item_weight, Decimal("5"))
        self.assertEqual(updated.delivery_fee, Decimal("95.00"))

    def test_update_by_non_owner_is_denied(self):
        order = self.create_order()
        with self.assertRaises(AccessDenied):
            self.orders.update_order(
                {"consignment_id": order.consignment_id, "recipient_name": "X"}, self.other.id
            )

    def test_list_orders_only_returns_callers_orders(self):
        for _ in range(3):
            self.create_order()
        for _ in range(5):
            self.create_order(user=self.other)

        orders, pagination = self.orders.list_orders(self.owner.id, page=1, page_length=2)

        self.assertEqual(len(orders), 2)
        self.assertTrue(all(o.user_id == self.owner.id for o in orders))
        self.assertEqual(pagination["total"], 3)
        self.assertEqual(pagination["total_pages"], 2)
        self.assertEqual(pagination["per_page"], 2)

        orders, _ = self.orders.list_orders(self.owner.id, page=2, page_length=2)
        self.assertEqual(len(orders), 1)

    def test_list_orders_defaults_and_cap(self):
        self.create_order()
        _, pagination = self.orders.list_orders(self.owner.id, page=0, page_length=0)
        self.assertEqual(pagination["current_page"], 1)
        self.assertEqual(pagination["per_page"], 10)

        _, pagination = self.orders.list_orders(self.owner.id, page_length=500)
        self.assertEqual(pagination["per_page"], 100)

    def test_list_orders_filters_by_status(self):
        first = self.create_order()
        self.create_order()
        self.orders.cancel_order(first.consignment_id, self.owner.id)

        orders, pagination = self.orders.list_orders(self.owner.id, status="cancelled")
        self.assertEqual(pagination["total"], 1)
        self.assertEqual(orders[0].consignment_id, first.consignment_id)

        with self.assertRaises(ValidationFailed):
            self.orders.list_orders(self.owner.id, status="shipped")

    def test_cancel_order(self):
        order = self.create_order()
        self.orders.cancel_order(order.consignment_id, self.owner.id)

        fetched = self.orders.get_order(order.consignment_id, self.owner.id)
        self.assertEqual(fetched.order_status, "cancelled")

    def test_update_status_rejects_unknown_status(self):
        order = self.create_order()
        with self.assertRaises(ValidationFailed):
            self.orders.update_order_status(order.consignment_id, self.owner.id, "lost")

    def test_delete_order_is_soft(self):
        order = self.create_order()
        self.orders.delete_order(order.consignment_id, self.owner.id)

        with self.assertRaises(NotFound):
            self.orders.get_order(order.consignment_id, self.owner.id)
        _, pagination = self.orders.list_orders(self.owner.id)
        self.assertEqual(pagination["total"], 0)

        # row is kept with a deletion timestamp
        row = self.orders.orders.get_by_id(order.id)
        self.assertIsNotNone(row.deleted_at)

    def test_delete_by_non_owner_is_denied(self):
        order = self.create_order()
        with self.assertRaises(AccessDenied):
            self.orders.delete_order(order.consignment_id, self.other.id)


class TestAccumulatingAmountToCollect(CourierTestCase):
    config_overrides = {"ACCUMULATE_AMOUNT_TO_COLLECT": True}

    def test_update_adds_new_total_fee_to_previous_amount(self):
        owner = self.create_user()
        city = self.create_city("Dhaka", 80.0)
        store = self.create_store("S1")
        order = self.services.orders.create_order(
            self.order_payload(store.id, city.id), owner.id
        )
        self.assertEqual(order.amount_to_collect, Decimal("600.00"))

        updated = self.services.orders.update_order(
            {"consignment_id": order.consignment_id, "order_amount": 1000}, owner.id
        )
        # 600.00 + new total fee of 105.00
        self.assertEqual(updated.amount_to_collect, Decimal("705.00"))


class TestConcurrentOrderCreation(CourierTestCase):
    """File-backed database so each worker thread gets its own connection."""

    def setUp(self):
        self.tmpdir = tempfile.mkdtemp()
        self.config_overrides = {
            "DATABASE_URL": f"sqlite:///{os.path.join(self.tmpdir, 'courier.db')}",
        }
        super().setUp()

    def tearDown(self):
        db.engine.dispose()
        super().tearDown()
        shutil.rmtree(self.tmpdir, ignore_errors=True)

    def test_concurrent_creates_get_distinct_consignment_ids(self):
        owner_id = self.create_user().id
        city_id = self.create_city("Dhaka", 80.0).id
        store_id = self.create_store("S1").id
        payload = self.order_payload(store_id, city_id)

        def create(_):
            with self.app.app_context():
                order = self.services.orders.create_order(dict(payload), owner_id)
                return order.consignment_id

        with ThreadPoolExecutor(max_workers=8) as pool:
            ids = list(pool.map(create, range(1000)))

        self.assertEqual(len(set(ids)), 1000)
        stored = db.session.execute(select(Order.consignment_id)).scalars().all()
        self.assertEqual(len(stored), 1000)
        self.assertEqual(set(stored), set(ids))


if __name__ == '__main__':
    unittest.main()
