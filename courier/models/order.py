"""
Order Model
Status: pending | cancelled
"""

from decimal import Decimal

from courier.clock import utcnow
from courier.extensions import db

ORDER_STATUS_PENDING = "pending"
ORDER_STATUS_CANCELLED = "cancelled"
ORDER_STATUSES = (ORDER_STATUS_PENDING, ORDER_STATUS_CANCELLED)

ORDER_TYPE_DELIVERY = "delivery"


class Order(db.Model):
    __tablename__ = "orders"

    id = db.Column(db.BigInteger().with_variant(db.Integer, "sqlite"), primary_key=True)
    consignment_id = db.Column(db.String(50), nullable=False, unique=True)
    user_id = db.Column(db.BigInteger, nullable=False, index=True)
    store_id = db.Column(db.BigInteger, nullable=False, index=True)
    merchant_order_id = db.Column(db.String(100))

    recipient_name = db.Column(db.String(255), nullable=False)
    recipient_phone = db.Column(db.String(20), nullable=False)
    recipient_address = db.Column(db.Text, nullable=False)
    recipient_city = db.Column(db.BigInteger, nullable=False, index=True)
    recipient_zone = db.Column(db.BigInteger, nullable=False, index=True)
    recipient_area = db.Column(db.Text)

    order_type = db.Column(db.String(20), nullable=False, default=ORDER_TYPE_DELIVERY)
    delivery_type_id = db.Column(db.BigInteger, index=True)
    item_type = db.Column(db.BigInteger, index=True)
    item_quantity = db.Column(db.Integer, nullable=False, default=1)
    item_weight = db.Column(db.Numeric(8, 2), nullable=False)
    item_description = db.Column(db.Text)
    special_instruction = db.Column(db.Text)

    # Derived amounts, always recomputed by the order service
    order_amount = db.Column(db.Numeric(10, 2), nullable=False)
    amount_to_collect = db.Column(db.Numeric(10, 2), nullable=False)
    delivery_fee = db.Column(db.Numeric(10, 2), nullable=False)
    cod_fee = db.Column(db.Numeric(10, 2), nullable=False, default=Decimal("0"))
    promo_discount = db.Column(db.Numeric(10, 2), nullable=False, default=Decimal("0"))
    discount = db.Column(db.Numeric(10, 2), nullable=False, default=Decimal("0"))
    total_fee = db.Column(db.Numeric(10, 2), nullable=False)

    order_status = db.Column(
        db.Enum(*ORDER_STATUSES, name="order_status"),
        nullable=False,
        default=ORDER_STATUS_PENDING,
        index=True,
    )
    created_at = db.Column(db.DateTime, nullable=False, default=utcnow)
    updated_at = db.Column(db.DateTime, nullable=False, default=utcnow, onupdate=utcnow)
    deleted_at = db.Column(db.DateTime, nullable=True, index=True)

    def to_dict(self):
        return {
            "consignment_id": self.consignment_id,
            "order_created_at": self.created_at.isoformat() if self.created_at else None,
            "order_description": self.item_description,
            "merchant_order_id": self.merchant_order_id,
            "recipient_name": self.recipient_name,
            "recipient_address": self.recipient_address,
            "recipient_phone": self.recipient_phone,
            "order_amount": float(self.order_amount),
            "amount_to_collect": float(self.amount_to_collect),
            "total_fee": float(self.total_fee),
            "instruction": self.special_instruction,
            "order_type": self.order_type,
            "cod_fee": float(self.cod_fee),
            "promo_discount": float(self.promo_discount),
            "discount": float(self.discount),
            "delivery_fee": float(self.delivery_fee),
            "order_status": self.order_status,
            "item_type": self.item_type,
            "item_weight": float(self.item_weight),
        }

    def to_created_dict(self):
        return {
            "consignment_id": self.consignment_id,
            "merchant_order_id": self.merchant_order_id,
            "order_status": self.order_status,
            "delivery_fee": float(self.delivery_fee),
        }
