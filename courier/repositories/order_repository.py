from sqlalchemy import func, select, update

from courier.clock import utcnow
from courier.models import Order
from courier.repositories.base import Repository


class OrderRepository(Repository):
    model = Order

    def _live(self):
        return select(Order).where(Order.deleted_at.is_(None))

    def get_by_consignment_id(self, consignment_id):
        statement = self._live().where(Order.consignment_id == consignment_id)
        return self._read(statement).scalar_one_or_none()

    def list_for_owner(self, user_id, status=None, page=1, page_length=10):
        """Returns (orders, total_rows) for one page of the owner's live orders."""
        filters = [Order.deleted_at.is_(None), Order.user_id == user_id]
        if status:
            filters.append(Order.order_status == status)

        total = self._read(select(func.count()).select_from(Order).where(*filters)).scalar_one()
        statement = (
            select(Order)
            .where(*filters)
            .order_by(Order.created_at.desc(), Order.id.desc())
            .offset((page - 1) * page_length)
            .limit(page_length)
        )
        return list(self._read(statement).scalars()), total

    def update_status(self, order_id, status):
        statement = (
            update(Order)
            .where(Order.id == order_id, Order.deleted_at.is_(None))
            .values(order_status=status, updated_at=utcnow())
        )
        return self._execute_write(statement)

    def soft_delete(self, order_id):
        now = utcnow()
        statement = (
            update(Order)
            .where(Order.id == order_id, Order.deleted_at.is_(None))
            .values(deleted_at=now, updated_at=now)
        )
        return self._execute_write(statement)
