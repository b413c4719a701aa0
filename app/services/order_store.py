import logging
from dataclasses import dataclass, field
from datetime import date, datetime
from decimal import Decimal
from typing import Dict, List, Optional

from sqlalchemy import select, func, desc, case
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.exceptions import StorageError, ValidationError
from app.db.models.order import Order, OrderStatus
from app.utils.business_time import business_now, day_bounds

logger = logging.getLogger(__name__)

CENTS = Decimal("0.01")
# largest value a Numeric(10, 2) column holds
MAX_MONEY = Decimal("99999999.99")


def to_money(value) -> Decimal:
    if value is None:
        return Decimal("0.00")
    return Decimal(str(value)).quantize(CENTS)


@dataclass
class NewOrderFields:
    customer_name: str
    customer_phone: str
    items: str
    total: Decimal
    customer_email: str = ""
    notes: str = ""
    created_at: Optional[datetime] = None


@dataclass
class OrderAggregate:
    count: int = 0
    revenue_sum: Decimal = Decimal("0.00")
    per_status: Dict[OrderStatus, int] = field(default_factory=lambda: {s: 0 for s in OrderStatus})
    today_count: int = 0
    today_revenue_sum: Decimal = Decimal("0.00")


class OrderStore:
    """Owns the ``orders`` table. No business validation happens here."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def create(self, fields: NewOrderFields) -> Order:
        created_at = fields.created_at or business_now()
        order = Order(
            customer_name=fields.customer_name,
            customer_phone=fields.customer_phone,
            customer_email=fields.customer_email or "",
            items=fields.items,
            total=to_money(fields.total),
            notes=fields.notes or "",
            status=OrderStatus.PENDING,
            created_at=created_at,
            updated_at=created_at,
        )
        try:
            self.db.add(order)
            await self.db.commit()
            await self.db.refresh(order)
        except SQLAlchemyError as e:
            await self._fail("create order", e)
        return order

    async def get(self, order_id: int) -> Optional[Order]:
        try:
            return await self.db.get(Order, order_id)
        except SQLAlchemyError as e:
            await self._fail(f"load order {order_id}", e)

    async def list(self, status: Optional[OrderStatus] = None, limit: int = 50) -> List[Order]:
        stmt = select(Order)
        if status is not None:
            stmt = stmt.where(Order.status == status)
        stmt = stmt.order_by(desc(Order.id)).limit(limit)

        try:
            result = await self.db.execute(stmt)
            return list(result.scalars().all())
        except SQLAlchemyError as e:
            await self._fail("list orders", e)

    async def update_status(
            self,
            order_id: int,
            status: Optional[OrderStatus] = None,
            notes: Optional[str] = None,
    ) -> Optional[Order]:
        if status is None and notes is None:
            raise ValidationError("Nothing to update: status or notes is required")
        if status is not None and not isinstance(status, OrderStatus):
            raise ValidationError(f"Invalid status: {status}")

        order = await self.get(order_id)
        if order is None:
            return None

        if status is not None:
            order.status = status
        if notes is not None:
            order.notes = notes
        order.updated_at = business_now()

        try:
            await self.db.commit()
            await self.db.refresh(order)
        except SQLAlchemyError as e:
            await self._fail(f"update order {order_id}", e)
        return order

    async def delete(self, order_id: int) -> bool:
        order = await self.get(order_id)
        if order is None:
            return False

        try:
            await self.db.delete(order)
            await self.db.commit()
        except SQLAlchemyError as e:
            await self._fail(f"delete order {order_id}", e)
        return True

    async def aggregate(self, today: date) -> OrderAggregate:
        """Counts and sums over every order in one query; ``today`` is a business-local date."""
        day_start, day_end = day_bounds(today)
        is_today = (Order.created_at >= day_start) & (Order.created_at < day_end)

        columns = [
            func.count(Order.id),
            func.coalesce(func.sum(Order.total), 0),
            func.coalesce(func.sum(case((is_today, 1), else_=0)), 0),
            func.coalesce(func.sum(case((is_today, Order.total), else_=0)), 0),
        ]
        for s in OrderStatus:
            columns.append(func.coalesce(func.sum(case((Order.status == s, 1), else_=0)), 0))

        try:
            row = (await self.db.execute(select(*columns))).one()
        except SQLAlchemyError as e:
            await self._fail("aggregate orders", e)

        count, revenue, today_count, today_revenue, *status_counts = row
        return OrderAggregate(
            count=int(count or 0),
            revenue_sum=to_money(revenue),
            per_status={s: int(n or 0) for s, n in zip(OrderStatus, status_counts)},
            today_count=int(today_count or 0),
            today_revenue_sum=to_money(today_revenue),
        )

    async def _fail(self, action: str, error: Exception):
        logger.error(f"Order store failed to {action}: {error}", exc_info=True)
        await self.db.rollback()
        raise StorageError(f"Could not {action}") from error
