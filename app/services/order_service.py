import logging
from dataclasses import dataclass
from decimal import Decimal
from typing import List, Optional

from fastapi import BackgroundTasks

from app.core.config import settings
from app.core.exceptions import NotFoundError, ValidationError
from app.db.models.order import Order, OrderStatus, is_legal_transition
from app.db.schemas.order import OrderCreateRequest
from app.services.notifier import Notifier, OrderSnapshot
from app.services.order_store import MAX_MONEY, NewOrderFields, OrderStore, to_money
from app.services.revenue_ledger import RevenueLedger
from app.utils.business_time import business_today

logger = logging.getLogger(__name__)

MISSING_FIELDS_MESSAGE = "Missing required fields: name, phone, items, and total are required"


@dataclass
class OrderStatistics:
    total_orders: int
    total_revenue: Decimal
    manual_revenue: Decimal
    pending: int
    confirmed: int
    completed: int
    cancelled: int
    today_orders: int
    today_revenue: Decimal


def parse_status(value: Optional[str]) -> Optional[OrderStatus]:
    if value is None:
        return None
    try:
        return OrderStatus(value)
    except ValueError:
        allowed = ", ".join(s.value for s in OrderStatus)
        raise ValidationError(f"Invalid status '{value}'. Must be one of: {allowed}")


class OrderService:
    def __init__(
            self,
            order_store: OrderStore,
            revenue_ledger: RevenueLedger,
            notifier: Notifier,
            background_tasks: Optional[BackgroundTasks] = None,
            enforce_transitions: Optional[bool] = None,
    ):
        self.orders = order_store
        self.revenue = revenue_ledger
        self.notifier = notifier
        self.background_tasks = background_tasks
        if enforce_transitions is None:
            enforce_transitions = settings.ENFORCE_STATUS_TRANSITIONS
        self.enforce_transitions = enforce_transitions

    # --- 1. Order Creation ---
    async def place_order(self, request: OrderCreateRequest) -> Order:
        """
        Validate -> persist as pending -> hand the order to the notifier.

        The notification is queued on ``background_tasks`` when available so
        the HTTP response never waits on it; otherwise it is awaited here,
        where a failure is still only logged.
        """
        fields = self._validate_new_order(request)
        order = await self.orders.create(fields)

        logger.info(
            f"NEW ORDER #{order.id} | customer={order.customer_name} "
            f"phone={order.customer_phone} total=${order.total:.2f} at {order.created_at}"
        )

        snapshot = OrderSnapshot.from_order(order)
        if self.background_tasks is not None:
            self.background_tasks.add_task(self.notifier.notify, snapshot)
        else:
            await self.notifier.notify(snapshot)

        return order

    def _validate_new_order(self, request: OrderCreateRequest) -> NewOrderFields:
        name = (request.customer_name or "").strip()
        phone = (request.customer_phone or "").strip()
        items = (request.items or "").strip()

        if not name or not phone or not items or request.total is None:
            raise ValidationError(MISSING_FIELDS_MESSAGE)

        total = request.total
        if not total.is_finite() or abs(total) > MAX_MONEY:
            raise ValidationError("Total must be a positive number")
        total = to_money(total)
        if total <= 0:
            raise ValidationError("Total must be a positive number")

        return NewOrderFields(
            customer_name=name,
            customer_phone=phone,
            customer_email=(request.customer_email or "").strip(),
            items=items,
            total=total,
            notes=request.notes or "",
        )

    # --- 2. Reads ---
    async def get_order(self, order_id: int) -> Order:
        order = await self.orders.get(order_id)
        if order is None:
            raise NotFoundError("Order not found")
        return order

    async def list_orders(self, status: Optional[str] = None, limit: Optional[int] = None) -> List[Order]:
        if limit is None:
            limit = settings.ORDER_LIST_DEFAULT_LIMIT
        if limit < 1:
            raise ValidationError("limit must be a positive integer")

        status_filter = None if status in (None, "", "all") else parse_status(status)
        return await self.orders.list(status=status_filter, limit=limit)

    # --- 3. Staff Mutations ---
    async def update_status(
            self,
            order_id: int,
            status: Optional[str] = None,
            notes: Optional[str] = None,
    ) -> Order:
        new_status = parse_status(status or None)
        if new_status is None and notes is None:
            raise ValidationError("Nothing to update: status or notes is required")

        if new_status is not None and self.enforce_transitions:
            current = await self.get_order(order_id)
            if not is_legal_transition(current.status, new_status):
                raise ValidationError(
                    f"Cannot move order #{order_id} from {current.status.value} to {new_status.value}"
                )

        order = await self.orders.update_status(order_id, status=new_status, notes=notes)
        if order is None:
            raise NotFoundError("Order not found")

        logger.info(f"Order #{order_id} updated to: {new_status.value if new_status else 'no status change'}")
        return order

    async def delete_order(self, order_id: int) -> None:
        if not await self.orders.delete(order_id):
            raise NotFoundError("Order not found")
        logger.info(f"Order #{order_id} deleted")

    # --- 4. Stats & Revenue ---
    async def get_stats(self) -> OrderStatistics:
        """Recomputed on every call from current orders plus the manual adjustment."""
        aggregate = await self.orders.aggregate(business_today())
        manual = await self.revenue.get()

        return OrderStatistics(
            total_orders=aggregate.count,
            total_revenue=aggregate.revenue_sum + manual,
            manual_revenue=manual,
            pending=aggregate.per_status[OrderStatus.PENDING],
            confirmed=aggregate.per_status[OrderStatus.CONFIRMED],
            completed=aggregate.per_status[OrderStatus.COMPLETED],
            cancelled=aggregate.per_status[OrderStatus.CANCELLED],
            today_orders=aggregate.today_count,
            today_revenue=aggregate.today_revenue_sum,
        )

    async def adjust_revenue(self, action: str, amount: Optional[Decimal] = None) -> Decimal:
        if action == "reset":
            value = await self.revenue.reset()
        elif action in ("add", "set"):
            if amount is None:
                raise ValidationError("Amount is required")
            if not Decimal(amount).is_finite() or abs(Decimal(amount)) > MAX_MONEY:
                raise ValidationError("Amount must be a number")
            if action == "add":
                value = await self.revenue.add(amount)
            else:
                value = await self.revenue.set(amount)
        else:
            raise ValidationError(f"Unknown action '{action}'. Use add, set or reset")

        logger.info(f"Manual revenue {action} ({amount if amount is not None else '-'}) -> {value}")
        return value
