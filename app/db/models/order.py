import enum
from sqlalchemy import (
    Column, Integer, String, Text, DateTime, Enum, Numeric, Index
)
from app.db.session import Base

class OrderStatus(str, enum.Enum):
    PENDING = "pending"
    CONFIRMED = "confirmed"
    COMPLETED = "completed"
    CANCELLED = "cancelled"

# pending -> confirmed -> completed, with cancel from either open state.
ALLOWED_TRANSITIONS = {
    OrderStatus.PENDING: {OrderStatus.CONFIRMED, OrderStatus.CANCELLED},
    OrderStatus.CONFIRMED: {OrderStatus.COMPLETED, OrderStatus.CANCELLED},
    OrderStatus.COMPLETED: set(),
    OrderStatus.CANCELLED: set(),
}

def is_legal_transition(current: OrderStatus, target: OrderStatus) -> bool:
    if current == target:
        return True
    return target in ALLOWED_TRANSITIONS[current]

class Order(Base):
    __tablename__ = "orders"
    __table_args__ = (
        Index("idx_orders_status", "status"),
        Index("idx_orders_created_at", "created_at"),
        # ids must never be reused once the newest order is deleted
        {"sqlite_autoincrement": True},
    )

    id = Column(Integer, primary_key=True, autoincrement=True)

    customer_name = Column(String, nullable=False)
    customer_phone = Column(String, nullable=False)
    customer_email = Column(String, nullable=False, default="")

    items = Column(Text, nullable=False)
    total = Column(Numeric(10, 2, asdecimal=True), nullable=False)
    notes = Column(Text, nullable=False, default="")

    status = Column(
        Enum(
            OrderStatus,
            native_enum=False,
            length=16,
            values_callable=lambda e: [m.value for m in e],
        ),
        default=OrderStatus.PENDING,
        nullable=False,
    )

    # Business-local wall time, stored naive
    created_at = Column(DateTime, nullable=False)
    updated_at = Column(DateTime, nullable=False)

    def __repr__(self):
        return (
            f"<Order(id={self.id}, customer={self.customer_name}, "
            f"total={self.total}, status={self.status})>"
        )
