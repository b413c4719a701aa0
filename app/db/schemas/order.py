from decimal import Decimal
from datetime import datetime
from typing import Literal, Optional
from pydantic import BaseModel, Field, ConfigDict
from app.db.models.order import OrderStatus

class OrderCreateRequest(BaseModel):
    """Public order form. Fields are optional here so missing ones surface as a 400."""
    customer_name: Optional[str] = Field(None, alias="customerName")
    customer_phone: Optional[str] = Field(None, alias="customerPhone")
    customer_email: Optional[str] = Field(None, alias="customerEmail")
    items: Optional[str] = None
    total: Optional[Decimal] = None
    notes: Optional[str] = None

    model_config = ConfigDict(populate_by_name=True)

class OrderCreateResponse(BaseModel):
    success: bool = True
    message: str = "Order placed successfully! We will contact you shortly."
    order_id: int = Field(serialization_alias="orderId")

    model_config = ConfigDict(populate_by_name=True)

class OrderResponse(BaseModel):
    id: int
    customer_name: str
    customer_phone: str
    customer_email: str
    items: str
    total: float
    notes: str
    status: OrderStatus
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)

class OrderUpdateRequest(BaseModel):
    status: Optional[str] = None
    notes: Optional[str] = None

class DeleteResponse(BaseModel):
    success: bool = True

class OrderStatsResponse(BaseModel):
    total_orders: int
    total_revenue: float
    manual_revenue: float
    pending: int
    confirmed: int
    completed: int
    cancelled: int
    today_orders: int
    today_revenue: float

class RevenueAdjustRequest(BaseModel):
    action: Literal["add", "set", "reset"] = "add"
    amount: Optional[Decimal] = None

class RevenueAdjustResponse(BaseModel):
    success: bool = True
    manual_revenue: float
