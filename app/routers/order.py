import logging
from typing import List, Optional
from fastapi import APIRouter, Depends, HTTPException, status
from app.core.dependencies import get_order_service, get_current_admin
from app.core.exceptions import NotFoundError, ValidationError
from app.db.schemas.order import (
    OrderCreateRequest, OrderCreateResponse, OrderResponse, OrderUpdateRequest,
    OrderStatsResponse, RevenueAdjustRequest, RevenueAdjustResponse, DeleteResponse,
)
from app.services.order_service import OrderService

logger = logging.getLogger(__name__)
router = APIRouter()

@router.post("", response_model=OrderCreateResponse)
async def create_order(
        request: OrderCreateRequest,
        service: OrderService = Depends(get_order_service),
):
    """
    Public order form submission.
    Validation and the new-order notification are handled by OrderService.
    """
    try:
        new_order = await service.place_order(request)
        return OrderCreateResponse(order_id=new_order.id)

    except ValidationError as e:
        logger.warning(f"Order validation failed: {e}")
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(e)
        )
    except Exception as e:
        logger.error(f"System error creating order: {e}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to place order"
        )

# --- STAFF ENDPOINTS ---

@router.get("", response_model=List[OrderResponse])
async def get_orders(
    status: Optional[str] = None,
    limit: Optional[int] = None,
    service: OrderService = Depends(get_order_service),
    admin: str = Depends(get_current_admin),
):
    try:
        return await service.list_orders(status, limit)
    except ValidationError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except Exception as e:
        logger.error(f"Error listing orders: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail="Database error")

@router.get("/stats", response_model=OrderStatsResponse)
async def get_order_stats(
    service: OrderService = Depends(get_order_service),
    admin: str = Depends(get_current_admin),
):
    try:
        stats = await service.get_stats()
    except Exception as e:
        logger.error(f"Error computing order stats: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail="Database error")

    return OrderStatsResponse(
        total_orders=stats.total_orders,
        total_revenue=float(stats.total_revenue),
        manual_revenue=float(stats.manual_revenue),
        pending=stats.pending,
        confirmed=stats.confirmed,
        completed=stats.completed,
        cancelled=stats.cancelled,
        today_orders=stats.today_orders,
        today_revenue=float(stats.today_revenue),
    )

@router.post("/adjust-revenue", response_model=RevenueAdjustResponse)
async def adjust_revenue(
    request: RevenueAdjustRequest,
    service: OrderService = Depends(get_order_service),
    admin: str = Depends(get_current_admin),
):
    try:
        value = await service.adjust_revenue(request.action, request.amount)
    except ValidationError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except Exception as e:
        logger.error(f"Error adjusting revenue: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail="Database error")

    logger.info(f"Revenue adjusted by {admin}")
    return RevenueAdjustResponse(manual_revenue=float(value))

@router.get("/{order_id}", response_model=OrderResponse)
async def get_order_detail(
    order_id: int,
    service: OrderService = Depends(get_order_service),
    admin: str = Depends(get_current_admin),
):
    try:
        return await service.get_order(order_id)
    except NotFoundError:
        raise HTTPException(status_code=404, detail="Order not found")
    except Exception as e:
        logger.error(f"Error loading order {order_id}: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail="Database error")

@router.put("/{order_id}", response_model=OrderResponse)
async def update_order(
    order_id: int,
    request: OrderUpdateRequest,
    service: OrderService = Depends(get_order_service),
    admin: str = Depends(get_current_admin),
):
    try:
        return await service.update_status(order_id, request.status, request.notes)
    except ValidationError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except NotFoundError:
        raise HTTPException(status_code=404, detail="Order not found")
    except Exception as e:
        logger.error(f"Error updating order {order_id}: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail="Database error")

@router.delete("/{order_id}", response_model=DeleteResponse)
async def delete_order(
    order_id: int,
    service: OrderService = Depends(get_order_service),
    admin: str = Depends(get_current_admin),
):
    try:
        await service.delete_order(order_id)
    except NotFoundError:
        raise HTTPException(status_code=404, detail="Order not found")
    except Exception as e:
        logger.error(f"Error deleting order {order_id}: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail="Database error")

    return DeleteResponse()
