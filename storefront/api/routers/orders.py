# storefront/api/routers/orders.py
from typing import List

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from storefront.api.auth import CurrentUser
from storefront.data.database import get_db
from storefront.domain.schemas import OrderCreate, OrderOut, OrderStatusIn
from storefront.services.order_service import OrderService

router = APIRouter(prefix="/api/orders", tags=["orders"])


def get_service(db: Session):
    return OrderService(db)


@router.post("", response_model=OrderOut, status_code=201)
def create_order(payload: OrderCreate, user: CurrentUser, db: Session = Depends(get_db)):
    """
    Turns a submitted cart snapshot into a pending order.
    """
    return get_service(db).create_order(payload.items, user.id)


@router.get("", response_model=List[OrderOut])
def list_orders(user: CurrentUser, db: Session = Depends(get_db)):
    return get_service(db).list_orders(user.id)


@router.get("/{order_id}", response_model=OrderOut)
def get_order(order_id: int, user: CurrentUser, db: Session = Depends(get_db)):
    return get_service(db).get_order(order_id, user.id, user.role)


@router.put("/{order_id}/status", response_model=OrderOut)
def update_order_status(order_id: int, payload: OrderStatusIn, user: CurrentUser, db: Session = Depends(get_db)):
    return get_service(db).update_status(order_id, payload.status, user.id, user.role)
