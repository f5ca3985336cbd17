# storefront/services/order_service.py
from decimal import Decimal
from typing import Any, Dict, Iterable, List

from sqlalchemy.orm import Session

from storefront.data.models.order import OrderModel
from storefront.data.models.order_item import OrderItemModel
from storefront.domain.errors import NotFound, Unauthorized, ValidationError
from storefront.domain.order_status import (
    OrderStatus,
    TransitionTable,
    check_transition,
    parse_status,
    transition_table,
)
from storefront.domain.schemas import OrderItemIn
from storefront.repos.order_repo import OrderRepo
from storefront.services.notification_service import NotificationService
from storefront.utils.settings import ORDER_TRANSITIONS
from storefront.utils.logging import get_logger

logger = get_logger(__name__)


class OrderService:
    """
    Order domain: checkout snapshots and status changes.

    Which status changes are legal is decided by the transition table
    passed in (defaults to the ORDER_TRANSITIONS setting).
    """

    def __init__(
        self,
        db: Session,
        notification_service: NotificationService | None = None,
        transitions: TransitionTable | None = None,
    ):
        self.db = db
        self.repo = OrderRepo(db)
        self.notification_service = notification_service or NotificationService()
        self.transitions = transitions or transition_table(ORDER_TRANSITIONS)

    @staticmethod
    def _to_dict(order: OrderModel) -> Dict[str, Any]:
        return {
            "id": order.id,
            "user_id": order.user_id,
            "status": order.status,
            "total": order.total,
            "items": [
                {
                    "product_id": i.product_id,
                    "name": i.name,
                    "price": i.price,
                    "quantity": i.quantity,
                    "image": i.image,
                }
                for i in order.items
            ],
            "created_at": order.created_at,
            "updated_at": order.updated_at,
        }

    def _get_authorized(self, order_id: int, user_id: int, role: str) -> OrderModel:
        order = self.repo.get_order(order_id)

        if not order:
            raise NotFound("Order not found")

        if order.user_id != user_id and role != "admin":
            raise Unauthorized("Not authorized to access this order")

        return order

    @staticmethod
    def _notify(send, *args) -> None:
        # the order is already committed at this point
        try:
            send(*args)
        except Exception:
            logger.exception(f"Order notification failed for {args}")

    # commands
    def create_order(self, items: Iterable[OrderItemIn], user_id: int) -> Dict[str, Any]:
        """
        Persist a checkout snapshot as a pending order.

        Line prices are taken from the submitted cart as-is; nothing is
        re-priced from the live catalogue.
        """
        lines = list(items)

        if not lines:
            raise ValidationError("Cart is empty")

        for line in lines:
            if line.quantity <= 0:
                raise ValidationError(f"Invalid quantity {line.quantity} for product {line.product_id}")

        total = sum((Decimal(line.price) * line.quantity for line in lines), Decimal("0.00"))

        order = OrderModel(
            user_id=user_id,
            status=OrderStatus.PENDING.value,
            total=total,
            items=[
                OrderItemModel(
                    position=pos,
                    product_id=line.product_id,
                    name=line.name,
                    price=Decimal(line.price),
                    quantity=line.quantity,
                    image=line.image or "",
                )
                for pos, line in enumerate(lines)
            ],
        )

        created = self.repo.create_order(order)

        logger.info(f"Order {created.id} created for user {user_id} ({len(lines)} lines, total {total})")

        self._notify(self.notification_service.send_order_created, user_id, created.id)

        return self._to_dict(created)

    def update_status(self, order_id: int, status: str, user_id: int, role: str = "user") -> Dict[str, Any]:
        order = self._get_authorized(order_id, user_id, role)
        requested = parse_status(status)

        current = OrderStatus(order.status)
        check_transition(self.transitions, current, requested)

        # last writer wins, no version check on orders
        updated = self.repo.update_order_status(order.id, requested.value)

        logger.info(f"Order {order.id} status {current.value} -> {requested.value} by user {user_id}")

        self._notify(self.notification_service.send_status_changed, updated.user_id, updated.id, updated.status)

        return self._to_dict(updated)

    # queries
    def list_orders(self, user_id: int) -> List[Dict[str, Any]]:
        return [self._to_dict(o) for o in self.repo.list_orders_by_user(user_id)]

    def get_order(self, order_id: int, user_id: int, role: str = "user") -> Dict[str, Any]:
        return self._to_dict(self._get_authorized(order_id, user_id, role))
