# storefront/client/orders.py
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Optional

from storefront.client.api import ApiError, StorefrontClient
from storefront.utils.logging import get_logger

logger = get_logger(__name__)


@dataclass
class OrderState:
    """
    Read-only mirror of server orders for the views.

    Fields:
      - orders: the caller's orders, newest first
      - current_order: order opened in a detail view
      - loading: a request is in flight
      - error: displayable message of the last failed request
      - order_success: last create_order() succeeded
    """

    orders: List[Dict[str, Any]] = field(default_factory=list)
    current_order: Optional[Dict[str, Any]] = None
    loading: bool = False
    error: Optional[str] = None
    order_success: bool = False


class OrderStore:
    def __init__(self, client: StorefrontClient):
        self.client = client
        self.state = OrderState()

    def _call(self, request: Callable[[], Any], fallback: str):
        """Run a request, turning failures into state.error. Returns None on failure."""
        self.state.loading = True
        self.state.error = None
        try:
            result = request()
        except ApiError as e:
            self.state.error = e.message or fallback
            logger.warning(f"{fallback}: {e}")
            return None
        finally:
            self.state.loading = False
        return result

    def create_order(self, order_data: Dict[str, Any]) -> Optional[Dict[str, Any]]:
        self.state.order_success = False
        order = self._call(lambda: self.client.create_order(order_data), "Failed to create order")
        if order is None:
            return None

        self.state.current_order = order
        self.state.order_success = True
        self.state.orders.insert(0, order)
        return order

    def fetch_user_orders(self) -> Optional[List[Dict[str, Any]]]:
        orders = self._call(self.client.list_orders, "Failed to fetch orders")
        if orders is not None:
            self.state.orders = orders
        return orders

    def fetch_order_by_id(self, order_id: int) -> Optional[Dict[str, Any]]:
        order = self._call(lambda: self.client.get_order(order_id), "Failed to fetch order")
        if order is not None:
            self.state.current_order = order
        return order

    def update_order_status(self, order_id: int, status: str) -> Optional[Dict[str, Any]]:
        order = self._call(lambda: self.client.update_order_status(order_id, status), "Failed to update order status")
        if order is None:
            return None

        self.state.orders = [order if o.get("id") == order["id"] else o for o in self.state.orders]
        if self.state.current_order and self.state.current_order.get("id") == order["id"]:
            self.state.current_order = order
        return order

    def clear_error(self) -> None:
        self.state.error = None

    def clear_order_success(self) -> None:
        self.state.order_success = False

    def clear_current_order(self) -> None:
        self.state.current_order = None
