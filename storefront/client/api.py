# storefront/client/api.py
from typing import Any, Dict, List

import requests
from requests import RequestException

from storefront.utils.settings import STOREFRONT_API_URL
from storefront.utils.logging import get_logger

logger = get_logger(__name__)


class ApiError(Exception):
    """Failed call; `message` is the server's message when it sent one."""

    def __init__(self, status_code: int | None, message: str | None):
        self.status_code = status_code
        self.message = message
        super().__init__(f"{status_code}: {message}")


class StorefrontClient:
    """
    Thin HTTP client for the storefront API. No retries: a failed call
    raises ApiError and the caller decides whether to try again.
    """

    def __init__(
        self,
        base_url: str | None = None,
        token: str | None = None,
        timeout: int = 5,
        session: requests.Session | None = None,
    ):
        self.base_url = (base_url or STOREFRONT_API_URL).rstrip("/")
        self.timeout = timeout
        self.session = session or requests.Session()
        if token:
            self.set_token(token)

    def set_token(self, token: str) -> None:
        self.session.headers["Authorization"] = f"Bearer {token}"

    def _request(self, method: str, path: str, **kwargs) -> Any:
        url = f"{self.base_url}{path}"
        logger.info(f"StorefrontClient {method} {url}")

        try:
            resp = self.session.request(method, url, timeout=self.timeout, **kwargs)
        except RequestException as e:
            logger.warning(f"StorefrontClient {method} {url} failed: {e}")
            raise ApiError(None, None) from e

        if resp.status_code >= 400:
            try:
                message = resp.json().get("message")
            except ValueError:
                message = None
            raise ApiError(resp.status_code, message)

        return resp.json()

    # products
    def list_products(self, **filters) -> Dict[str, Any]:
        params = {k: v for k, v in filters.items() if v is not None}
        return self._request("GET", "/api/products", params=params)

    def get_product(self, product_id: int) -> Dict[str, Any]:
        return self._request("GET", f"/api/products/{product_id}")

    def add_review(self, product_id: int, rating: int, comment: str) -> Dict[str, Any]:
        return self._request("POST", f"/api/products/{product_id}/reviews", json={"rating": rating, "comment": comment})

    # orders
    def create_order(self, order_data: Dict[str, Any]) -> Dict[str, Any]:
        return self._request("POST", "/api/orders", json=order_data)

    def list_orders(self) -> List[Dict[str, Any]]:
        return self._request("GET", "/api/orders")

    def get_order(self, order_id: int) -> Dict[str, Any]:
        return self._request("GET", f"/api/orders/{order_id}")

    def update_order_status(self, order_id: int, status: str) -> Dict[str, Any]:
        return self._request("PUT", f"/api/orders/{order_id}/status", json={"status": status})
