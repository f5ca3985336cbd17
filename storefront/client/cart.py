# storefront/client/cart.py
from decimal import Decimal
from typing import Any, Dict, List, Mapping

from pydantic import BaseModel, Field, ValidationError as PydanticValidationError

from storefront.client.storage import CartStorage
from storefront.domain.errors import StorageError
from storefront.utils.logging import get_logger

logger = get_logger(__name__)

CART_STORAGE_KEY = "cart"


class CartLine(BaseModel):
    """One product + quantity entry; `stock` is the cap captured when added."""

    product_id: int | str
    name: str
    price: Decimal
    image: str = ""
    quantity: int
    stock: int


class CartState(BaseModel):
    items: List[CartLine] = Field(default_factory=list)
    total: Decimal = Decimal("0")


def calculate_total(items: List[CartLine]) -> Decimal:
    return sum((i.price * i.quantity for i in items), Decimal("0"))


def _read(product: Any, name: str, default=None):
    if isinstance(product, Mapping):
        return product.get(name, default)
    return getattr(product, name, default)


def _primary_image(images) -> str:
    if not images:
        return ""
    return _read(images[0], "url", "") or ""


class CartStore:
    """
    Locally persisted cart.

    Every mutation recomputes the total and writes the whole state to
    storage. A failed write is logged and dropped, the in-memory state
    is kept. load_cart() hydrates without writing.
    """

    def __init__(self, storage: CartStorage, key: str = CART_STORAGE_KEY):
        self.storage = storage
        self.key = key
        self.state = self._restore()

    # -- persistence --------------------------------------------------------

    def _restore(self) -> CartState:
        try:
            raw = self.storage.read(self.key)
        except (StorageError, OSError) as e:
            logger.warning(f"Cannot read stored cart, starting empty: {e}")
            return CartState()

        if not raw:
            return CartState()

        try:
            return CartState.model_validate_json(raw)
        except PydanticValidationError as e:
            logger.warning(f"Stored cart is corrupt, starting empty: {e.error_count()} errors")
            return CartState()

    def _persist(self) -> None:
        try:
            self.storage.write(self.key, self.state.model_dump_json())
        except (StorageError, OSError) as e:
            logger.error(f"Error saving cart to storage: {e}")

    def _commit(self) -> CartState:
        self.state.total = calculate_total(self.state.items)
        self._persist()
        return self.state

    def _find(self, product_id) -> CartLine | None:
        return next((i for i in self.state.items if i.product_id == product_id), None)

    # -- reads --------------------------------------------------------------

    @property
    def items(self) -> List[CartLine]:
        return list(self.state.items)

    @property
    def total(self) -> Decimal:
        return self.state.total

    @property
    def item_count(self) -> int:
        return sum(i.quantity for i in self.state.items)

    def snapshot(self) -> Dict[str, Any]:
        return self.state.model_dump(mode="json")

    def to_order_payload(self) -> Dict[str, Any]:
        """Body for POST /api/orders."""
        return {
            "items": [
                {
                    "product_id": i.product_id,
                    "name": i.name,
                    "price": str(i.price),
                    "quantity": i.quantity,
                    "image": i.image,
                }
                for i in self.state.items
            ]
        }

    # -- mutations ----------------------------------------------------------

    def add_to_cart(self, product: Any, quantity: int = 1) -> CartState:
        product_id = _read(product, "id")
        existing = self._find(product_id)

        if existing:
            # no stock clamp here, update_quantity() enforces the cap
            existing.quantity += quantity
            if existing.quantity <= 0:
                self.state.items.remove(existing)
        elif quantity > 0:
            self.state.items.append(
                CartLine(
                    product_id=product_id,
                    name=_read(product, "name"),
                    price=Decimal(str(_read(product, "price"))),
                    image=_primary_image(_read(product, "images")),
                    quantity=quantity,
                    stock=_read(product, "stock", 0),
                )
            )

        return self._commit()

    def remove_from_cart(self, product_id) -> CartState:
        self.state.items = [i for i in self.state.items if i.product_id != product_id]
        return self._commit()

    def update_quantity(self, product_id, quantity: int) -> CartState:
        item = self._find(product_id)

        if not item:
            return self.state

        if quantity <= 0:
            self.state.items = [i for i in self.state.items if i.product_id != product_id]
        else:
            item.quantity = min(quantity, item.stock)

        return self._commit()

    def clear_cart(self) -> CartState:
        self.state.items = []
        self.state.total = Decimal("0")
        self._persist()
        return self.state

    def load_cart(self, snapshot: Mapping[str, Any] | CartState) -> CartState:
        if isinstance(snapshot, CartState):
            snapshot = snapshot.model_dump()

        self.state = CartState(
            items=snapshot.get("items") or [],
            total=snapshot.get("total") or 0,
        )
        return self.state
