from decimal import Decimal

import pytest

from storefront.domain.errors import InvalidTransition, NotFound, Unauthorized, ValidationError
from storefront.domain.order_status import (
    LIFECYCLE_TRANSITIONS,
    PERMISSIVE_TRANSITIONS,
    OrderStatus,
    check_transition,
    parse_status,
    transition_table,
)
from storefront.domain.schemas import OrderItemIn
from storefront.services.order_service import OrderService


def line(product_id=1, price="10.00", quantity=1, name="Keyboard"):
    return OrderItemIn(product_id=product_id, name=name, price=Decimal(price), quantity=quantity)


@pytest.fixture
def service(db_session, notifier):
    return OrderService(db_session, notification_service=notifier, transitions=LIFECYCLE_TRANSITIONS)


def test_create_order_with_empty_cart_fails(service):
    with pytest.raises(ValidationError):
        service.create_order([], user_id=1)


@pytest.mark.parametrize("quantity", [0, -2])
def test_create_order_with_non_positive_quantity_fails(service, quantity):
    with pytest.raises(ValidationError):
        service.create_order([line(), line(product_id=2, quantity=quantity)], user_id=1)


def test_create_order_snapshots_cart(service, notifier):
    order = service.create_order([line(quantity=2), line(product_id=2, price="4.50", quantity=3, name="Mouse")], user_id=1)

    assert order["status"] == "pending"
    assert order["user_id"] == 1
    assert order["total"] == Decimal("33.50")
    assert [(i["product_id"], i["price"], i["quantity"]) for i in order["items"]] == [
        (1, Decimal("10.00"), 2),
        (2, Decimal("4.50"), 3),
    ]
    assert notifier.created == [(1, order["id"])]


def test_order_prices_do_not_follow_catalogue(service, make_product, db_session):
    product = make_product(price=Decimal("10.00"))
    order = service.create_order([line(product_id=product.id, price="10.00", quantity=1)], user_id=1)

    product.price = Decimal("99.00")
    db_session.commit()

    fetched = service.get_order(order["id"], user_id=1)
    assert fetched["items"][0]["price"] == Decimal("10.00")
    assert fetched["total"] == Decimal("10.00")


def test_list_orders_newest_first_and_owned_only(service):
    first = service.create_order([line()], user_id=1)
    service.create_order([line()], user_id=2)
    second = service.create_order([line()], user_id=1)

    orders = service.list_orders(1)

    assert [o["id"] for o in orders] == [second["id"], first["id"]]


def test_get_order_not_found(service):
    with pytest.raises(NotFound):
        service.get_order(404, user_id=1)


def test_get_order_by_stranger_is_unauthorized(service):
    order = service.create_order([line()], user_id=1)

    with pytest.raises(Unauthorized):
        service.get_order(order["id"], user_id=2)


def test_admin_can_read_any_order(service):
    order = service.create_order([line()], user_id=1)

    assert service.get_order(order["id"], user_id=99, role="admin")["id"] == order["id"]


def test_update_status_walks_lifecycle(service, notifier):
    order = service.create_order([line()], user_id=1)

    for status in ("processing", "shipped", "delivered"):
        updated = service.update_status(order["id"], status, user_id=99, role="admin")
        assert updated["status"] == status

    assert updated["updated_at"] is not None
    assert [c[2] for c in notifier.changed] == ["processing", "shipped", "delivered"]


def test_update_status_rejects_illegal_transition(service):
    order = service.create_order([line()], user_id=1)
    service.update_status(order["id"], "cancelled", user_id=1)

    with pytest.raises(InvalidTransition):
        service.update_status(order["id"], "processing", user_id=1)

    assert service.get_order(order["id"], user_id=1)["status"] == "cancelled"


def test_update_status_permissive_table_allows_anything(db_session, notifier):
    service = OrderService(db_session, notification_service=notifier, transitions=PERMISSIVE_TRANSITIONS)
    order = service.create_order([line()], user_id=1)
    service.update_status(order["id"], "delivered", user_id=1)

    assert service.update_status(order["id"], "pending", user_id=1)["status"] == "pending"


def test_update_status_unknown_status(service):
    order = service.create_order([line()], user_id=1)

    with pytest.raises(ValidationError):
        service.update_status(order["id"], "lost", user_id=1)


def test_update_status_by_stranger_is_unauthorized(service):
    order = service.create_order([line()], user_id=1)

    with pytest.raises(Unauthorized):
        service.update_status(order["id"], "cancelled", user_id=2)


def test_update_status_missing_order(service):
    with pytest.raises(NotFound):
        service.update_status(12345, "cancelled", user_id=1)


def test_check_transition_same_status_is_allowed():
    check_transition(LIFECYCLE_TRANSITIONS, OrderStatus.DELIVERED, OrderStatus.DELIVERED)


@pytest.mark.parametrize("status", [OrderStatus.PENDING, OrderStatus.PROCESSING, OrderStatus.SHIPPED])
def test_cancel_reachable_from_non_terminal(status):
    check_transition(LIFECYCLE_TRANSITIONS, status, OrderStatus.CANCELLED)


def test_parse_status_is_case_insensitive():
    assert parse_status(" Shipped ") is OrderStatus.SHIPPED


def test_transition_table_lookup():
    assert transition_table("permissive") is PERMISSIVE_TRANSITIONS
    with pytest.raises(ValueError):
        transition_table("chaos")


class BrokenNotifier:
    def send_order_created(self, user_id, order_id):
        raise ConnectionError("broker down")

    def send_status_changed(self, user_id, order_id, status):
        raise ConnectionError("broker down")


def test_notification_failure_does_not_fail_order(db_session):
    service = OrderService(db_session, notification_service=BrokenNotifier(), transitions=LIFECYCLE_TRANSITIONS)

    order = service.create_order([line()], user_id=1)
    updated = service.update_status(order["id"], "processing", user_id=1)

    assert updated["status"] == "processing"
    assert [o["id"] for o in service.list_orders(1)] == [order["id"]]


def test_update_status_checks_access_before_status(service):
    order = service.create_order([line()], user_id=1)

    with pytest.raises(Unauthorized):
        service.update_status(order["id"], "lost", user_id=2)

    with pytest.raises(NotFound):
        service.update_status(12345, "lost", user_id=1)
