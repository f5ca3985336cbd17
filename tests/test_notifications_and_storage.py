from decimal import Decimal

import pytest
from redis.exceptions import ConnectionError as RedisConnectionError

from storefront.client.cart import CartStore
from storefront.client.storage import RedisCartStorage
from storefront.domain.errors import StorageError
from storefront.services.notification_service import NotificationService, send_order_notification_task


def test_notification_task_runs_eagerly():
    result = send_order_notification_task.delay(1, 7, "shipped")

    assert result.get() == {"user_id": 1, "order_id": 7, "status": "shipped", "sent": True}


def test_notification_service_dispatches_task(mocker):
    task = mocker.patch("storefront.services.notification_service.send_order_notification_task")

    NotificationService.send_order_created(1, 7)
    NotificationService.send_status_changed(1, 7, "delivered")

    assert task.delay.call_args_list == [mocker.call(1, 7, "pending"), mocker.call(1, 7, "delivered")]


@pytest.fixture
def fake_redis(mocker):
    client = mocker.MagicMock()
    mocker.patch("storefront.client.storage.redis.Redis.from_url", return_value=client)
    return client


def test_redis_storage_namespaces_keys(fake_redis):
    fake_redis.get.return_value = None
    storage = RedisCartStorage("redis://test:6379/0")

    cart = CartStore(storage)
    cart.add_to_cart({"id": 1, "name": "Mug", "price": "8", "stock": 2, "images": []})

    fake_redis.get.assert_called_once_with("storefront:cart")
    key, value = fake_redis.set.call_args.args
    assert key == "storefront:cart"
    assert '"quantity":1' in value


def test_redis_storage_failure_becomes_storage_error(fake_redis):
    fake_redis.set.side_effect = RedisConnectionError("down")
    storage = RedisCartStorage("redis://test:6379/0")

    with pytest.raises(StorageError):
        storage.write("cart", "{}")

    assert fake_redis.set.call_count == 3


def test_cart_survives_redis_outage(fake_redis):
    fake_redis.get.side_effect = RedisConnectionError("down")
    fake_redis.set.side_effect = RedisConnectionError("down")

    cart = CartStore(RedisCartStorage("redis://test:6379/0"))
    cart.add_to_cart({"id": 1, "name": "Mug", "price": "8", "stock": 2, "images": []}, 2)

    assert cart.total == Decimal("16")
