# storefront/services/notification_service.py
from storefront.celery_worker import celery_app
from storefront.utils.logging import get_logger

logger = get_logger(__name__)


class NotificationService:
    """
    Order notifications, dispatched through Celery so the request
    never waits on delivery.
    """

    @staticmethod
    def send_order_created(user_id: int, order_id: int):
        send_order_notification_task.delay(user_id, order_id, "pending")

    @staticmethod
    def send_status_changed(user_id: int, order_id: int, status: str):
        send_order_notification_task.delay(user_id, order_id, status)


@celery_app.task(name="storefront.services.notification_service.send_order_notification_task")
def send_order_notification_task(user_id: int, order_id: int, status: str):
    """
    Delivery is log-only; an email/SMS gateway would plug in here.
    """
    logger.info(f"[NOTIFICATION] User {user_id}: Order {order_id} is now {status}")
    return {"user_id": user_id, "order_id": order_id, "status": status, "sent": True}
