import logging

from kiosk.tasks.celery_app import celery_app
from kiosk.database import SessionLocal
from kiosk.services.checkout_service import OrderReceipt
from kiosk.services.order_service import OrderLogService

logger = logging.getLogger(__name__)


@celery_app.task(bind=True, name="record_order", max_retries=3)
def record_order(self, payload: dict) -> dict:
    """
    Background task appending a committed order to the order history.

    The sale is already committed by the time this runs; a failure here
    only loses history, so it is retried a few times and then given up.

    Args:
        payload: Order payload from ``OrderReceipt.to_payload``

    Returns:
        Dictionary with the recording result
    """
    logger.info(f"Recording order {payload['order_ref']}")

    db = SessionLocal()

    try:
        rows = OrderLogService(db).record(payload)
        return {
            "status": "recorded",
            "order_ref": payload["order_ref"],
            "lines": len(rows),
        }

    except Exception as e:
        logger.error(f"Error recording order {payload['order_ref']}: {e}")
        raise self.retry(exc=e, countdown=30)

    finally:
        db.close()


def dispatch_order_log(receipt: OrderReceipt) -> None:
    """Order log hook for ``CheckoutService``: queue the receipt for recording."""
    record_order.delay(receipt.to_payload())
