from sqlalchemy.orm import Session
from datetime import datetime
from typing import List, Tuple
import math
import logging

from kiosk.models.order import OrderLine

logger = logging.getLogger(__name__)


class OrderLogService:
    """
    Service class for the append-only order history.

    Rows are only ever inserted, one per committed cart line. The payload
    is the JSON form produced by ``OrderReceipt.to_payload`` so it can
    travel through the task queue unchanged.
    """

    def __init__(self, db: Session):
        self.db = db

    def record(self, payload: dict) -> List[OrderLine]:
        """
        Append the lines of one committed order.

        Args:
            payload: Order payload with order_ref, created_at, order_total and lines

        Returns:
            The inserted rows
        """
        created_at = datetime.fromisoformat(payload["created_at"])
        rows = [
            OrderLine(
                order_ref=payload["order_ref"],
                product_id=line["product_id"],
                product_name=line["product_name"],
                quantity=line["quantity"],
                unit_price=line["unit_price"],
                line_total=line["line_total"],
                order_total=payload["order_total"],
                created_at=created_at,
            )
            for line in payload["lines"]
        ]

        try:
            self.db.add_all(rows)
            self.db.commit()
        except Exception as e:
            self.db.rollback()
            logger.error(f"Error recording order {payload['order_ref']}: {e}")
            raise

        logger.info(f"Order {payload['order_ref']} logged with {len(rows)} line(s)")
        return rows

    def get_entries(self, page: int = 1, page_size: int = 10) -> Tuple[List[OrderLine], int, int]:
        """
        Get paginated order history, newest first.

        Args:
            page: Page number
            page_size: Items per page

        Returns:
            Tuple of (rows, total count, total pages)
        """
        query = self.db.query(OrderLine)

        total = query.count()
        total_pages = math.ceil(total / page_size) if total > 0 else 1

        offset = (page - 1) * page_size
        rows = query.order_by(OrderLine.id.desc()).offset(offset).limit(page_size).all()

        return rows, total, total_pages

    def get_order(self, order_ref: str) -> List[OrderLine]:
        """Get every line of one order."""
        return (
            self.db.query(OrderLine)
            .filter(OrderLine.order_ref == order_ref)
            .order_by(OrderLine.id)
            .all()
        )
