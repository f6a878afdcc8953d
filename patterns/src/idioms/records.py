"""Immutable value records and a service that replaces rather than mutates them.

Records are frozen Pydantic models: equality compares field values, and
``model_copy(update=...)`` produces the modified copy.
"""

import uuid
from datetime import datetime, timezone
from decimal import Decimal
from typing import List, Sequence, Tuple

from pydantic import BaseModel, ConfigDict, Field

from patterns.src.registry import register_demo


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Product(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str
    name: str
    price: Decimal


class OrderItem(BaseModel):
    model_config = ConfigDict(frozen=True)

    product: Product
    quantity: int = Field(ge=1)

    @property
    def total_price(self) -> Decimal:
        return self.product.price * self.quantity


class Order(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str
    order_date: datetime
    customer_id: str
    items: Tuple[OrderItem, ...] = ()

    @property
    def total_amount(self) -> Decimal:
        return sum((item.total_price for item in self.items), Decimal("0"))

    @property
    def total_items(self) -> int:
        return sum(item.quantity for item in self.items)


class OrderStatus(BaseModel):
    model_config = ConfigDict(frozen=True)

    order_id: str
    status: str
    last_updated: datetime


class OrderService:
    """
    In-memory order store.

    Orders and statuses are never changed in place: an update swaps the
    stored record for a modified copy.
    """

    def __init__(self):
        self._orders: Tuple[Order, ...] = ()
        self._statuses: Tuple[OrderStatus, ...] = ()

    def create_order(self, customer_id: str, items: Sequence[OrderItem]) -> Order:
        order = Order(
            id=str(uuid.uuid4()),
            order_date=_utcnow(),
            customer_id=customer_id,
            items=tuple(items)
        )
        self._orders += (order,)
        self._statuses += (OrderStatus(order_id=order.id, status="Pending", last_updated=_utcnow()),)
        return order

    def update_order_status(self, order_id: str, new_status: str) -> Order:
        """
        Record a new status for an order.

        Raises:
            ValueError: If the order does not exist
            RuntimeError: If the order has no status record
        """
        order = self._find_order(order_id)

        existing = next((s for s in self._statuses if s.order_id == order_id), None)
        if existing is None:
            raise RuntimeError("Order status not found")

        updated = existing.model_copy(update={"status": new_status, "last_updated": _utcnow()})
        self._statuses = tuple(updated if s is existing else s for s in self._statuses)
        return order

    def add_item_to_order(self, order_id: str, item: OrderItem) -> Order:
        """
        Return a copy of the order with ``item`` appended.

        Raises:
            ValueError: If the order does not exist
        """
        existing = self._find_order(order_id)
        updated = existing.model_copy(update={"items": existing.items + (item,)})
        self._orders = tuple(updated if o is existing else o for o in self._orders)
        return updated

    def get_orders_by_customer(self, customer_id: str) -> List[Order]:
        return [o for o in self._orders if o.customer_id == customer_id]

    def get_order_status(self, order_id: str) -> OrderStatus:
        """
        Raises:
            ValueError: If the order has no status record
        """
        for status in self._statuses:
            if status.order_id == order_id:
                return status
        raise ValueError("Order status not found")

    def _find_order(self, order_id: str) -> Order:
        for order in self._orders:
            if order.id == order_id:
                return order
        raise ValueError("Order not found")


@register_demo("records", "Immutable order records updated through copies")
def run_demo() -> List[str]:
    lines: List[str] = []
    service = OrderService()
    laptop = Product(id="P1", name="Laptop", price=Decimal("999.99"))
    mouse = Product(id="P2", name="Mouse", price=Decimal("24.99"))

    try:
        order = service.create_order("C001", [
            OrderItem(product=laptop, quantity=1),
            OrderItem(product=mouse, quantity=2),
        ])
        lines.append(f"Order created: {order.id}, Total: ${order.total_amount}")

        service.update_order_status(order.id, "Processing")
        status = service.get_order_status(order.id)
        lines.append(f"Order status: {status.status}, Last updated: {status.last_updated:%Y-%m-%d %H:%M:%S}")

        updated = service.add_item_to_order(order.id, OrderItem(product=mouse, quantity=1))
        lines.append(f"Updated order total: ${updated.total_amount}, Total items: {updated.total_items}")

        lines.append(f"Customer C001 has {len(service.get_orders_by_customer('C001'))} orders")

        service.update_order_status("non-existent-id", "Shipped")
    except ValueError as e:
        lines.append(f"Error: {e}")
    except RuntimeError as e:
        lines.append(f"Operation Error: {e}")

    return lines
