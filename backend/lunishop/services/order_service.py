# Overview: Service-layer operations for orders; encapsulates business logic and database work.

"""
Order placement and restock.

Lifecycle: Created -> [StatusUpdated]* -> Deleted

Placement runs as one transaction: outlet check, locked stock checks,
order header, guarded stock decrements, order items. Any failure rolls the
whole thing back, so an order never exists without its stock having been
taken, and stock is never taken without an order.

Deletion reverses the decrements (restock) in the same transaction that
removes the rows. A restock that finds no stock row is logged and skipped.
"""

from __future__ import annotations

from flask import current_app

from ..extensions import db
from ..errors import InsufficientStockError, NotFoundError, SameStatusError, ValidationError
from ..models import DEFAULT_ORDER_STATUS, Order, OrderItem, User
from ..permissions import STAFF_ROLES, Identity, check_owner_or_any_role
from ..validation import coerce_str, parse_order_items
from . import catalog_service
from .concurrency import lock_for_update, transaction
from .inventory_service import decrement_stock, get_stock_item, increment_stock


def _verify_stock(outlet_id: int, items: list[dict]) -> None:
    """
    Check every line against its locked stock row, in request order.

    Amounts for the same (product, size) are summed so that duplicate lines
    cannot pass one by one and overdraw together. First failure wins.
    """
    requested: dict[tuple[int, int], int] = {}
    for item in items:
        key = (item["product_id"], item["size"])
        requested[key] = requested.get(key, 0) + item["amount"]

        stock = get_stock_item(outlet_id, item["product_id"], item["size"], lock=True)
        if stock is None:
            raise ValidationError(
                "product does not exist in the stock",
                details={"product_id": item["product_id"], "size": item["size"]},
            )
        if stock.amount < requested[key]:
            raise InsufficientStockError(
                "product does not exist in the stock",
                details={
                    "product_id": item["product_id"],
                    "size": item["size"],
                    "requested_amount": requested[key],
                    "available_amount": stock.amount,
                },
            )


def create_order(user_id: int, outlet_id: int, items) -> Order:
    """
    Place an order and take its stock, all or nothing.

    items: list of {product_id, size, amount, price}; price is the unit
    price recorded on the order item.
    """
    items = parse_order_items(items)

    with transaction():
        if not catalog_service.outlet_exists(outlet_id):
            raise ValidationError("sales outlet does not exist")

        if db.session.get(User, user_id) is None:
            raise ValidationError("user does not exist")

        _verify_stock(outlet_id, items)

        order = Order(
            user_id=user_id,
            sales_outlet_id=outlet_id,
            status_name=DEFAULT_ORDER_STATUS,
        )
        db.session.add(order)
        db.session.flush()

        for item in items:
            # Guarded decrement re-checks the amount in the same statement
            decrement_stock(outlet_id, item["product_id"], item["size"], item["amount"])
            db.session.add(OrderItem(
                order_id=order.id,
                product_id=item["product_id"],
                amount=item["amount"],
                price=item["price"],
                size=item["size"],
            ))

    current_app.logger.info(
        "Order %s created for user %s at outlet %s with %d item(s)",
        order.id, user_id, outlet_id, len(items),
    )
    return order


def _restock(outlet_id: int, item: OrderItem) -> None:
    restored = increment_stock(outlet_id, item.product_id, item.size, item.amount)
    if not restored:
        current_app.logger.warning(
            "No stock record found for product %s, size %s, outlet %s; restock skipped",
            item.product_id, item.size, outlet_id,
        )


# =============================================================================
# READS
# =============================================================================

def list_orders() -> list[Order]:
    return db.session.query(Order).order_by(Order.id.asc()).all()


def list_user_orders(user_id: int) -> list[Order]:
    """Newest first."""
    return (
        db.session.query(Order)
        .filter_by(user_id=user_id)
        .order_by(Order.created_at.desc(), Order.id.desc())
        .all()
    )


def list_outlet_orders(outlet_id: int) -> list[Order]:
    if not catalog_service.outlet_exists(outlet_id):
        raise ValidationError("sales outlet does not exist")

    return (
        db.session.query(Order)
        .filter_by(sales_outlet_id=outlet_id)
        .order_by(Order.id.asc())
        .all()
    )


def get_order(order_id: int) -> Order:
    order = db.session.get(Order, order_id)
    if order is None:
        raise NotFoundError("order does not exist")
    return order


def get_order_items(order_id: int, actor: Identity) -> list[OrderItem]:
    order = get_order(order_id)
    check_owner_or_any_role(actor, order.user_id, *STAFF_ROLES)
    return list(order.items)


# =============================================================================
# MUTATIONS
# =============================================================================

def update_order_status(order_id: int, new_status) -> Order:
    """
    Set a new free-form status. Re-sending the current status is an error.
    """
    new_status = coerce_str(new_status, "status", max_length=64)

    with transaction():
        order = lock_for_update(db.session.query(Order).filter_by(id=order_id)).first()
        if order is None:
            raise NotFoundError("order does not exist")

        if order.status_name == new_status:
            raise SameStatusError(f"order status is same {new_status}")

        order.status_name = new_status
    return order


def delete_order_item(order_item_id: int, actor: Identity) -> None:
    with transaction():
        item = lock_for_update(db.session.query(OrderItem).filter_by(id=order_item_id)).first()
        if item is None:
            raise NotFoundError("order item not found")

        order = item.order
        order_id = order.id
        check_owner_or_any_role(actor, order.user_id, *STAFF_ROLES)

        _restock(order.sales_outlet_id, item)
        db.session.query(OrderItem).filter_by(id=order_item_id).delete(synchronize_session=False)

    current_app.logger.info("Order item %s deleted from order %s", order_item_id, order_id)


def delete_order(order_id: int, actor: Identity) -> None:
    with transaction():
        order = lock_for_update(db.session.query(Order).filter_by(id=order_id)).first()
        if order is None:
            raise NotFoundError("order does not exist")

        check_owner_or_any_role(actor, order.user_id, *STAFF_ROLES)

        for item in order.items:
            _restock(order.sales_outlet_id, item)

        db.session.query(OrderItem).filter_by(order_id=order_id).delete(synchronize_session=False)
        db.session.query(Order).filter_by(id=order_id).delete(synchronize_session=False)

    current_app.logger.info("Order %s deleted", order_id)
