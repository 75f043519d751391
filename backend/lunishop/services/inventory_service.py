# Overview: Service-layer operations for inventory; encapsulates business logic and database work.

# backend/lunishop/services/inventory_service.py

"""
Lunishop Inventory Invariants (authoritative)

Stock model:
- One product_stock row per (sales_outlet_id, product_id, size) holding a
  mutable amount.
- amount is never negative. The table carries CHECK (amount >= 0) and every
  decrement is a guarded UPDATE (amount >= n in the WHERE clause), so two
  concurrent orders against the same row cannot both succeed past zero.
- A row at zero stays. Rows disappear only through delete_stock_item() or
  when their outlet/product is deleted.

Transactions:
- decrement_stock() and increment_stock() never commit. They run inside the
  order workflow's transaction so stock and order rows change together.
- add/update/delete are standalone seller/admin corrections and commit.
- Restock (increment) is not idempotent: call it exactly once per deleted
  order item.
"""

from __future__ import annotations

from sqlalchemy import update

from ..extensions import db
from ..errors import ConflictError, InsufficientStockError, NotFoundError
from ..models import StockItem
from ..validation import coerce_int
from . import catalog_service
from .concurrency import lock_for_update, transaction


def _stock_filter(outlet_id: int, product_id: int, size: int):
    return (
        StockItem.sales_outlet_id == outlet_id,
        StockItem.product_id == product_id,
        StockItem.size == size,
    )


def get_stock_item(outlet_id: int, product_id: int, size: int, *, lock: bool = False) -> StockItem | None:
    query = db.session.query(StockItem).filter(*_stock_filter(outlet_id, product_id, size))
    if lock:
        query = lock_for_update(query)
    return query.first()


def get_stock_amount(outlet_id: int, product_id: int, size: int) -> int | None:
    """Current amount straight from the database, or None when the row is missing."""
    return (
        db.session.query(StockItem.amount)
        .filter(*_stock_filter(outlet_id, product_id, size))
        .scalar()
    )


def add_stock_item(outlet_id: int, product_id: int, size, amount) -> StockItem:
    size = coerce_int(size, "size")
    amount = coerce_int(amount, "amount", minimum=0)

    with transaction():
        if not catalog_service.outlet_exists(outlet_id):
            raise NotFoundError("sales outlet not found")
        if not catalog_service.product_exists(product_id):
            raise NotFoundError("product not found")

        for existing in catalog_service.product_stock(outlet_id, product_id):
            if existing.size == size:
                raise ConflictError("product stock already exists")

        item = StockItem(
            sales_outlet_id=outlet_id,
            product_id=product_id,
            size=size,
            amount=amount,
        )
        db.session.add(item)
    return item


def decrement_stock(outlet_id: int, product_id: int, size: int, amount: int) -> None:
    """
    Take amount out of one stock row inside the caller's transaction.

    The sufficiency check and the write are one statement. Zero affected
    rows means the row is missing or holds less than amount.
    """
    result = db.session.execute(
        update(StockItem)
        .where(*_stock_filter(outlet_id, product_id, size), StockItem.amount >= amount)
        .values(amount=StockItem.amount - amount)
        .execution_options(synchronize_session=False)
    )
    if result.rowcount != 1:
        available = get_stock_amount(outlet_id, product_id, size)
        raise InsufficientStockError(
            "product does not exist in the stock",
            details={
                "sales_outlet_id": outlet_id,
                "product_id": product_id,
                "size": size,
                "requested_amount": amount,
                "available_amount": available,
            },
        )


def increment_stock(outlet_id: int, product_id: int, size: int, amount: int) -> bool:
    """
    Put amount back into one stock row inside the caller's transaction.

    Returns False when no row matched (the stock row was deleted since the
    order was placed); the caller decides whether that matters.
    """
    result = db.session.execute(
        update(StockItem)
        .where(*_stock_filter(outlet_id, product_id, size))
        .values(amount=StockItem.amount + amount)
        .execution_options(synchronize_session=False)
    )
    return result.rowcount > 0


def update_stock_amount(outlet_id: int, product_id: int, size, new_amount) -> StockItem:
    """Absolute set used for stock corrections; not part of the order flow."""
    size = coerce_int(size, "size")
    new_amount = coerce_int(new_amount, "amount", minimum=0)

    with transaction():
        item = get_stock_item(outlet_id, product_id, size, lock=True)
        if item is None:
            raise NotFoundError("product stock does not exist")
        item.amount = new_amount
    return item


def delete_stock_item(outlet_id: int, product_id: int, size=None) -> int:
    """
    Remove the stock rows of a product at an outlet, or only one size.

    Returns the number of rows removed.
    """
    if size is not None:
        size = coerce_int(size, "size")

    with transaction():
        rows = catalog_service.product_stock(outlet_id, product_id)
        if size is not None:
            rows = [row for row in rows if row.size == size]
        if not rows:
            raise NotFoundError("product stock does not exist")

        for row in rows:
            db.session.delete(row)
    return len(rows)
