# Overview: Service-layer operations for products and sales outlets; encapsulates business logic and database work.

"""
Catalog lookup and maintenance.

outlet_exists() and product_stock() are the read-only oracles the order
workflow and the stock ledger consult. Absence is a normal answer there
(False / empty list), never an exception. The CRUD functions below them
raise NotFoundError / ConflictError like every other service.
"""

from __future__ import annotations

from ..extensions import db
from ..errors import ConflictError, NotFoundError, ValidationError
from ..models import OrderItem, Order, Product, ProductImage, SalesOutlet, StockItem
from ..validation import coerce_price, coerce_str
from .concurrency import lock_for_update, transaction


# =============================================================================
# LOOKUPS
# =============================================================================

def outlet_exists(outlet_id: int) -> bool:
    return db.session.query(SalesOutlet.id).filter_by(id=outlet_id).first() is not None


def product_exists(product_id: int) -> bool:
    return db.session.query(Product.id).filter_by(id=product_id).first() is not None


def product_stock(outlet_id: int, product_id: int) -> list[StockItem]:
    """All size rows of one product at one outlet, smallest size first."""
    return (
        db.session.query(StockItem)
        .filter_by(sales_outlet_id=outlet_id, product_id=product_id)
        .order_by(StockItem.size.asc())
        .all()
    )


# =============================================================================
# SALES OUTLETS
# =============================================================================

def list_outlets() -> list[SalesOutlet]:
    return db.session.query(SalesOutlet).order_by(SalesOutlet.address.asc()).all()


def get_outlet(outlet_id: int) -> SalesOutlet:
    outlet = db.session.get(SalesOutlet, outlet_id)
    if outlet is None:
        raise NotFoundError("sales outlet not found")
    return outlet


def get_outlet_by_address(address: str) -> SalesOutlet | None:
    return db.session.query(SalesOutlet).filter_by(address=address).first()


def add_outlet(address) -> SalesOutlet:
    address = coerce_str(address, "address", max_length=255)

    with transaction():
        if get_outlet_by_address(address) is not None:
            raise ConflictError("sales outlet already exists")

        outlet = SalesOutlet(address=address)
        db.session.add(outlet)
    return outlet


def update_outlet(outlet_id: int, address) -> SalesOutlet:
    address = coerce_str(address, "address", max_length=255)

    with transaction():
        outlet = lock_for_update(db.session.query(SalesOutlet).filter_by(id=outlet_id)).first()
        if outlet is None:
            raise NotFoundError("sales outlet not found")

        existing = get_outlet_by_address(address)
        if existing is not None and existing.id != outlet.id:
            raise ConflictError("sales outlet already exists")

        outlet.address = address
    return outlet


def delete_outlet(outlet_id: int) -> None:
    with transaction():
        outlet = db.session.get(SalesOutlet, outlet_id)
        if outlet is None:
            raise NotFoundError("sales outlet not found")

        has_orders = db.session.query(Order.id).filter_by(sales_outlet_id=outlet_id).first()
        if has_orders:
            raise ConflictError("sales outlet has orders")

        # Stock rows go with the outlet (relationship cascade)
        db.session.delete(outlet)


def list_outlet_stock(outlet_id: int) -> list[StockItem]:
    if not outlet_exists(outlet_id):
        raise NotFoundError("sales outlet not found")

    return (
        db.session.query(StockItem)
        .join(Product, Product.id == StockItem.product_id)
        .filter(StockItem.sales_outlet_id == outlet_id)
        .order_by(Product.name.asc(), StockItem.size.asc())
        .all()
    )


# =============================================================================
# PRODUCTS
# =============================================================================

def list_products() -> list[Product]:
    return db.session.query(Product).order_by(Product.name.asc()).all()


def get_product(product_id: int) -> Product:
    product = db.session.get(Product, product_id)
    if product is None:
        raise NotFoundError("product not found")
    return product


def get_product_by_name(name: str) -> Product | None:
    return db.session.query(Product).filter_by(name=name).first()


def add_product(*, name, price, description=None, image_path=None) -> Product:
    name = coerce_str(name, "name", max_length=255)
    price = coerce_price(price)
    description = coerce_str(description, "description", required=False)
    image_path = coerce_str(image_path, "image_path", required=False, max_length=512)

    with transaction():
        if get_product_by_name(name) is not None:
            raise ConflictError("product with this name already exists")

        product = Product(name=name, description=description, price=price)
        db.session.add(product)
        db.session.flush()

        if image_path:
            db.session.add(ProductImage(product_id=product.id, image_path=image_path))
    return product


def update_product(
    product_id: int,
    *,
    name=None,
    price=None,
    description=None,
    image_path=None,
) -> Product:
    """
    Partial update. Only the fields that are passed change; image_path
    replaces the primary image or adds one if the product has none.
    """
    if all(value is None for value in (name, price, description, image_path)):
        raise ValidationError("nothing to update")

    with transaction():
        product = lock_for_update(db.session.query(Product).filter_by(id=product_id)).first()
        if product is None:
            raise NotFoundError("product not found")

        if name is not None:
            name = coerce_str(name, "name", max_length=255)
            existing = get_product_by_name(name)
            if existing is not None and existing.id != product.id:
                raise ConflictError("product with this name already exists")
            product.name = name
        if price is not None:
            product.price = coerce_price(price)
        if description is not None:
            product.description = coerce_str(description, "description", required=False)

        if image_path is not None:
            image_path = coerce_str(image_path, "image_path", max_length=512)
            image = product.primary_image
            if image is None:
                db.session.add(ProductImage(product_id=product.id, image_path=image_path))
            else:
                image.image_path = image_path

    return product


def delete_product(product_id: int) -> None:
    with transaction():
        product = db.session.get(Product, product_id)
        if product is None:
            raise NotFoundError("product not found")

        ordered = db.session.query(OrderItem.id).filter_by(product_id=product_id).first()
        if ordered:
            raise ConflictError("product is referenced by orders")

        # Images and stock rows go with the product (relationship cascade)
        db.session.delete(product)
