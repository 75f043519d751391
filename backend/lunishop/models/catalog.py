from __future__ import annotations

from ..extensions import db


class Product(db.Model):
    """
    Product master data.

    Names are unique across the catalog. Price is stored in minor units;
    order items capture their own copy at order time.
    """
    __tablename__ = "product"
    __table_args__ = (
        db.UniqueConstraint("name", name="uq_product_name"),
        db.CheckConstraint("price >= 0", name="ck_product_price_non_negative"),
        {"sqlite_autoincrement": True},
    )

    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(255), nullable=False)
    description = db.Column(db.Text, nullable=True)
    price = db.Column(db.Integer, nullable=False, default=0)

    images = db.relationship(
        "ProductImage",
        backref="product",
        lazy=True,
        cascade="all, delete",
        order_by="ProductImage.id",
    )

    def __repr__(self) -> str:
        return f"<Product id={self.id} name={self.name!r}>"

    @property
    def primary_image(self) -> "ProductImage | None":
        return self.images[0] if self.images else None

    def to_dict(self) -> dict:
        image = self.primary_image
        return {
            "id": self.id,
            "name": self.name,
            "description": self.description,
            "price": self.price,
            "image": image.to_dict() if image else None,
            "images": [img.to_dict() for img in self.images],
        }


class ProductImage(db.Model):
    __tablename__ = "product_image"
    __table_args__ = {"sqlite_autoincrement": True}

    id = db.Column(db.Integer, primary_key=True)
    product_id = db.Column(
        db.Integer,
        db.ForeignKey("product.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    image_path = db.Column(db.String(512), nullable=False)

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "product_id": self.product_id,
            "image_path": self.image_path,
        }


class SalesOutlet(db.Model):
    """A physical or logical sales location holding its own stock."""
    __tablename__ = "sales_outlet"
    __table_args__ = (
        db.UniqueConstraint("address", name="uq_sales_outlet_address"),
        {"sqlite_autoincrement": True},
    )

    id = db.Column(db.Integer, primary_key=True)
    address = db.Column(db.String(255), nullable=False)

    stock_items = db.relationship(
        "StockItem",
        backref="sales_outlet",
        lazy=True,
        cascade="all, delete",
    )

    def __repr__(self) -> str:
        return f"<SalesOutlet id={self.id} address={self.address!r}>"

    def to_dict(self) -> dict:
        return {"id": self.id, "address": self.address}


class StockItem(db.Model):
    """
    Quantity of one product in one size at one outlet.

    Zero is a valid resting state and is distinct from a missing row.
    Rows are only removed explicitly, never when they reach zero.
    """
    __tablename__ = "product_stock"
    __table_args__ = (
        db.CheckConstraint("amount >= 0", name="ck_product_stock_amount_non_negative"),
        db.Index("ix_product_stock_product", "product_id"),
    )

    sales_outlet_id = db.Column(
        db.Integer,
        db.ForeignKey("sales_outlet.id", ondelete="CASCADE"),
        primary_key=True,
    )
    product_id = db.Column(
        db.Integer,
        db.ForeignKey("product.id", ondelete="CASCADE"),
        primary_key=True,
    )
    size = db.Column(db.Integer, primary_key=True)
    amount = db.Column(db.Integer, nullable=False, default=0)

    product = db.relationship("Product", backref=db.backref("stock_items", lazy=True, cascade="all, delete"))

    def __repr__(self) -> str:
        return (
            f"<StockItem outlet={self.sales_outlet_id} product={self.product_id} "
            f"size={self.size} amount={self.amount}>"
        )

    def to_dict(self) -> dict:
        return {
            "sales_outlet_id": self.sales_outlet_id,
            "product_id": self.product_id,
            "size": self.size,
            "amount": self.amount,
            "product": self.product.to_dict() if self.product else None,
        }
