from __future__ import annotations

from ..extensions import db
from ..time_utils import utcnow, to_utc_z

DEFAULT_ORDER_STATUS = "ordered"


class Order(db.Model):
    """
    Order header.

    status_name is free-form; the only rule is that an update must change it.
    Items are owned by the order and go away with it.
    """
    __tablename__ = "order"
    __table_args__ = (
        db.Index("ix_order_user", "user_id"),
        db.Index("ix_order_sales_outlet", "sales_outlet_id"),
        {"sqlite_autoincrement": True},
    )

    id = db.Column(db.Integer, primary_key=True)
    user_id = db.Column(db.Integer, db.ForeignKey("user.id"), nullable=False)
    sales_outlet_id = db.Column(db.Integer, db.ForeignKey("sales_outlet.id"), nullable=False)
    created_at = db.Column(db.DateTime(timezone=True), nullable=False, default=utcnow)
    status_name = db.Column(db.String(64), nullable=False, default=DEFAULT_ORDER_STATUS)

    items = db.relationship(
        "OrderItem",
        backref="order",
        lazy=True,
        cascade="all, delete",
        order_by="OrderItem.id",
    )
    sales_outlet = db.relationship("SalesOutlet")
    user = db.relationship("User", backref=db.backref("orders", lazy=True))

    def __repr__(self) -> str:
        return f"<Order id={self.id} user_id={self.user_id} status={self.status_name!r}>"

    def to_dict(self, include_address: bool = False) -> dict:
        data = {
            "id": self.id,
            "user_id": self.user_id,
            "sales_outlet_id": self.sales_outlet_id,
            "created_at": to_utc_z(self.created_at),
            "status_name": self.status_name,
        }
        if include_address:
            data["sales_outlet_address"] = self.sales_outlet.address if self.sales_outlet else None
        return data


class OrderItem(db.Model):
    __tablename__ = "order_item"
    __table_args__ = (
        db.CheckConstraint("amount > 0", name="ck_order_item_amount_positive"),
        db.Index("ix_order_item_order", "order_id"),
        {"sqlite_autoincrement": True},
    )

    id = db.Column(db.Integer, primary_key=True)
    order_id = db.Column(db.Integer, db.ForeignKey("order.id", ondelete="CASCADE"), nullable=False)
    product_id = db.Column(db.Integer, db.ForeignKey("product.id"), nullable=False, index=True)
    amount = db.Column(db.Integer, nullable=False)
    # Unit price captured when the order was placed
    price = db.Column(db.Integer, nullable=False)
    size = db.Column(db.Integer, nullable=False)

    product = db.relationship("Product")

    def __repr__(self) -> str:
        return f"<OrderItem id={self.id} order_id={self.order_id} product_id={self.product_id}>"

    def to_dict(self, include_product: bool = False) -> dict:
        data = {
            "id": self.id,
            "order_id": self.order_id,
            "product_id": self.product_id,
            "amount": self.amount,
            "price": self.price,
            "size": self.size,
        }
        if include_product:
            image = self.product.primary_image if self.product else None
            data["product_name"] = self.product.name if self.product else None
            data["product_image"] = image.image_path if image else None
        return data
