# Overview: Flask API routes for order operations; parses input and returns JSON responses.

"""
Order API routes

Placement and deletion run inside order_service transactions; these
handlers only parse input, resolve the acting identity, and shape the
response. Stock consistency is the service's job.
"""

from flask import Blueprint, request

from ..decorators import require_any_role, require_auth, require_role
from ..errors import ShopError
from ..permissions import STAFF_ROLES, Role
from ..responses import (
    empty_response,
    error_response,
    item_response,
    list_response,
)
from ..services import order_service
from ..validation import coerce_int, json_object


orders_bp = Blueprint("orders", __name__, url_prefix="/api/v1/orders")
order_items_bp = Blueprint("order_items", __name__, url_prefix="/api/v1/order-items")


@orders_bp.get("")
@require_auth
@require_any_role(*STAFF_ROLES)
def list_orders_route(identity):
    return list_response(order_service.list_orders())


@orders_bp.get("/<int:order_id>")
@require_auth
@require_role(Role.USER)
def get_order_route(order_id: int, identity):
    """Order header plus its items, each with product name and image."""
    try:
        items = order_service.get_order_items(order_id, identity)
        order = order_service.get_order(order_id)

        data = order.to_dict(include_address=True)
        data["items"] = [item.to_dict(include_product=True) for item in items]
        return item_response(data)
    except ShopError as e:
        return error_response(e)


@orders_bp.post("")
@require_auth
@require_role(Role.USER)
def create_order_route(identity):
    """
    Place an order for the caller.

    Body: {"sales_outlet_id": int, "items": [{product_id, size, amount, price}]}
    Staff may place an order on behalf of another user with "user_id".
    """
    try:
        data = json_object(request.get_json(silent=True))
        outlet_id = coerce_int(data.get("sales_outlet_id"), "sales_outlet_id")

        user_id = identity.user_id
        if data.get("user_id") is not None and identity.role in STAFF_ROLES:
            user_id = coerce_int(data.get("user_id"), "user_id")

        order_service.create_order(user_id, outlet_id, data.get("items"))
        return empty_response(201)
    except ShopError as e:
        return error_response(e)


@orders_bp.patch("/<int:order_id>/status")
@require_auth
@require_any_role(*STAFF_ROLES)
def update_order_status_route(order_id: int, identity):
    try:
        data = json_object(request.get_json(silent=True))
        order_service.update_order_status(order_id, data.get("status"))
        return empty_response(200)
    except ShopError as e:
        return error_response(e)


@orders_bp.delete("/<int:order_id>")
@require_auth
@require_role(Role.USER)
def delete_order_route(order_id: int, identity):
    try:
        order_service.delete_order(order_id, identity)
        return empty_response(200)
    except ShopError as e:
        return error_response(e)


@order_items_bp.delete("/<int:order_item_id>")
@require_auth
@require_role(Role.USER)
def delete_order_item_route(order_item_id: int, identity):
    try:
        order_service.delete_order_item(order_item_id, identity)
        return empty_response(200)
    except ShopError as e:
        return error_response(e)
