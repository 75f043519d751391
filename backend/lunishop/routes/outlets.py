# Overview: Flask API routes for sales outlet operations; parses input and returns JSON responses.

"""
Sales outlet API routes

- Outlet CRUD (reads public, writes admin)
- Per-outlet stock listings (public)
- Per-outlet order listing (seller or admin)
"""

from flask import Blueprint, request

from ..decorators import optional_auth, require_any_role, require_auth, require_role
from ..errors import ShopError
from ..permissions import STAFF_ROLES, Role
from ..responses import (
    empty_response,
    error_response,
    item_response,
    list_response,
)
from ..services import catalog_service, order_service
from ..validation import json_object


outlets_bp = Blueprint("outlets", __name__, url_prefix="/api/v1/outlets")


@outlets_bp.get("")
@optional_auth
def list_outlets_route(identity):
    return list_response(catalog_service.list_outlets())


@outlets_bp.get("/<int:outlet_id>")
@optional_auth
def get_outlet_route(outlet_id: int, identity):
    try:
        return item_response(catalog_service.get_outlet(outlet_id))
    except ShopError as e:
        return error_response(e)


@outlets_bp.post("")
@require_auth
@require_role(Role.ADMIN)
def create_outlet_route(identity):
    try:
        data = json_object(request.get_json(silent=True))
        catalog_service.add_outlet(data.get("address"))
        return empty_response(201)
    except ShopError as e:
        return error_response(e)


@outlets_bp.put("/<int:outlet_id>")
@require_auth
@require_role(Role.ADMIN)
def update_outlet_route(outlet_id: int, identity):
    try:
        data = json_object(request.get_json(silent=True))
        catalog_service.update_outlet(outlet_id, data.get("address"))
        return empty_response(200)
    except ShopError as e:
        return error_response(e)


@outlets_bp.delete("/<int:outlet_id>")
@require_auth
@require_role(Role.ADMIN)
def delete_outlet_route(outlet_id: int, identity):
    try:
        catalog_service.delete_outlet(outlet_id)
        return empty_response(200)
    except ShopError as e:
        return error_response(e)


@outlets_bp.get("/<int:outlet_id>/stock")
@optional_auth
def list_outlet_stock_route(outlet_id: int, identity):
    try:
        return list_response(catalog_service.list_outlet_stock(outlet_id))
    except ShopError as e:
        return error_response(e)


@outlets_bp.get("/<int:outlet_id>/stock/<int:product_id>")
@optional_auth
def product_stock_route(outlet_id: int, product_id: int, identity):
    """Size rows of one product at one outlet; empty when it is not stocked there."""
    return list_response(catalog_service.product_stock(outlet_id, product_id))


@outlets_bp.get("/<int:outlet_id>/orders")
@require_auth
@require_any_role(*STAFF_ROLES)
def list_outlet_orders_route(outlet_id: int, identity):
    try:
        orders = order_service.list_outlet_orders(outlet_id)
        return list_response([order.to_dict(include_address=True) for order in orders])
    except ShopError as e:
        return error_response(e)
