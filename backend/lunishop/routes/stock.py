# Overview: Flask API routes for stock ledger operations; parses input and returns JSON responses.

from flask import Blueprint, request

from ..decorators import require_any_role, require_auth
from ..errors import ShopError
from ..permissions import STAFF_ROLES
from ..responses import empty_response, error_response
from ..services import inventory_service
from ..validation import coerce_int, json_object


stock_bp = Blueprint("stock", __name__, url_prefix="/api/v1/stock")


@stock_bp.post("")
@require_auth
@require_any_role(*STAFF_ROLES)
def add_stock_route(identity):
    """Create a stock row. The (outlet, product, size) triple must be new."""
    try:
        data = json_object(request.get_json(silent=True))
        inventory_service.add_stock_item(
            coerce_int(data.get("sales_outlet_id"), "sales_outlet_id"),
            coerce_int(data.get("product_id"), "product_id"),
            data.get("size"),
            data.get("amount"),
        )
        return empty_response(201)
    except ShopError as e:
        return error_response(e)


@stock_bp.put("/<int:outlet_id>/<int:product_id>/<int:size>")
@require_auth
@require_any_role(*STAFF_ROLES)
def update_stock_route(outlet_id: int, product_id: int, size: int, identity):
    try:
        data = json_object(request.get_json(silent=True))
        inventory_service.update_stock_amount(outlet_id, product_id, size, data.get("amount"))
        return empty_response(200)
    except ShopError as e:
        return error_response(e)


@stock_bp.delete("/<int:outlet_id>/<int:product_id>")
@require_auth
@require_any_role(*STAFF_ROLES)
def delete_stock_route(outlet_id: int, product_id: int, identity):
    """Without ?size= every size row of the product at the outlet goes."""
    try:
        size = request.args.get("size")
        if size is not None:
            size = coerce_int(size, "size")
        inventory_service.delete_stock_item(outlet_id, product_id, size)
        return empty_response(200)
    except ShopError as e:
        return error_response(e)
