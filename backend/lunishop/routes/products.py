# Overview: Flask API routes for products operations; parses input and returns JSON responses.

from flask import Blueprint, request

from ..decorators import optional_auth, require_auth, require_role
from ..errors import ShopError
from ..permissions import Role
from ..responses import (
    empty_response,
    error_response,
    item_response,
    list_response,
)
from ..services import catalog_service
from ..validation import json_object


products_bp = Blueprint("products", __name__, url_prefix="/api/v1/products")


@products_bp.get("")
@optional_auth
def list_products_route(identity):
    return list_response(catalog_service.list_products())


@products_bp.get("/<int:product_id>")
@optional_auth
def get_product_route(product_id: int, identity):
    try:
        return item_response(catalog_service.get_product(product_id))
    except ShopError as e:
        return error_response(e)


@products_bp.post("")
@require_auth
@require_role(Role.ADMIN)
def create_product_route(identity):
    try:
        data = json_object(request.get_json(silent=True))
        catalog_service.add_product(
            name=data.get("name"),
            price=data.get("price"),
            description=data.get("description"),
            image_path=data.get("image_path"),
        )
        return empty_response(201)
    except ShopError as e:
        return error_response(e)


@products_bp.put("/<int:product_id>")
@require_auth
@require_role(Role.ADMIN)
def update_product_route(product_id: int, identity):
    try:
        data = json_object(request.get_json(silent=True))
        catalog_service.update_product(
            product_id,
            name=data.get("name"),
            price=data.get("price"),
            description=data.get("description"),
            image_path=data.get("image_path"),
        )
        return empty_response(200)
    except ShopError as e:
        return error_response(e)


@products_bp.delete("/<int:product_id>")
@require_auth
@require_role(Role.ADMIN)
def delete_product_route(product_id: int, identity):
    try:
        catalog_service.delete_product(product_id)
        return empty_response(200)
    except ShopError as e:
        return error_response(e)
