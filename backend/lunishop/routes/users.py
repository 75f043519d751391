# Overview: Flask API routes for user administration; parses input and returns JSON responses.

from flask import Blueprint, current_app, request

from ..decorators import require_auth, require_role
from ..errors import ShopError, ValidationError
from ..permissions import STAFF_ROLES, Role, check_owner_or_any_role
from ..responses import (
    empty_response,
    error_response,
    item_response,
    list_response,
)
from ..services import order_service, session_service, user_service
from ..validation import json_object


users_bp = Blueprint("users", __name__, url_prefix="/api/v1/users")


@users_bp.get("")
@require_auth
@require_role(Role.ADMIN)
def list_users_route(identity):
    return list_response(user_service.list_users())


@users_bp.get("/<int:user_id>")
@require_auth
def get_user_route(user_id: int, identity):
    try:
        check_owner_or_any_role(identity, user_id, Role.ADMIN)
        return item_response(user_service.get_user(user_id))
    except ShopError as e:
        return error_response(e)


@users_bp.post("")
@require_auth
@require_role(Role.ADMIN)
def create_user_route(identity):
    try:
        data = json_object(request.get_json(silent=True))
        user_service.create_user(
            email=data.get("email"),
            password=data.get("password"),
            name=data.get("name"),
            surname=data.get("surname"),
            phone=data.get("phone"),
            role=data.get("role", Role.USER.value),
        )
        return empty_response(201)
    except ShopError as e:
        return error_response(e)


@users_bp.put("/<int:user_id>")
@require_auth
def update_user_route(user_id: int, identity):
    """
    Profile fields only; a "role" key in the body is ignored here.

    "password" is an admin reset of someone else's account. Owners change
    their own password through /auth/change-password, which checks the old one.
    """
    try:
        check_owner_or_any_role(identity, user_id, Role.ADMIN)
        data = json_object(request.get_json(silent=True))
        if data.get("password") is not None and identity.user_id == user_id:
            raise ValidationError("use /api/v1/auth/change-password to change your own password")

        user_service.update_user(
            user_id,
            email=data.get("email"),
            name=data.get("name"),
            surname=data.get("surname"),
            phone=data.get("phone"),
            password=data.get("password"),
        )

        if data.get("password") is not None:
            revoked_count = session_service.revoke_all_user_sessions(
                user_id=user_id,
                reason="Password reset by admin",
            )
            current_app.logger.info(
                "Password of user %s reset by admin %s; %d session(s) revoked",
                user_id, identity.user_id, revoked_count,
            )
        return empty_response(200)
    except ShopError as e:
        return error_response(e)


@users_bp.patch("/<int:user_id>/role")
@require_auth
@require_role(Role.ADMIN)
def update_user_role_route(user_id: int, identity):
    try:
        data = json_object(request.get_json(silent=True))
        user_service.update_user_role(user_id, data.get("role"))
        return empty_response(200)
    except ShopError as e:
        return error_response(e)


@users_bp.delete("/<int:user_id>")
@require_auth
@require_role(Role.ADMIN)
def delete_user_route(user_id: int, identity):
    try:
        user_service.delete_user(user_id)
        return empty_response(200)
    except ShopError as e:
        return error_response(e)


@users_bp.get("/<int:user_id>/orders")
@require_auth
def list_user_orders_route(user_id: int, identity):
    try:
        check_owner_or_any_role(identity, user_id, *STAFF_ROLES)
        orders = order_service.list_user_orders(user_id)
        return list_response([order.to_dict(include_address=True) for order in orders])
    except ShopError as e:
        return error_response(e)
