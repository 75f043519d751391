# Overview: Flask API routes for auth operations; parses input and returns JSON responses.

# backend/lunishop/routes/auth.py
"""
Authentication API routes

- Self-registration creates plain user accounts
- Login issues a bearer session token
- Logout revokes it, refresh swaps it for a new one
"""

from flask import Blueprint, request, jsonify, current_app

from ..errors import ShopError, UnauthenticatedError, ValidationError
from ..responses import empty_response, error_response, item_response
from ..services import auth_service
from ..services import session_service
from ..services import user_service
from ..decorators import bearer_token, require_auth
from ..validation import json_object


auth_bp = Blueprint("auth", __name__, url_prefix="/api/v1/auth")


def _auth_payload(user, session, token: str) -> dict:
    return {
        "user": user.to_dict(),
        "access_token": token,
        "expires_at": session.to_dict()["expires_at"],
    }


@auth_bp.post("/register")
def register_route():
    """
    Create a plain user account and log it in.

    Returns 201 with user info and session token.
    """
    try:
        data = json_object(request.get_json(silent=True))

        if not data.get("email") or not data.get("password") or not data.get("name"):
            raise ValidationError("Email, password and name are required")

        user = auth_service.register(
            email=data.get("email"),
            password=data.get("password"),
            name=data.get("name"),
            surname=data.get("surname"),
            phone=data.get("phone"),
        )
        session, token = session_service.create_session(
            user_id=user.id,
            user_agent=request.headers.get("User-Agent"),
            ip_address=request.remote_addr,
        )
        return jsonify(_auth_payload(user, session, token)), 201

    except ShopError as e:
        return error_response(e)


@auth_bp.post("/login")
def login_route():
    """
    Authenticate user and create session token.

    Token must be included in Authorization header for protected routes.
    """
    try:
        data = json_object(request.get_json(silent=True))
        email = data.get("email")
        password = data.get("password")

        if not all([email, password]):
            raise ValidationError("Email and password are required")

        user = auth_service.authenticate(email, password)
        if not user:
            current_app.logger.info("Failed login attempt from %s", request.remote_addr)
            raise UnauthenticatedError("Invalid credentials")

        session, token = session_service.create_session(
            user_id=user.id,
            user_agent=request.headers.get("User-Agent"),
            ip_address=request.remote_addr,
        )
        return jsonify(_auth_payload(user, session, token)), 200

    except ShopError as e:
        return error_response(e)


@auth_bp.post("/logout")
def logout_route():
    """
    Revoke session token (logout).

    Expects Authorization header: Bearer <token>
    """
    try:
        token = bearer_token()
        if not token:
            raise UnauthenticatedError("Authorization header required")

        if not session_service.revoke_session(token, reason="User logout"):
            raise UnauthenticatedError("Invalid or expired token")

        return empty_response(200)

    except ShopError as e:
        return error_response(e)


@auth_bp.post("/refresh")
def refresh_route():
    """Exchange a valid token for a fresh one; the old token stops working."""
    try:
        token = bearer_token()
        if not token:
            raise UnauthenticatedError("Authorization header required")

        rotated = session_service.rotate_session(
            token,
            user_agent=request.headers.get("User-Agent"),
            ip_address=request.remote_addr,
        )
        if rotated is None:
            raise UnauthenticatedError("Invalid refresh token")

        session, new_token = rotated
        return jsonify(_auth_payload(session.user, session, new_token)), 200

    except ShopError as e:
        return error_response(e)


@auth_bp.get("/me")
@require_auth
def profile_route(identity):
    try:
        return item_response(user_service.get_user(identity.user_id))
    except ShopError as e:
        return error_response(e)


@auth_bp.post("/change-password")
@require_auth
def change_password_route(identity):
    try:
        data = json_object(request.get_json(silent=True))
        old_password = data.get("old_password")
        new_password = data.get("new_password")

        if not old_password or not new_password:
            raise ValidationError("Old and new passwords are required")

        auth_service.change_password(identity.user_id, old_password, new_password)
        return empty_response(200)

    except ShopError as e:
        return error_response(e)
