# Overview: Request and role decorators for API routes.

"""
Each decorator resolves the caller once, stores it on g.identity, and hands
it to the view as the ``identity`` keyword argument so services receive it
explicitly.

Stack them outermost-first, auth before role:

    @orders_bp.post("")
    @require_auth
    @require_role(Role.USER)
    def create_order_route(identity): ...
"""

from functools import wraps
from flask import current_app, g, request

from .errors import ShopError, UnauthenticatedError
from .permissions import Identity, Role, check_any_role, check_role
from .responses import error_response
from .services import session_service


def bearer_token() -> str | None:
    auth_header = request.headers.get("Authorization")
    if not auth_header or not auth_header.startswith("Bearer "):
        return None
    token = auth_header.split(" ", 1)[1].strip()
    return token or None


def _resolve_identity() -> Identity | None:
    token = bearer_token()
    if token is None:
        return None

    context = session_service.validate_session(token)
    if context is None:
        return None

    g.session_context = context
    return context.identity


def require_auth(f):
    """
    Require a valid bearer session.

    Returns 401 if:
    - No Authorization header
    - Invalid, revoked, or expired token
    """
    @wraps(f)
    def decorated_function(*args, **kwargs):
        if bearer_token() is None:
            return error_response(UnauthenticatedError("Authentication required"))

        identity = _resolve_identity()
        if identity is None:
            return error_response(UnauthenticatedError("Invalid or expired token"))

        g.identity = identity
        kwargs["identity"] = identity
        return f(*args, **kwargs)

    return decorated_function


def optional_auth(f):
    """Public endpoints: a missing or invalid token means anonymous."""
    @wraps(f)
    def decorated_function(*args, **kwargs):
        identity = _resolve_identity() or Identity.anonymous()
        g.identity = identity
        kwargs["identity"] = identity
        return f(*args, **kwargs)

    return decorated_function


def _denied(exc: ShopError, required: str):
    identity = g.get("identity")
    current_app.logger.info(
        "Access denied: %s %s user=%s role=%s required=%s",
        request.method,
        request.path,
        identity.user_id if identity else None,
        identity.role.value if identity else None,
        required,
    )
    return error_response(exc)


def require_role(required: Role):
    """Require a role ranking at least as high as ``required``."""
    def decorator(f):
        @wraps(f)
        def decorated_function(*args, **kwargs):
            identity = kwargs.get("identity") or g.get("identity") or Identity.anonymous()
            try:
                check_role(identity, required)
            except ShopError as exc:
                return _denied(exc, required.value)
            return f(*args, **kwargs)

        return decorated_function
    return decorator


def require_any_role(*roles: Role):
    """Require exactly one of the listed roles (no rank inheritance)."""
    def decorator(f):
        @wraps(f)
        def decorated_function(*args, **kwargs):
            identity = kwargs.get("identity") or g.get("identity") or Identity.anonymous()
            try:
                check_any_role(identity, *roles)
            except ShopError as exc:
                return _denied(exc, "|".join(role.value for role in roles))
            return f(*args, **kwargs)

        return decorated_function
    return decorator
