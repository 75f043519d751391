# Overview: JSON success envelopes and plain-text error responses.

from flask import Response, jsonify

from .errors import InternalError, ShopError


def list_response(items: list, status: int = 200):
    data = [item.to_dict() if hasattr(item, "to_dict") else item for item in items]
    return jsonify({"success": True, "data": data, "count": len(data)}), status


def item_response(item, status: int = 200):
    data = item.to_dict() if hasattr(item, "to_dict") else item
    return jsonify({"success": True, "data": data}), status


def empty_response(status: int = 200) -> Response:
    """Bare status for mutations."""
    return Response(status=status)


def error_response(exc: ShopError) -> Response:
    return Response(exc.message, status=exc.status_code, mimetype="text/plain")


def internal_error_response() -> Response:
    return error_response(InternalError("Internal server error"))
