from types import SimpleNamespace
from typing import Any, Dict, Optional

from flask import current_app, jsonify, request

from .errors import APIError, PayloadError


def _build_success_payload(data: Optional[Any], message: str) -> Dict[str, Any]:
    return {
        "status": "ok",
        "message": message,
        "data": data,
    }


def _build_error_payload(error: Any, message: str) -> Dict[str, Any]:
    return {
        "status": "error",
        "message": message,
        "error": error,
    }


def make_ok(data: Optional[Any] = None, message: str = "success", status_code: int = 200):
    """Return a standardized success response."""
    payload = _build_success_payload(data, message)
    response = jsonify(payload)
    return response, status_code


def make_error(error: Any, message: str = "An error occurred", status_code: int = 400):
    """Return a standardized error response."""
    if isinstance(error, (APIError, PayloadError)):
        error = error.to_dict()

    payload = _build_error_payload(error, message)
    response = jsonify(payload)
    return response, status_code


def json_body() -> Dict[str, Any]:
    """Request JSON body as a dict; anything else reads as empty."""
    body = request.get_json(silent=True)
    return body if isinstance(body, dict) else {}


def get_services() -> SimpleNamespace:
    """Settings and collaborators registered by ``create_app``."""
    return current_app.extensions["match_forecaster"]
