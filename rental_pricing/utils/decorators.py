from functools import wraps

from flask import current_app, jsonify, request


def json_body_required(fn):
    """Pass the request's JSON object to the view as `payload`; 400 if it is not one."""
    @wraps(fn)
    def wrapper(*args, **kwargs):
        payload = request.get_json(silent=True)
        if not isinstance(payload, dict):
            return jsonify({"success": False, "message": "Request body must be a JSON object"}), 400
        return fn(payload, *args, **kwargs)

    return wrapper


def pricing_service():
    """The PricingService registered on the current app by create_app()."""
    return current_app.extensions["pricing_service"]
