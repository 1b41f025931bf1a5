from flask import Blueprint, jsonify, request

from ..exceptions import InvalidRateInputError
from ..services.common import to_int_safe
from ..utils.decorators import json_body_required, pricing_service

bp = Blueprint("rates", __name__, url_prefix="/api/rates")


def _tiers(source, suffix="Rate"):
    return (
        source.get(f"daily{suffix}"),
        source.get(f"weekly{suffix}"),
        source.get(f"monthly{suffix}"),
    )


@bp.post("/optimal")
@json_body_required
def calculate_optimal(payload):
    """Cheapest day/week/month mix covering totalDays."""
    try:
        result = pricing_service().optimize_rate(to_int_safe(payload.get("totalDays")), *_tiers(payload))
    except InvalidRateInputError as e:
        return jsonify({"message": e.message}), 400
    return jsonify(result.to_dict())


@bp.post("/extra")
@json_body_required
def calculate_extra(payload):
    """Same optimization for an extra, scaled by quantity."""
    try:
        result = pricing_service().optimize_extra_rate(
            to_int_safe(payload.get("totalDays")),
            to_int_safe(payload.get("quantity")),
            *_tiers(payload, suffix="Price"),
        )
    except InvalidRateInputError as e:
        return jsonify({"message": e.message}), 400
    return jsonify(result.to_dict())


@bp.post("/compare")
@json_body_required
def compare_rates(payload):
    """Simple tier rule vs optimized cost."""
    try:
        result = pricing_service().compare_rates(to_int_safe(payload.get("totalDays")), *_tiers(payload))
    except InvalidRateInputError as e:
        return jsonify({"message": e.message}), 400
    return jsonify(result.to_dict())


@bp.get("/simple")
def calculate_simple():
    args = request.args
    total_days = to_int_safe(args.get("totalDays"))
    try:
        cost = pricing_service().simple_rate(total_days, *_tiers(args))
    except InvalidRateInputError as e:
        return jsonify({"message": e.message}), 400
    return jsonify({"totalDays": total_days, "totalCost": cost, "method": "Simple"})
