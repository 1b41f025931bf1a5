from flask import Blueprint, jsonify

from ..utils.constants import QuoteStatus
from ..utils.decorators import json_body_required, pricing_service

bp = Blueprint("costs", __name__, url_prefix="/api/cost")

_HTTP_STATUS = {
    QuoteStatus.OK: 200,
    QuoteStatus.UNAVAILABLE: 200,
    QuoteStatus.INVALID: 400,
    QuoteStatus.NOT_FOUND: 404,
}


@bp.post("/calculate")
@json_body_required
def calculate_cost(payload):
    """
    Full booking cost breakdown.
    - 200 with the breakdown, or with isAvailable=false when the car is booked
    - 400 for invalid input, 404 for an unknown car
    """
    result = pricing_service().quote_booking_cost(
        car_id=payload.get("carId"),
        start_date=payload.get("startDate"),
        end_date=payload.get("endDate"),
        pickup_branch_id=payload.get("pickupBranchId"),
        return_branch_id=payload.get("returnBranchId"),
        extra_ids=payload.get("extraIds") or payload.get("extras") or [],
        promo_code=payload.get("promoCode"),
        loyalty_points_to_redeem=payload.get("loyaltyPointsToRedeem"),
        user_id=payload.get("userId"),
        strategy=payload.get("pricingStrategy"),
        exclude_booking_id=payload.get("excludeBookingId"),
    )
    return jsonify(result.to_dict()), _HTTP_STATUS.get(result.status, 500)
