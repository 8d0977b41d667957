import logging

from flask import Blueprint, request
from pydantic import ValidationError

from config import get_settings
from forwarder import forward_payload
from guards import ROUTED_METHODS, origin_required, post_only
from rate_limit import rate_limited
from utils import parse_json_body, plain_response
from validators import ReviewSubmission, build_review_notification, first_error_message

logger = logging.getLogger(__name__)

bp = Blueprint("webhook_avis", __name__)

# stricter than the connection notifier, reviews are a spam target
RATE_LIMITER_NAME = "avis"
RATE_LIMIT_MESSAGE = "Trop d'avis envoyés. Attendez quelques minutes."


@bp.route(
    "/webhook-avis",
    methods=ROUTED_METHODS,
    provide_automatic_options=False,
)
@origin_required
@post_only
@rate_limited(RATE_LIMITER_NAME, RATE_LIMIT_MESSAGE)
def webhook_avis():
    """
    Validate a customer review and announce it on the reviews webhook.

    The client only sends scalar fields; the message itself is always built
    here, so nothing but the bounded values reaches Discord.
    """
    try:
        payload = parse_json_body(request.get_data(as_text=True))
    except ValueError:
        return plain_response("Invalid JSON", 400)

    try:
        review = ReviewSubmission.model_validate(payload)
    except ValidationError as e:
        message = first_error_message(e)
        logger.info("Rejected review: %s", message)
        return plain_response(message, 400)

    return forward_payload(
        get_settings().webhook_avis,
        build_review_notification(review),
    )
