"""
# Connection notifier

Relays login notifications built by the front end. The browser sends Discord
style embeds; only their known fields survive, bounded to Discord's limits.
"""

import logging

from flask import Blueprint, request
from pydantic import ValidationError

from config import get_settings
from forwarder import forward_payload
from guards import ROUTED_METHODS, origin_required, post_only
from rate_limit import rate_limited
from utils import parse_json_body, plain_response
from validators import ConnectionPayload

logger = logging.getLogger(__name__)

bp = Blueprint("webhook_connexion", __name__)

RATE_LIMITER_NAME = "connexion"
RATE_LIMIT_MESSAGE = "Too many requests"


@bp.route(
    "/webhook-connexion",
    methods=ROUTED_METHODS,
    provide_automatic_options=False,
)
@origin_required
@post_only
@rate_limited(RATE_LIMITER_NAME, RATE_LIMIT_MESSAGE)
def webhook_connexion():
    try:
        payload = parse_json_body(request.get_data(as_text=True))
    except ValueError:
        return plain_response("Invalid JSON", 400)

    try:
        safe_payload = ConnectionPayload.model_validate(payload)
    except ValidationError as e:
        logger.info("Rejected connection payload (%s errors)", e.error_count())
        return plain_response("Invalid payload structure", 400)

    return forward_payload(
        get_settings().webhook_connexions,
        safe_payload.model_dump(exclude_none=True),
    )
