import logging

import requests
from flask import jsonify

from guards import cors_headers
from utils import plain_response

logger = logging.getLogger(__name__)


def forward_payload(webhook_url, payload):
    """
    POST a sanitized payload to the secret webhook and build the client response.

    - no URL configured: 500, nothing is sent
    - downstream answered outside 2xx: 502
    - the request itself failed (DNS, connection, timeout...): 502

    Nothing is retried. The webhook URL never appears in logs or responses.
    """
    if not webhook_url:
        logger.error("Webhook URL is not configured")
        return plain_response("Webhook not configured", 500)

    try:
        response = requests.post(
            webhook_url,
            json=payload,
            headers={"Content-Type": "application/json"},
        )
    except requests.RequestException as e:
        logger.warning("Webhook request failed: %s", type(e).__name__)
        return plain_response("Network error", 502)

    if not 200 <= response.status_code < 300:
        logger.warning("Webhook answered with status %s", response.status_code)
        return plain_response("Discord webhook failed", 502)

    logger.info("Payload forwarded (status %s)", response.status_code)
    return jsonify({"success": True}), 200, cors_headers()
