import logging
from functools import wraps

from flask import request

from config import get_settings
from utils import plain_response

logger = logging.getLogger(__name__)

# Every method is routed to the view so the origin check always runs before
# the method check.
ROUTED_METHODS = ["GET", "HEAD", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"]


def has_allowed_origin():
    return request.headers.get("Origin", "") == get_settings().allowed_origin


def forbidden_origin_response():
    logger.info("Rejected request from origin %r", request.headers.get("Origin"))
    return plain_response("Forbidden", 403)


def method_not_allowed_response():
    return plain_response("Method Not Allowed", 405)


def origin_required(f):
    """
    Only let through requests whose Origin header is exactly the allowed one.

    This is a browser capability check, not authentication: any non-browser
    client can set the header.
    """

    @wraps(f)
    def decorated(*args, **kwargs):
        if not has_allowed_origin():
            return forbidden_origin_response()
        return f(*args, **kwargs)

    return decorated


def post_only(f):
    @wraps(f)
    def decorated(*args, **kwargs):
        if request.method != "POST":
            return method_not_allowed_response()
        return f(*args, **kwargs)

    return decorated


def cors_headers():
    return {"Access-Control-Allow-Origin": get_settings().allowed_origin}
