import json
from datetime import datetime, timezone

from flask import make_response


def plain_response(body, status):
    """Short text/plain response used for every error except rate limiting"""
    response = make_response(body, status)
    response.mimetype = "text/plain"
    return response


def _reject_constant(name):
    raise ValueError(f"Unsupported JSON constant: {name}")


def parse_json_body(raw_body):
    """
    Parse a request body as strict JSON.

    NaN and Infinity are refused, as are empty bodies and bodies nested
    deeper than the interpreter can decode. Raises ValueError
    (json.JSONDecodeError is a subclass) on anything that is not valid JSON.
    """
    try:
        return json.loads(raw_body, parse_constant=_reject_constant)
    except RecursionError:
        raise ValueError("JSON body is nested too deeply")


def utc_timestamp():
    """Current UTC time as ISO-8601 with millisecond precision, e.g. 2024-01-31T12:00:00.000Z"""
    now = datetime.now(timezone.utc)
    return now.strftime("%Y-%m-%dT%H:%M:%S.") + f"{now.microsecond // 1000:03d}Z"
