"""
Pydantic models turning untrusted client JSON into bounded webhook payloads.

Every limit mirrors what Discord accepts in an embed, so a client can never
push oversized or malformed content through the proxy.
"""

import math
import re
from typing import List, Optional, Union

from pydantic import BaseModel, Field, field_validator, model_validator
from pydantic_core import PydanticCustomError

from utils import utc_timestamp

TITLE_MAX_LENGTH = 256
DESCRIPTION_MAX_LENGTH = 4096
URL_MAX_LENGTH = 512
FIELD_NAME_MAX_LENGTH = 256
FIELD_VALUE_MAX_LENGTH = 1024
MAX_FIELDS_PER_EMBED = 25

USERNAME_MAX_LENGTH = 100
USER_ID_MAX_LENGTH = 20
COMMENT_MAX_LENGTH = 500
COMMENT_MIN_LENGTH = 5
MIN_RATING = 1
MAX_RATING = 5

USER_ID_PATTERN = re.compile(r"\d{15,20}", re.ASCII)
LEADING_INT_PATTERN = re.compile(
    r"\s*([+-]?)(?:0[xX]([0-9a-fA-F]+)|(\d+))", re.ASCII
)

REVIEW_BANNER = "⭐ **Nouvel avis reçu !**"
REVIEW_TITLE = "💬 Avis Client"
REVIEW_COLOR = 16777215
STAR = "⭐"


def to_text(value):
    """Stringify a JSON value (true/false for booleans, 3 rather than 3.0)."""
    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def bounded_text(value, max_length):
    """Falsy values become an empty string, anything else is cut at max_length"""
    if not value:
        return ""
    return to_text(value)[:max_length]


def parse_leading_int(value):
    """
    Integer at the start of the value's text, or None.

    "4 stars" -> 4, 3.7 -> 3, "0x3" -> 3 (a 0x prefix reads as hexadecimal).
    """
    match = LEADING_INT_PATTERN.match(to_text(value))
    if match is None:
        return None
    sign, hex_digits, decimal_digits = match.groups()
    number = int(hex_digits, 16) if hex_digits else int(decimal_digits)
    return -number if sign == "-" else number


class EmbedField(BaseModel):
    name: str = ""
    value: str = ""
    inline: bool = False

    @field_validator("name", mode="before")
    @classmethod
    def bound_name(cls, v):
        return bounded_text(v, FIELD_NAME_MAX_LENGTH)

    @field_validator("value", mode="before")
    @classmethod
    def bound_value(cls, v):
        return bounded_text(v, FIELD_VALUE_MAX_LENGTH)

    @field_validator("inline", mode="before")
    @classmethod
    def truthy_inline(cls, v):
        return bool(v)


class EmbedThumbnail(BaseModel):
    url: str

    @field_validator("url", mode="before")
    @classmethod
    def bound_url(cls, v):
        return bounded_text(v, URL_MAX_LENGTH)


class ClientEmbed(BaseModel):
    """
    One embed as submitted by the browser. Unknown keys are dropped and the
    timestamp is always stamped by the server.
    """

    title: str = ""
    description: str = ""
    color: Union[int, float] = 0
    thumbnail: Optional[EmbedThumbnail] = None
    fields: List[EmbedField] = Field(default_factory=list)
    timestamp: str = Field(default_factory=utc_timestamp)

    @field_validator("title", mode="before")
    @classmethod
    def bound_title(cls, v):
        return bounded_text(v, TITLE_MAX_LENGTH)

    @field_validator("description", mode="before")
    @classmethod
    def bound_description(cls, v):
        return bounded_text(v, DESCRIPTION_MAX_LENGTH)

    @field_validator("color", mode="before")
    @classmethod
    def numeric_color(cls, v):
        if isinstance(v, bool) or not isinstance(v, (int, float)):
            return 0
        # 1e400 decodes to inf, which cannot be sent as JSON
        if isinstance(v, float) and not math.isfinite(v):
            return 0
        return v

    @field_validator("thumbnail", mode="before")
    @classmethod
    def thumbnail_with_url(cls, v):
        if isinstance(v, dict) and v.get("url"):
            return {"url": v["url"]}
        return None

    @field_validator("fields", mode="before")
    @classmethod
    def first_fields(cls, v):
        if not isinstance(v, list):
            return []
        return [f if isinstance(f, dict) else {} for f in v[:MAX_FIELDS_PER_EMBED]]

    @field_validator("timestamp", mode="before")
    @classmethod
    def server_timestamp(cls, v):
        return utc_timestamp()


class ConnectionPayload(BaseModel):
    embeds: List[ClientEmbed]

    @field_validator("embeds", mode="before")
    @classmethod
    def embeds_must_be_a_list(cls, v):
        if not isinstance(v, list):
            raise PydanticCustomError("embeds_type", "embeds must be an array")
        return [embed if isinstance(embed, dict) else {} for embed in v]


class ReviewSubmission(BaseModel):
    """
    A customer review. Checks run in a fixed order and the first failing one
    gives the error message: missing fields, rating, comment, user id.
    """

    username: str
    rating: int
    comment: str
    user_id: str = Field(alias="userId")
    avatar_url: Optional[str] = Field(default=None, alias="avatarUrl")

    @model_validator(mode="before")
    @classmethod
    def require_fields(cls, data):
        required = ("username", "userId", "rating", "comment")
        if not isinstance(data, dict) or not all(data.get(key) for key in required):
            raise PydanticCustomError("missing_fields", "Missing fields")
        return data

    @field_validator("username", mode="before")
    @classmethod
    def bound_username(cls, v):
        return to_text(v)[:USERNAME_MAX_LENGTH]

    @field_validator("rating", mode="before")
    @classmethod
    def rating_in_range(cls, v):
        rating = parse_leading_int(v)
        if rating is None or not MIN_RATING <= rating <= MAX_RATING:
            raise PydanticCustomError("invalid_rating", "Invalid rating")
        return rating

    @field_validator("comment", mode="before")
    @classmethod
    def comment_long_enough(cls, v):
        comment = to_text(v)[:COMMENT_MAX_LENGTH]
        if len(comment.strip()) < COMMENT_MIN_LENGTH:
            raise PydanticCustomError("comment_too_short", "Comment too short")
        return comment

    @field_validator("user_id", mode="before")
    @classmethod
    def numeric_user_id(cls, v):
        user_id = to_text(v)
        if not USER_ID_PATTERN.fullmatch(user_id):
            raise PydanticCustomError("invalid_user_id", "Invalid user ID")
        return user_id[:USER_ID_MAX_LENGTH]

    @field_validator("avatar_url", mode="before")
    @classmethod
    def bound_avatar_url(cls, v):
        return bounded_text(v, URL_MAX_LENGTH) or None


def first_error_message(exc):
    """Message of the first failing check of a pydantic ValidationError"""
    return exc.errors()[0]["msg"]


def build_review_notification(review):
    """Fixed-shape webhook message announcing a validated review."""
    embed = {
        "title": REVIEW_TITLE,
        "color": REVIEW_COLOR,
    }
    if review.avatar_url:
        embed["thumbnail"] = {"url": review.avatar_url}
    embed["fields"] = [
        {"name": "Utilisateur", "value": review.username, "inline": True},
        {"name": "ID", "value": review.user_id, "inline": True},
        {"name": "Note", "value": STAR * review.rating, "inline": False},
        {"name": "Commentaire", "value": review.comment, "inline": False},
    ]
    embed["timestamp"] = utc_timestamp()

    return {"content": REVIEW_BANNER, "embeds": [embed]}
