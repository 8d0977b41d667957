"""POST /.netlify/functions/webhook-avis"""

import pytest

from tests.helpers import AVIS_PATH, AVIS_URL, headers, valid_review


def post(client, body=None, data=None, ip=None):
    if data is not None:
        return client.post(AVIS_PATH, data=data, headers=headers(ip=ip))
    return client.post(AVIS_PATH, json=body, headers=headers(ip=ip))


def error_of(response):
    assert response.status_code == 400
    return response.get_data(as_text=True)


def test_forwards_review_notification(client, webhook):
    response = post(client, valid_review(rating=3))

    assert response.status_code == 200
    assert response.get_json() == {"success": True}
    assert webhook.calls[0]["url"] == AVIS_URL
    forwarded = webhook.last_payload
    assert forwarded["content"] == "⭐ **Nouvel avis reçu !**"
    fields = {f["name"]: f["value"] for f in forwarded["embeds"][0]["fields"]}
    assert fields == {
        "Utilisateur": "alice",
        "ID": "123456789012345678",
        "Note": "⭐⭐⭐",
        "Commentaire": "Great service, thanks!",
    }


def test_extra_client_keys_are_not_forwarded(client, webhook):
    post(client, valid_review(content="@everyone", embeds=[{"title": "x"}]))

    forwarded = webhook.last_payload
    assert forwarded["content"] == "⭐ **Nouvel avis reçu !**"
    assert forwarded["embeds"][0]["title"] == "💬 Avis Client"


@pytest.mark.parametrize("rating", [0, 6, "abc"])
def test_bad_rating_rejected(client, webhook, rating):
    response = post(client, valid_review(rating=rating))

    assert response.status_code == 400
    assert webhook.calls == []


def test_rating_error_messages(client, webhook):
    assert error_of(post(client, valid_review(rating=6), ip="a")) == "Invalid rating"
    assert error_of(post(client, valid_review(rating="abc"), ip="b")) == "Invalid rating"
    assert error_of(post(client, valid_review(rating=0), ip="c")) == "Missing fields"


def test_short_user_id_rejected(client, webhook):
    assert error_of(post(client, valid_review(userId="123"))) == "Invalid user ID"


def test_fifteen_digit_user_id_admitted(client, webhook):
    response = post(client, valid_review(userId="123456789012345"))

    assert response.status_code == 200


def test_short_comment_rejected(client, webhook):
    assert error_of(post(client, valid_review(comment="hi"))) == "Comment too short"


def test_long_comment_truncated_to_500(client, webhook):
    post(client, valid_review(comment="a" * 600))

    comment = webhook.last_payload["embeds"][0]["fields"][3]["value"]
    assert comment == "a" * 500


@pytest.mark.parametrize("missing", ["username", "userId", "rating", "comment"])
def test_missing_fields(client, webhook, missing):
    body = valid_review()
    del body[missing]

    assert error_of(post(client, body, ip=missing)) == "Missing fields"


@pytest.mark.parametrize("data", ["null", "[]", '"review"', "5"])
def test_non_object_body(client, webhook, data):
    assert error_of(post(client, data=data)) == "Missing fields"


def test_invalid_json(client, webhook):
    assert error_of(post(client, data="{not json")) == "Invalid JSON"


def test_avatar_is_optional(client, webhook):
    body = valid_review()
    del body["avatarUrl"]

    post(client, body)

    assert "thumbnail" not in webhook.last_payload["embeds"][0]


def test_unconfigured_webhook(app, client, webhook):
    app.config["WEBHOOK_PROXY_SETTINGS"].webhook_avis = None

    response = post(client, valid_review())

    assert response.status_code == 500
    assert response.get_data(as_text=True) == "Webhook not configured"
    assert webhook.calls == []


def test_validation_happens_before_configuration_check(app, client, webhook):
    app.config["WEBHOOK_PROXY_SETTINGS"].webhook_avis = None

    assert error_of(post(client, valid_review(comment="hi"))) == "Comment too short"


def test_deeply_nested_json_is_rejected(client, webhook):
    response = post(client, data="[" * 100_000 + "]" * 100_000)

    assert error_of(response) == "Invalid JSON"
    assert webhook.calls == []
