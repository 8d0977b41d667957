"""Shared constants and request builders for the proxy tests."""

ALLOWED_ORIGIN = "https://devcenter.vyral-studio.fr"
CONNEXION_URL = "https://discord.test/api/webhooks/1/connexions"
AVIS_URL = "https://discord.test/api/webhooks/2/avis"

CONNEXION_PATH = "/.netlify/functions/webhook-connexion"
AVIS_PATH = "/.netlify/functions/webhook-avis"


class FakeClock:
    def __init__(self, now=1_000_000.0):
        self.now = now

    def __call__(self):
        return self.now

    def advance(self, seconds):
        self.now += seconds


class FakeResponse:
    def __init__(self, status_code):
        self.status_code = status_code


class WebhookRecorder:
    """Replacement for requests.post recording every outbound call."""

    def __init__(self):
        self.calls = []
        self.status_code = 204
        self.error = None

    def __call__(self, url, json=None, headers=None, **kwargs):
        self.calls.append({"url": url, "json": json, "headers": headers, **kwargs})
        if self.error is not None:
            raise self.error
        return FakeResponse(self.status_code)

    @property
    def last_payload(self):
        return self.calls[-1]["json"]


def headers(origin=ALLOWED_ORIGIN, ip=None):
    result = {}
    if origin is not None:
        result["Origin"] = origin
    if ip is not None:
        result["X-Forwarded-For"] = ip
    return result


def valid_review(**overrides):
    review = {
        "username": "alice",
        "userId": "123456789012345678",
        "rating": 4,
        "comment": "Great service, thanks!",
        "avatarUrl": "https://cdn.discordapp.test/avatars/alice.png",
    }
    review.update(overrides)
    return review


def connection_payload(**embed):
    return {"embeds": [embed or {"title": "Connexion", "description": "alice logged in"}]}
