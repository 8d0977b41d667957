import logging

from flask import Flask

from config import SETTINGS_KEY, Settings
from guards import forbidden_origin_response, has_allowed_origin, method_not_allowed_response
from rate_limit import RATE_LIMITERS_KEY, FixedWindowRateLimiter
from routes.webhooks import connection, review, webhooks_blueprint


def create_app(settings=None, clock=None):
    """
    Build the webhook proxy application.

    ``settings`` defaults to the process environment. ``clock`` replaces
    time.time in the rate limiters.
    """
    if settings is None:
        settings = Settings.from_env()

    app = Flask(__name__)
    app.config[SETTINGS_KEY] = settings

    limiter_options = {} if clock is None else {"clock": clock}
    app.extensions[RATE_LIMITERS_KEY] = {
        connection.RATE_LIMITER_NAME: FixedWindowRateLimiter(
            settings.connexion_rate_limit.window_seconds,
            settings.connexion_rate_limit.max_requests,
            **limiter_options,
        ),
        review.RATE_LIMITER_NAME: FixedWindowRateLimiter(
            settings.avis_rate_limit.window_seconds,
            settings.avis_rate_limit.max_requests,
            **limiter_options,
        ),
    }

    app.register_blueprint(webhooks_blueprint, url_prefix=settings.functions_prefix)

    # methods that are not routed at all (TRACE, custom verbs) end up here
    @app.errorhandler(405)
    def method_not_allowed(error):
        if not has_allowed_origin():
            return forbidden_origin_response()
        return method_not_allowed_response()

    return app


app = create_app()


if __name__ == "__main__":
    settings = app.config[SETTINGS_KEY]
    logging.basicConfig(
        level=settings.log_level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    app.run(host=settings.host, port=settings.port)
