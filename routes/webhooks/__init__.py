from flask import Blueprint

from . import connection, review

webhooks_blueprint = Blueprint("webhooks", __name__)
webhooks_blueprint.register_blueprint(connection.bp)
webhooks_blueprint.register_blueprint(review.bp)
