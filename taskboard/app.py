import os
from datetime import timedelta

from flask import Flask, jsonify
from flask_cors import CORS
from flask_jwt_extended import JWTManager
from pymongo.errors import PyMongoError
from werkzeug.exceptions import HTTPException

from taskboard.errors import INTERNAL_ERROR_MESSAGE, ConfigurationError, ErrorKind, TaskboardError


def create_app(config_overrides=None, mongo_client=None):
    """Build the Flask app.

    ``config_overrides`` is applied on top of ``taskboard.config.Config``;
    ``mongo_client`` replaces the lazily created ``MongoClient`` (tests pass
    a mongomock client here).
    """
    app = Flask(__name__)
    app.config.from_object("taskboard.config.Config")
    if config_overrides:
        app.config.update(config_overrides)

    # Derived settings follow whatever TTL / environment the overrides chose
    app.config.setdefault("JWT_COOKIE_SECURE", app.config["ENV"] == "production")
    app.config["JWT_ACCESS_TOKEN_EXPIRES"] = timedelta(seconds=app.config["SESSION_TTL_SECONDS"])

    app.logger.setLevel(app.config["LOG_LEVEL"])
    # Task and user dicts are built in wire order
    app.json.sort_keys = False

    # Core extensions
    CORS(app, resources={r"/api/*": {"origins": app.config["CORS_ORIGINS"]}}, supports_credentials=True)
    jwt = JWTManager(app)
    _register_jwt_callbacks(app, jwt)

    from taskboard.utils.db import get_mongo, init_app as init_db

    init_db(app, client=mongo_client)

    # Register blueprints
    from taskboard.routes.auth_routes import auth_bp
    from taskboard.routes.task_routes import tasks_bp

    app.register_blueprint(auth_bp, url_prefix="/api/auth")
    app.register_blueprint(tasks_bp, url_prefix="/api/tasks")

    @app.get("/api/health")
    def health():
        try:
            get_mongo().ping()
        except (PyMongoError, ConfigurationError) as exc:
            app.logger.warning("Health check could not reach MongoDB: %s", exc)
            return jsonify(status="degraded", service="Taskboard API", database="unavailable"), 503
        return jsonify(status="ok", service="Taskboard API", database="ok"), 200

    @app.errorhandler(TaskboardError)
    def taskboard_error(err):
        if err.kind is ErrorKind.INTERNAL:
            app.logger.error("Unclassified application error: %s", err.message)
            return jsonify(error=INTERNAL_ERROR_MESSAGE), 500
        return jsonify(error=err.message), err.status_code

    @app.errorhandler(HTTPException)
    def http_error(err):
        if err.code is None or err.code < 400:
            # Routing redirects are not errors
            return err
        return jsonify(error=err.name), err.code

    @app.errorhandler(Exception)
    def server_error(err):
        app.logger.exception("Unhandled error: %s", err)
        return jsonify(error=INTERNAL_ERROR_MESSAGE), 500

    return app


def _register_jwt_callbacks(app, jwt):
    # Every token failure answers the same way; the reason only goes to the log
    def unauthorized(reason):
        app.logger.debug("Rejected request without a valid session: %s", reason)
        return jsonify(error="Unauthorized"), 401

    jwt.unauthorized_loader(unauthorized)
    jwt.invalid_token_loader(unauthorized)

    @jwt.expired_token_loader
    def expired(_jwt_header, _jwt_payload):
        return unauthorized("token expired")


if __name__ == "__main__":
    # Direct run support: python -m taskboard.app
    create_app().run(
        host=os.environ.get("HOST", "127.0.0.1"),
        port=int(os.environ.get("PORT", "5000")),
        debug=os.environ.get("FLASK_DEBUG", "0") == "1",
    )
