import logging

from flask import Flask, jsonify
from werkzeug.exceptions import HTTPException

from blogfeed.config import Config
from blogfeed.db import db
from blogfeed.errors import ServiceError
from blogfeed.extensions.extensions import jwt, ma, socketio


def _configure_logging(app):
    level = getattr(logging, str(app.config.get("LOG_LEVEL", "INFO")), logging.INFO)
    if not logging.getLogger().handlers:
        logging.basicConfig(
            level=level,
            format="%(asctime)s %(levelname)s %(name)s - %(message)s",
        )
    logging.getLogger("blogfeed").setLevel(level)
    app.logger.setLevel(level)


def _register_error_handlers(app):
    @app.errorhandler(ServiceError)
    def handle_service_error(error):
        return jsonify(error.to_dict()), error.status_code

    @app.errorhandler(Exception)
    def handle_unexpected_error(error):
        if isinstance(error, HTTPException):
            return error
        db.session.rollback()
        app.logger.exception("Unhandled error")
        return jsonify({"message": "Internal server error"}), 500


def _build_services(app):
    from blogfeed.services.image_service import ImageLifecycleManager
    from blogfeed.services.notification_service import NotificationBroadcaster
    from blogfeed.services.post_service import PostService

    spawn = socketio.start_background_task if app.config["IMAGE_CLEANUP_ASYNC"] else None
    images = ImageLifecycleManager(app, spawn=spawn)
    broadcaster = NotificationBroadcaster(socketio)

    app.extensions["image_lifecycle"] = images
    app.extensions["broadcaster"] = broadcaster
    app.extensions["post_service"] = PostService(
        broadcaster=broadcaster,
        images=images,
        per_page=app.config["POSTS_PER_PAGE"],
    )


def create_app(test_config=None):
    app = Flask(__name__)
    app.config.from_object(Config)
    if test_config:
        app.config.update(test_config)

    _configure_logging(app)

    db.init_app(app)
    jwt.init_app(app)
    ma.init_app(app)
    socketio.init_app(app, cors_allowed_origins=app.config["CORS_ALLOWED_ORIGINS"])

    from blogfeed.models import post_model, user_model  # noqa: F401
    from blogfeed.routes.auth_routes import auth_bp
    from blogfeed.routes.image_routes import image_bp
    from blogfeed.routes.media_routes import media_bp
    from blogfeed.routes.post_routes import post_bp
    from blogfeed.routes.user_routes import user_bp
    from blogfeed.socket_events import register_socket_events

    app.register_blueprint(auth_bp, url_prefix="/api/auth")
    app.register_blueprint(post_bp, url_prefix="/api")
    app.register_blueprint(user_bp, url_prefix="/api")
    app.register_blueprint(image_bp)
    app.register_blueprint(media_bp)

    _register_error_handlers(app)
    _build_services(app)
    register_socket_events()

    with app.app_context():
        db.create_all()

    app.logger.debug("Application created and configured")
    return app
