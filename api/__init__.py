from flask import Flask
from flasgger import Swagger
from flask_cors import CORS

from .config import get_config
from .errors import register_error_handlers
from models import storage  # DBStorage singleton (scoped_session)

API_PREFIX = "/api/v1"

# Minimal Swagger config: exposes /swagger.json and UI at /apidocs
SWAGGER_TEMPLATE = {
    "swagger": "2.0",
    "info": {
        "title": "VideoTube API",
        "version": "1.0.0",
        "description": "REST API for a video-sharing platform: users, tweets, comments, likes, playlists and subscriptions.",
    },
    "basePath": "/",
    "schemes": ["http", "https"],
    "securityDefinitions": {
        "Bearer": {
            "type": "apiKey",
            "name": "Authorization",
            "in": "header",
            "description": "Enter the token with the `Bearer ` prefix, e.g. \"Bearer abcde12345\"."
        }
    }
}

SWAGGER_CONFIG = {
    "headers": [],
    "specs": [
        {
            "endpoint": "apispec_1",
            "route": "/swagger.json",
            "rule_filter": lambda rule: True,   # include all endpoints
            "model_filter": lambda tag: True,   # include all models
        }
    ],
    "static_url_path": "/flasgger_static",
    "swagger_ui": True,
    "specs_route": "/apidocs/",
}


def create_app(config_name: str | None = None, **overrides) -> Flask:
    """
    Application factory: creates and configures the Flask app.
    `overrides` are applied on top of the selected config class
    (tests use this for DATABASE_URL and UPLOAD_FOLDER).
    """
    app = Flask(__name__)

    app.config.from_object(get_config(config_name))
    app.config.update(overrides)

    # Bind storage to the configured database once, at startup
    storage.reload(
        app.config["DATABASE_URL"],
        echo=app.config.get("DB_ECHO", False),
        timeout=app.config.get("DB_TIMEOUT_SECONDS", 30),
    )

    # Credentialed CORS so the token cookies travel with browser requests
    CORS(
        app,
        resources={r"/*": {"origins": app.config.get("CORS_ORIGINS", "*")}},
        supports_credentials=True,
    )

    Swagger(app, template=SWAGGER_TEMPLATE, config=SWAGGER_CONFIG)

    # Global error handlers that return the uniform error envelope
    register_error_handlers(app)

    from .health import bp as health_bp
    from .users import bp as users_bp
    from .likes import bp as likes_bp
    from .tweets import bp as tweets_bp
    from .comments import bp as comments_bp
    from .playlists import bp as playlists_bp
    from .subscriptions import bp as subscriptions_bp
    from .dashboard import bp as dashboard_bp

    app.register_blueprint(health_bp, url_prefix=API_PREFIX)
    app.register_blueprint(users_bp, url_prefix=f"{API_PREFIX}/users")
    app.register_blueprint(likes_bp, url_prefix=f"{API_PREFIX}/likes")
    app.register_blueprint(tweets_bp, url_prefix=f"{API_PREFIX}/tweets")
    app.register_blueprint(comments_bp, url_prefix=f"{API_PREFIX}/comments")
    app.register_blueprint(playlists_bp, url_prefix=f"{API_PREFIX}/playlists")
    app.register_blueprint(subscriptions_bp, url_prefix=f"{API_PREFIX}/subscriptions")
    app.register_blueprint(dashboard_bp, url_prefix=f"{API_PREFIX}/dashboard")

    # Ensure the DB session is removed at the end of each request/app context
    @app.teardown_appcontext
    def remove_session(exception=None):
        storage.close()

    @app.route("/")
    def root():
        return {
            "message": "Welcome to VideoTube API",
            "docs": "/apidocs/",
            "health": f"{API_PREFIX}/healthcheck",
        }, 200

    return app
