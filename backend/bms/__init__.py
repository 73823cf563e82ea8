# backend/bms/__init__.py
from flask import Flask, jsonify, redirect, request

from .config import Config
from .extensions import db, migrate



def create_app(config_overrides=None) -> Flask:
    app = Flask(__name__, instance_relative_config=True)
    app.config.from_object(Config)
    if config_overrides:
        app.config.update(config_overrides)

    # Initialize extensions
    db.init_app(app)
    migrate.init_app(app, db)

    # Import models so Alembic can discover metadata reliably
    from . import models  # noqa: F401

    # Register blueprints
    from .routes.auth import auth_bp
    from .routes.dashboard import dashboard_bp
    from .routes.vendors import vendors_bp
    from .routes.products import products_bp
    from .routes.orders import orders_bp
    from .routes.bills import bills_bp
    from .routes.payments import payments_bp
    from .routes.users import users_bp
    from .routes.settings import settings_bp
    from .routes.accounts import accounts_bp

    app.register_blueprint(auth_bp)
    app.register_blueprint(dashboard_bp)
    app.register_blueprint(vendors_bp)
    app.register_blueprint(products_bp)
    app.register_blueprint(orders_bp)
    app.register_blueprint(bills_bp)
    app.register_blueprint(payments_bp)
    app.register_blueprint(users_bp)
    app.register_blueprint(settings_bp)
    app.register_blueprint(accounts_bp)

    # Session context and data API client per request
    from .decorators import LOGIN_PATH, close_client, load_session_context
    from .services.resource_client import AuthorizationError, ResourceError
    from .validation import ValidationError

    app.before_request(load_session_context)
    app.teardown_appcontext(close_client)

    @app.errorhandler(AuthorizationError)
    def handle_authorization_error(e):
        # Session was already cleared by the client's on_unauthorized hook
        return redirect(LOGIN_PATH)

    @app.errorhandler(ValidationError)
    def handle_validation_error(e):
        return jsonify({"error": str(e)}), 400

    @app.errorhandler(ResourceError)
    def handle_resource_error(e):
        app.logger.error("Data API error on %s %s: %s", request.method, request.path, e)
        return jsonify({"error": str(e), "status": e.status}), 502

    @app.after_request
    def add_cors_headers(response):
        origin = request.headers.get("Origin")
        if origin in app.config.get("CORS_ALLOWED_ORIGINS", ()):
            response.headers["Access-Control-Allow-Origin"] = origin
            response.headers["Access-Control-Allow-Credentials"] = "true"
            response.headers["Vary"] = "Origin"
            response.headers["Access-Control-Allow-Headers"] = "Content-Type"
            response.headers["Access-Control-Allow-Methods"] = "GET,POST,PUT,DELETE,PATCH,OPTIONS"
        return response

    # Register CLI commands
    from .cli import register_commands
    register_commands(app)

    return app
