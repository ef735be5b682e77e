# backend/cafeteria/__init__.py
from flask import Flask, jsonify, request

from .config import Config
from .extensions import db, migrate


CORS_ALLOW_HEADERS = "authorization, x-client-info, apikey, content-type"
CORS_ALLOW_METHODS = "GET,POST,PUT,DELETE,PATCH,OPTIONS"


def create_app(config_overrides: dict | None = None) -> Flask:
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
    from .routes.system import system_bp
    from .routes.menu import menu_bp
    from .routes.orders import orders_bp
    from .routes.payments import payments_bp
    from .routes.wallet import wallet_bp
    from .routes.admin import admin_bp
    from .routes.recommendations import recommendations_bp
    from .routes.assistant import assistant_bp
    from .routes.inventory import inventory_bp
    from .routes.waste import waste_bp

    app.register_blueprint(system_bp)
    app.register_blueprint(menu_bp)
    app.register_blueprint(orders_bp)
    app.register_blueprint(payments_bp)
    app.register_blueprint(wallet_bp)
    app.register_blueprint(admin_bp)
    app.register_blueprint(recommendations_bp)
    app.register_blueprint(assistant_bp)
    app.register_blueprint(inventory_bp)
    app.register_blueprint(waste_bp)

    @app.before_request
    def answer_preflight():
        # Preflight is answered before routing, so unknown paths get CORS too
        if request.method == "OPTIONS":
            return app.response_class("ok", status=200, mimetype="text/plain")
        return None

    @app.before_request
    def reject_non_object_json():
        # Every JSON endpoint takes an object; arrays and scalars are a 400
        if request.method in ("POST", "PUT", "PATCH") and request.is_json:
            body = request.get_json(silent=True)
            if body is not None and not isinstance(body, dict):
                return jsonify({"error": "JSON body must be an object"}), 400
        return None

    @app.after_request
    def add_cors_headers(response):
        response.headers["Access-Control-Allow-Origin"] = "*"
        response.headers["Access-Control-Allow-Headers"] = CORS_ALLOW_HEADERS
        response.headers["Access-Control-Allow-Methods"] = CORS_ALLOW_METHODS
        return response

    @app.errorhandler(404)
    def not_found(_error):
        return jsonify({"error": "Not found"}), 404

    @app.errorhandler(405)
    def method_not_allowed(_error):
        return jsonify({"error": "Method not allowed"}), 405

    @app.errorhandler(500)
    def internal_error(_error):
        db.session.rollback()
        return jsonify({"error": "Internal server error"}), 500

    # Register CLI commands
    from .cli import register_commands
    register_commands(app)

    return app
