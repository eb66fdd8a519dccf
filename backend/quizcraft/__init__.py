from flask import Flask, jsonify
from sqlalchemy.exc import SQLAlchemyError
from quizcraft.config import config_map
# importing the quizcraft.db subpackage rebinds a module-level "db" name
from quizcraft import extensions
import logging
import os

log = logging.getLogger(__name__)


def create_app(env: str = None) -> Flask:
    app = Flask(__name__)

    env = env or os.getenv("FLASK_ENV", "development")
    app.config.from_object(config_map.get(env, config_map["default"]))

    logging.basicConfig(
        level=app.config["LOG_LEVEL"],
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    # Init extensions
    extensions.db.init_app(app)
    extensions.migrate.init_app(app, extensions.db)
    extensions.jwt.init_app(app)

    _register_error_handlers(app)

    with app.app_context():
        # Import models so Flask-Migrate can detect them
        from quizcraft.db.models import User, Quiz, QuizAttempt, Result  # noqa: F401

        # Register blueprints
        from quizcraft.api.auth import auth_bp
        from quizcraft.api.quizzes import quizzes_bp
        from quizcraft.api.attempts import attempts_bp
        from quizcraft.api.results import results_bp
        from quizcraft.api.users import users_bp
        app.register_blueprint(auth_bp)
        app.register_blueprint(quizzes_bp)
        app.register_blueprint(attempts_bp)
        app.register_blueprint(results_bp)
        app.register_blueprint(users_bp)

    return app


def _register_error_handlers(app: Flask) -> None:
    @app.errorhandler(SQLAlchemyError)
    def _database_error(exc):
        log.error("database error: %s", exc)
        extensions.db.session.rollback()
        return jsonify({"error": "database unavailable, please try again"}), 503

    @app.errorhandler(404)
    def _not_found(exc):
        return jsonify({"error": "not found"}), 404

    @app.errorhandler(405)
    def _method_not_allowed(exc):
        return jsonify({"error": "method not allowed"}), 405
