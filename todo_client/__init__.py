"""
Flask application factory module.

This module creates and configures the to-do client using the factory
pattern, allowing for different configurations (development, testing,
production).  The application serves server-rendered HTML and keeps no
database: every task is persisted through the remote task service.
"""

from __future__ import annotations

import logging

from flask import Flask

from config import get_config

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)


def create_app(config_name: str | None = None) -> Flask:
    """
    Create and configure the Flask application.

    Args:
        config_name: Configuration environment name.
                     If None, uses FLASK_ENV environment variable.

    Returns:
        Configured Flask application instance with a client controller
        attached to ``app.extensions``.
    """
    app = Flask(__name__)

    # Load configuration
    config_class = get_config(config_name)
    app.config.from_object(config_class)

    logger.info("Creating app with config: %s", config_class.__name__)
    logger.info("Task service: %s", app.config["TASK_SERVICE_URL"])

    # Import inside the factory to avoid circular imports
    from .controller import init_controller
    from .routes.views import views_bp

    init_controller(app)
    app.register_blueprint(views_bp)

    return app
