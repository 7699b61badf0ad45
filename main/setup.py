# python imports
import logging
import time

# package imports
from flask import Flask
from flask_migrate import Migrate
from flask_cors import CORS
from flask_smorest import Api

# app imports
from main.config import settings
from main.logger import setup_logging
from main.errors import handle_error
from main.middleware import RequestLoggingMiddleware
from main.routes import register_blueprints, register_commands, create_root_routes
from main.tasks import create_celery_app

logger = logging.getLogger(__name__)


def configure_app(app):
    """Configure Flask application"""
    app.config.from_object(settings)

    from external.database import db, shutdown_session

    db.init_app(app)
    Migrate(app, db)
    CORS(app, supports_credentials=True, origins=["*"])

    # Initialize Flask-Smorest API
    api = Api(app)

    # Celery tasks run inside this app's context
    create_celery_app(app)

    # Register error handler
    app.register_error_handler(Exception, handle_error)
    app.teardown_appcontext(shutdown_session)

    return api


def create_app():
    """Application factory"""
    setup_logging()

    app = Flask(__name__)
    app.wsgi_app = RequestLoggingMiddleware(app.wsgi_app)

    # Track application start time for the status route
    app.start_time = time.time()

    api = configure_app(app)

    with app.app_context():
        # Register models, routes and commands
        from app.products.models import Product  # noqa
        from app.categories.models import Category  # noqa
        from app.search.models import SearchHistory  # noqa

        register_blueprints(app, api)
        register_commands(app)
        create_root_routes(app)

    logger.info("Application initialized")
    return app
