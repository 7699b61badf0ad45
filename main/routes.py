from importlib import import_module
import logging
import time
from main.config import settings

logger = logging.getLogger(__name__)


def register_blueprints(app, api):
    """Dynamically register all blueprints from app modules"""
    modules = ["products", "categories", "search"]
    for module in modules:
        try:
            mod = import_module(f"app.{module}.routes")
            bp = getattr(mod, "bp", None) or getattr(mod, f"{module}_bp")

            # Register with Flask-Smorest API instead of directly with app
            api.register_blueprint(bp)
            logger.info(f"Registered blueprint for {module}")
        except ImportError as e:
            logger.warning(f"Failed to register {module} routes: {str(e)}")
        except AttributeError as e:
            logger.warning(f"No blueprint found in {module}.routes: {str(e)}")


def register_commands(app):
    """Attach the Flask CLI commands"""
    from app.search.management.commands.history import (
        clear_search_history,
        init_db_command,
        list_search_history,
    )
    from app.search.management.commands.replacements import (
        add_search_replacement,
        list_search_replacements,
    )

    for command in (
        add_search_replacement,
        list_search_replacements,
        list_search_history,
        clear_search_history,
        init_db_command,
    ):
        app.cli.add_command(command)


def create_root_routes(app):
    @app.route("/status")
    def status():
        return {
            "status": "running",
            "environment": settings.ENV,
            "uptime": round(time.time() - app.start_time, 2),
        }
