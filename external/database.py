from flask_sqlalchemy import SQLAlchemy
import logging

logger = logging.getLogger(__name__)

db = SQLAlchemy()


def init_db(flask_app):
    from app.products.models import Product  # noqa - imports all models
    from app.categories.models import Category  # noqa
    from app.search.models import SearchHistory  # noqa

    with flask_app.app_context():
        db.create_all()
    logger.info("Database initialized")


def shutdown_session(exception=None):
    db.session.remove()
