import logging
import logging.config
from main.config import settings


def setup_logging():
    settings.LOG_DIR.mkdir(parents=True, exist_ok=True)

    handlers = ["console", "file"]
    config = {
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {
            "standard": {"format": "%(asctime)s [%(levelname)s] %(name)s: %(message)s"},
            "search": {"format": "%(asctime)s %(message)s"},
        },
        "handlers": {
            "console": {
                "level": settings.LOG_LEVEL,
                "class": "logging.StreamHandler",
                "formatter": "standard",
            },
            "file": {
                "level": settings.LOG_LEVEL,
                "class": "logging.FileHandler",
                "filename": settings.LOG_DIR / "catalog_search.log",
                "formatter": "standard",
            },
            # keyword outcomes only, for tuning synonyms
            "search_file": {
                "level": "INFO",
                "class": "logging.FileHandler",
                "filename": settings.LOG_DIR / "searches.log",
                "formatter": "search",
            },
        },
        "loggers": {
            "": {
                "handlers": handlers,
                "level": settings.LOG_LEVEL,
                "propagate": True,
            },
            "app.search.cascade": {
                "handlers": ["search_file"],
                "level": settings.LOG_LEVEL,
                "propagate": True,
            },
            "werkzeug": {
                "handlers": handlers,
                "level": "INFO",
                "propagate": False,
            },
            "celery": {
                "handlers": handlers,
                "level": "INFO",
                "propagate": False,
            },
        },
    }

    logging.config.dictConfig(config)
