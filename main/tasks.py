from celery import Celery, Task
from flask import Flask, has_app_context
from main.config import settings


class ContextTask(Task):
    """Runs tasks inside the Flask app context the worker was set up with"""

    def __call__(self, *args, **kwargs):
        flask_app = getattr(self.app, "flask_app", None)
        if flask_app is None or has_app_context():
            return self.run(*args, **kwargs)
        with flask_app.app_context():
            return self.run(*args, **kwargs)


celery = Celery("catalog_search", task_cls=ContextTask)


def create_celery_app(app: Flask = None) -> Celery:
    celery.conf.update(
        broker_url=settings.CELERY_BROKER_URL,
        result_backend=settings.CELERY_RESULT_BACKEND,
        task_always_eager=settings.CELERY_TASK_ALWAYS_EAGER,
    )

    if app:
        celery.flask_app = app
        app.extensions["celery"] = celery

    # Auto-discover tasks from modules
    celery.autodiscover_tasks(
        [
            "app.search",
            # add more task packages here
        ]
    )

    # Import and apply beat schedule
    from main.schedules import CELERYBEAT_SCHEDULE

    celery.conf.beat_schedule = CELERYBEAT_SCHEDULE

    # Explicit task routing
    celery.conf.task_routes = {
        "app.search.tasks.*": {"queue": "search"},
    }

    return celery
