from celery.schedules import crontab

CELERYBEAT_SCHEDULE = {
    # Search history cleanup
    "prune-search-history": {
        "task": "app.search.tasks.prune_search_history",
        "schedule": crontab(hour="4", minute="0"),  # Daily at 4 AM
        "options": {"queue": "search"},
    },
}
