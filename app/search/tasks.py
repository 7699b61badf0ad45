# python imports
import logging

# package imports
from redis.exceptions import RedisError

# project imports
from main.tasks import celery
from external.redis import redis_client

# app imports
from .services import SearchHistoryService

logger = logging.getLogger(__name__)


@celery.task(bind=True, ignore_result=True)
def record_search_history(self, keyword):
    """Store a searched keyword and count it towards the popular searches"""
    try:
        entry = SearchHistoryService.add_entry(keyword)
        logger.debug(f"Recorded search history entry {entry.id}")
    except Exception as e:
        logger.error(f"Failed recording search history for '{keyword}': {str(e)}")
        raise

    try:
        redis_client.increment_search_count(keyword)
    except RedisError as e:
        logger.warning(f"Could not update popular searches for '{keyword}': {str(e)}")


@celery.task(bind=True)
def prune_search_history(self, days=None):
    """Drop search history past the retention period"""
    try:
        return SearchHistoryService.prune(days)
    except Exception as e:
        logger.error(f"Search history pruning failed: {str(e)}")
        raise
