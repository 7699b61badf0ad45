import redis
from main.config import settings
import logging

logger = logging.getLogger(__name__)


class RedisClient:
    def __init__(self):
        self.client = redis.Redis(
            host=settings.REDIS_HOST, port=settings.REDIS_PORT, decode_responses=True
        )
        logger.info("Redis client initialized")

    # Sorted set operations
    def zincrby(self, name, amount, value):
        """Wrapper for Redis zincrby command"""
        return self.client.zincrby(name, amount, value)

    def zrevrange(self, name, start, end, withscores=False):
        """Wrapper for Redis zrevrange command"""
        return self.client.zrevrange(name, start, end, withscores=withscores)

    def zrem(self, name, *values):
        """Wrapper for Redis zrem command"""
        return self.client.zrem(name, *values)

    def delete(self, *names):
        """Wrapper for Redis delete command"""
        return self.client.delete(*names)

    # Popular searches counter
    def increment_search_count(self, keyword):
        self.client.zincrby(settings.SEARCH_POPULAR_KEY, 1, keyword)

    def get_popular_searches(self, limit=10):
        return self.client.zrevrange(
            settings.SEARCH_POPULAR_KEY, 0, limit - 1, withscores=True
        )

    def clear_popular_searches(self):
        self.client.delete(settings.SEARCH_POPULAR_KEY)

    # Ping operation
    def ping(self):
        """Wrapper for Redis ping command"""
        return self.client.ping()

    # Close connection
    def close(self):
        """Wrapper for Redis close command"""
        self.client.close()


redis_client = RedisClient()
