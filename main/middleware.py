import logging
import time

logger = logging.getLogger(__name__)


class RequestLoggingMiddleware:
    """Logs every request with its response status and duration"""

    def __init__(self, app):
        self.app = app

    def __call__(self, environ, start_response):
        started = time.perf_counter()
        method, path = environ["REQUEST_METHOD"], environ["PATH_INFO"]

        def logging_start_response(status, headers, exc_info=None):
            elapsed = (time.perf_counter() - started) * 1000
            logger.info(f"{method} {path} -> {status} ({elapsed:.1f} ms)")
            return start_response(status, headers, exc_info)

        return self.app(environ, logging_start_response)
