from decouple import AutoConfig, Csv
from pathlib import Path

config = AutoConfig()


class Config:
    def __init__(self):
        # Environment
        self.ENV = config("ENV", default="development")

        # Database
        self.DB_HOST = config("DB_HOST", default="localhost")
        self.DB_PORT = config("DB_PORT", default=5432, cast=int)
        self.DB_USER = config("DB_USER", default="catalog")
        self.DB_PASSWORD = config("DB_PASSWORD", default="catalog123")
        self.DB_NAME = config("DB_NAME", default="catalog_db")
        self.DATABASE_URL = config("DATABASE_URL", default="")

        # Redis
        self.REDIS_HOST = config("REDIS_HOST", default="localhost")
        self.REDIS_PORT = config("REDIS_PORT", default=6379, cast=int)

        # Session
        self.SECRET_KEY = config("SECRET_KEY", default="dev-secret-key")
        self.SESSION_COOKIE_NAME = "catalog_session"

        # App
        self.BIND = config("BIND", default="127.0.0.1:8000")
        self.DEBUG = config("DEBUG", default=True, cast=bool)

        # API docs (flask-smorest)
        self.API_TITLE = "Catalog Search API"
        self.API_VERSION = "v1"
        self.OPENAPI_VERSION = "3.0.3"

        # Logging
        self.LOG_DIR = Path(config("LOG_DIR", default="logs"))
        self.LOG_LEVEL = config("LOG_LEVEL", default="INFO")

        # Celery
        self.CELERY_BROKER_URL = config(
            "CELERY_BROKER_URL",
            default=f"redis://{self.REDIS_HOST}:{self.REDIS_PORT}/1",
        )
        self.CELERY_RESULT_BACKEND = config(
            "CELERY_RESULT_BACKEND",
            default=f"redis://{self.REDIS_HOST}:{self.REDIS_PORT}/2",
        )
        self.CELERY_TASK_ALWAYS_EAGER = config(
            "CELERY_TASK_ALWAYS_EAGER", default=False, cast=bool
        )

        # Search
        self.SEARCH_BUYABLE_MODEL = config("SEARCH_BUYABLE_MODEL", default="Product")
        self.SEARCH_MAX_RESULTS = config("SEARCH_MAX_RESULTS", default=100, cast=int)
        self.SEARCH_USE_BOOLEAN = config("SEARCH_USE_BOOLEAN", default=True, cast=bool)
        self.SEARCH_EXTRA_FIELDS = config(
            "SEARCH_EXTRA_FIELDS", default="description", cast=Csv()
        )
        self.SEARCH_TEXT_CONFIG = config("SEARCH_TEXT_CONFIG", default="simple")
        self.SEARCH_HISTORY_RETENTION_DAYS = config(
            "SEARCH_HISTORY_RETENTION_DAYS", default=90, cast=int
        )
        self.SEARCH_POPULAR_KEY = config(
            "SEARCH_POPULAR_KEY", default="popular_searches"
        )

    @property
    def SQLALCHEMY_DATABASE_URI(self):
        if self.DATABASE_URL:
            return self.DATABASE_URL
        return f"postgresql+psycopg2://{self.DB_USER}:{self.DB_PASSWORD}@{self.DB_HOST}:{self.DB_PORT}/{self.DB_NAME}"

    @property
    def SQLALCHEMY_ENGINE_OPTIONS(self):
        if self.SQLALCHEMY_DATABASE_URI.startswith("postgresql"):
            return {"pool_size": 20, "max_overflow": 30, "pool_recycle": 3600}
        return {}


settings = Config()
