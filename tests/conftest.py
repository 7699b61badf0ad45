import os
import tempfile

# settings are read once at import time, so point them at test resources first
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["CELERY_TASK_ALWAYS_EAGER"] = "True"
os.environ["CELERY_BROKER_URL"] = "memory://"
os.environ["CELERY_RESULT_BACKEND"] = "cache+memory://"
os.environ["LOG_DIR"] = tempfile.mkdtemp(prefix="catalog-search-logs-")
os.environ["LOG_LEVEL"] = "WARNING"

import pytest

from main.setup import create_app
from external.database import db
from external.redis import redis_client
from app.products.models import Product
from app.categories.models import Category, ProductCategory


class FakeRedis:
    """Just enough of a sorted-set store for the popular searches counter"""

    def __init__(self):
        self.zsets = {}

    def zincrby(self, name, amount, value):
        zset = self.zsets.setdefault(name, {})
        zset[value] = zset.get(value, 0) + amount
        return zset[value]

    def zrevrange(self, name, start, end, withscores=False):
        items = sorted(self.zsets.get(name, {}).items(), key=lambda kv: (-kv[1], kv[0]))
        stop = len(items) if end == -1 else end + 1
        items = items[start:stop]
        if withscores:
            return [(member, float(score)) for member, score in items]
        return [member for member, _ in items]

    def zrem(self, name, *values):
        zset = self.zsets.get(name, {})
        return sum(1 for v in values if zset.pop(v, None) is not None)

    def delete(self, *names):
        return sum(1 for n in names if self.zsets.pop(n, None) is not None)


@pytest.fixture(scope="session")
def flask_app():
    flask_app = create_app()
    flask_app.config["TESTING"] = True
    return flask_app


@pytest.fixture
def app_ctx(flask_app):
    with flask_app.app_context():
        db.create_all()
        yield flask_app
        db.session.remove()
        db.drop_all()


@pytest.fixture
def client(app_ctx):
    return app_ctx.test_client()


@pytest.fixture(autouse=True)
def fake_redis(monkeypatch):
    fake = FakeRedis()
    monkeypatch.setattr(redis_client, "client", fake)
    return fake


def _product(name, code, price, **kwargs):
    return Product(name=name, internal_item_id=code, price=price, **kwargs)


@pytest.fixture
def catalog(app_ctx):
    """
    Listing order (by name): Blue Shirt, Coffee Mug, Green Shirt, Red Shirt,
    Tea Mug. "Hidden Thing" and "Draft Shirt" are never candidates.
    """
    products = {
        "red": _product("Red Shirt", 1001, 20),
        "blue": _product("Blue Shirt", 1002, 25),
        "green": _product("Green Shirt", 1003, 30),
        "coffee": _product(
            "Coffee Mug", 2001, 8, description="ceramic mug for espresso", sku="MUG-1"
        ),
        "tea": _product("Tea Mug", 2002, 9, sku="MUG-2"),
        "hidden": _product("Hidden Thing", 9999, 5, show_in_search=False),
        "draft": _product("Draft Shirt", 1004, 15, status=Product.Status.DRAFT),
    }
    db.session.add_all(products.values())

    kitchen = Category(name="Kitchen")
    mugs = Category(name="Mugs", parent=kitchen)
    apparel = Category(name="Apparel")
    summer_collection = Category(name="Summer Collection")
    summer_sale = Category(name="Summer Sale")
    db.session.add_all([kitchen, mugs, apparel, summer_collection, summer_sale])
    db.session.flush()

    links = [
        (mugs, "coffee"),
        (mugs, "tea"),
        (apparel, "red"),
        (apparel, "blue"),
        (apparel, "green"),
        (summer_collection, "red"),
        (summer_sale, "blue"),
        (summer_sale, "coffee"),
        (summer_sale, "hidden"),
    ]
    db.session.add_all(
        ProductCategory(category_id=category.id, product_id=products[key].id)
        for category, key in links
    )
    db.session.commit()

    ids = {key: product.id for key, product in products.items()}
    ids.update(
        {
            "kitchen": kitchen.id,
            "mugs": mugs.id,
            "apparel": apparel.id,
            "summer_collection": summer_collection.id,
            "summer_sale": summer_sale.id,
        }
    )
    return ids
