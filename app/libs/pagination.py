from math import ceil
from typing import Any, Dict, List, Sequence, TypeVar

from sqlalchemy.orm import Query

T = TypeVar("T")


def page_info(page: int, per_page: int, total: int) -> Dict[str, int]:
    return {
        "page": page,
        "per_page": per_page,
        "total_items": total,
        "total_pages": ceil(total / per_page) if total else 0,
    }


class Paginator:
    """
    One page of a query, in the query's own order.

    Listings here have a fixed order (catalog order or search result order),
    so only the page window is taken from the request.
    """

    def __init__(self, query: Query[T], page: int = 1, per_page: int = 20) -> None:
        self.query: Query[T] = query
        self.page: int = page
        self.per_page: int = per_page

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.per_page

    def paginate(self) -> Dict[str, Any]:
        items: List[T] = self.query.limit(self.per_page).offset(self.offset).all()
        total: int = self.query.order_by(None).count()
        return {"items": items, **page_info(self.page, self.per_page, total)}


def paginate_items(items: Sequence[T], page: int = 1, per_page: int = 20) -> Dict[str, Any]:
    """Same page window over an already loaded, ordered list"""
    start = (page - 1) * per_page
    return {
        "items": list(items[start : start + per_page]),
        **page_info(page, per_page, len(items)),
    }
