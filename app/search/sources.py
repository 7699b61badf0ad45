# python imports
import logging
from typing import List, Sequence

# package imports
from sqlalchemy import func, inspect, or_, select
from sqlalchemy.orm import Query, Session

# project imports
from app.libs.errors import ConfigurationError
from app.libs.filters import escape_like
from app.categories.models import Category, ProductCategory
from app.categories.services import CategoryService

# app imports
from .cascade import ItemSource, SearchTier
from .fulltext import full_text_clause

logger = logging.getLogger(__name__)

ITEM_FIELDS = ("name", "menu_title")
CATEGORY_FIELDS = ("name", "menu_title")


def resolve_columns(model, field_names: Sequence[str]) -> list:
    """Map field names to model columns, rejecting unknown fields"""
    mapped = inspect(model).columns
    columns = []
    for name in field_names:
        if name not in mapped:
            raise ConfigurationError(
                f"{model.__name__} has no searchable field '{name}'"
            )
        column = getattr(model, name)
        if not any(column is c for c in columns):
            columns.append(column)
    return columns


def tier_clause(
    tier: SearchTier,
    columns: Sequence,
    phrases: Sequence[str],
    dialect_name: str,
    use_boolean: bool = True,
    text_config: str = "simple",
):
    """Match any phrase on any column at the given tier"""
    if tier == SearchTier.EXACT:
        return or_(*[func.lower(c) == p for c in columns for p in phrases])
    if tier == SearchTier.PARTIAL:
        return or_(
            *[
                func.lower(c).like(f"%{escape_like(p)}%", escape="\\")
                for c in columns
                for p in phrases
            ]
        )
    return or_(
        *[
            full_text_clause(columns, p, dialect_name, use_boolean, text_config)
            for p in phrases
        ]
    )


class CatalogSource(ItemSource):
    """
    Database-backed candidate set.

    Args:
        session: SQLAlchemy session
        model: buyable model class
        base_query: query over `model` already narrowed to the candidates
            (visibility, price, section) and ordered for listing
        extra_fields: buyable fields searched besides name and menu title
        use_boolean: boolean full-text mode
        text_config: PostgreSQL text search configuration
    """

    def __init__(
        self,
        session: Session,
        model,
        base_query: Query,
        extra_fields: Sequence[str] = (),
        use_boolean: bool = True,
        text_config: str = "simple",
    ) -> None:
        self.session = session
        self.model = model
        self.base_query = base_query
        self.columns = resolve_columns(model, list(ITEM_FIELDS) + list(extra_fields))
        self.category_columns = resolve_columns(Category, CATEGORY_FIELDS)
        self.use_boolean = use_boolean
        self.text_config = text_config
        self.dialect_name = session.get_bind().dialect.name
        self._count = None

    def _ids(self, query: Query, limit: int) -> List[int]:
        return [row[0] for row in query.with_entities(self.model.id).limit(limit).all()]

    def _clause(self, tier: SearchTier, columns, phrases: Sequence[str]):
        return tier_clause(
            tier, columns, phrases, self.dialect_name, self.use_boolean, self.text_config
        )

    def count(self) -> int:
        if self._count is None:
            self._count = self.base_query.order_by(None).count()
        return self._count

    def all_ids(self, limit: int) -> List[int]:
        return self._ids(self.base_query, limit)

    def ids_by_code(self, code: int, limit: int) -> List[int]:
        return self._ids(
            self.base_query.filter(self.model.internal_item_id == code), limit
        )

    def ids_by_tier(self, tier: SearchTier, phrases: Sequence[str], limit: int) -> List[int]:
        return self._ids(
            self.base_query.filter(self._clause(tier, self.columns, phrases)), limit
        )

    def category_ids_by_tier(
        self, tier: SearchTier, phrases: Sequence[str], limit: int
    ) -> List[int]:
        rows = (
            self.session.query(Category.id)
            .filter(
                Category.is_active.is_(True),
                self._clause(tier, self.category_columns, phrases),
            )
            .order_by(Category.name, Category.id)
            .limit(limit)
            .all()
        )
        return [row[0] for row in rows]

    def member_ids(self, category_ids: Sequence[int], limit: int) -> List[int]:
        all_category_ids = CategoryService.get_descendant_ids(category_ids)
        members = select(ProductCategory.product_id).where(
            ProductCategory.category_id.in_(all_category_ids)
        )
        return self._ids(
            self.base_query.filter(self.model.id.in_(members)),
            limit,
        )
