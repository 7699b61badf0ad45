# python imports
import logging
from datetime import datetime, timedelta

# package imports
from flask import url_for
from redis.exceptions import RedisError
from sqlalchemy import func, inspect
from sqlalchemy.exc import SQLAlchemyError

# project imports
from external.database import db
from external.redis import redis_client
from main.config import settings

from app.libs.session import session_scope
from app.libs.filters import build_clause
from app.libs.errors import APIError, ConfigurationError, ValidationError
from app.categories.models import Category
from app.products.models import Product  # noqa - registers the default buyable

# app imports
from .cascade import (
    CascadeEvaluator,
    MatchKind,
    ResultList,
    SearchQuery,
    SingleMatch,
    normalize_keyword,
)
from .forms import FULL_FORM
from .models import SearchHistory, SearchReplacement
from .sources import CatalogSource

logger = logging.getLogger(__name__)

BUYABLE_FIELDS = ("id", "internal_item_id", "name", "menu_title", "price", "show_in_search")


class SearchReplacementService:
    @staticmethod
    def get_replacements(word):
        """Replacement terms configured for a single query word"""
        word = normalize_keyword(word)
        if not word:
            return []
        with session_scope(read_only=True) as session:
            candidates = (
                session.query(SearchReplacement)
                .filter(func.lower(SearchReplacement.search).contains(word))
                .order_by(SearchReplacement.id)
                .all()
            )
            replacements = []
            for replacement in candidates:
                if word not in replacement.terms:
                    continue
                value = normalize_keyword(replacement.replace)
                if value and value not in replacements:
                    replacements.append(value)
            return replacements

    @staticmethod
    def add_replacement(search, replace):
        terms = [t.strip().lower() for t in (search or "").split(",") if t.strip()]
        replace = normalize_keyword(replace)
        if not terms or not replace:
            raise ValidationError("Both search terms and a replacement are required")
        with session_scope() as session:
            replacement = SearchReplacement(search=",".join(terms), replace=replace)
            session.add(replacement)
            session.flush()
            return replacement

    @staticmethod
    def list_replacements():
        with session_scope(read_only=True) as session:
            return session.query(SearchReplacement).order_by(SearchReplacement.id).all()


class SearchHistoryService:
    @staticmethod
    def record(keyword):
        """Queue a keyword for the search history without waiting on it"""
        from .tasks import record_search_history

        record_search_history.apply_async((keyword,), retry=False)

    @staticmethod
    def add_entry(keyword):
        with session_scope() as session:
            entry = SearchHistory(title=keyword)
            session.add(entry)
            session.flush()
            return entry

    @staticmethod
    def get_recent(limit=20):
        with session_scope(read_only=True) as session:
            return (
                session.query(SearchHistory)
                .order_by(SearchHistory.created_at.desc(), SearchHistory.id.desc())
                .limit(limit)
                .all()
            )

    @staticmethod
    def prune(days=None):
        """Delete history older than `days` (defaults to the retention setting)"""
        days = settings.SEARCH_HISTORY_RETENTION_DAYS if days is None else days
        cutoff = datetime.utcnow() - timedelta(days=days)
        with session_scope() as session:
            deleted = (
                session.query(SearchHistory)
                .filter(SearchHistory.created_at < cutoff)
                .delete(synchronize_session=False)
            )
        logger.info(f"Pruned {deleted} search history entries older than {days} days")
        return deleted

    @staticmethod
    def clear():
        with session_scope() as session:
            deleted = session.query(SearchHistory).delete(synchronize_session=False)
        try:
            redis_client.clear_popular_searches()
        except RedisError as e:
            logger.warning(f"Could not clear popular searches: {str(e)}")
        return deleted

    @staticmethod
    def get_popular(limit=10):
        try:
            rows = redis_client.get_popular_searches(limit)
        except RedisError as e:
            logger.warning(f"Could not read popular searches: {str(e)}")
            return []
        return [{"keyword": keyword, "count": int(score)} for keyword, score in rows]


class ProductSearchService:
    @staticmethod
    def resolve_buyable_model(name=None):
        """Look up the ORM class searched as buyables"""
        name = name or settings.SEARCH_BUYABLE_MODEL
        if not name:
            raise ConfigurationError("No buyable model configured for search")

        model = db.Model.registry._class_registry.get(name)
        if not isinstance(model, type):
            raise ConfigurationError(f"Can not find buyable model '{name}'")

        columns = inspect(model).columns
        missing = [f for f in BUYABLE_FIELDS if f not in columns]
        if missing:
            raise ConfigurationError(
                f"Buyable model '{name}' is missing fields: {', '.join(missing)}"
            )
        return model

    @staticmethod
    def build_query(data, config=FULL_FORM, section_ids=None):
        """Turn submitted form data into a SearchQuery"""
        extra = {}
        for additional in config.additional_fields:
            value = data.get(additional.name)
            if value not in (None, ""):
                extra[additional.db_field] = value

        return SearchQuery(
            keyword=data.get("keyword") or "",
            min_price=data.get("min_price") or None,
            max_price=data.get("max_price") or None,
            only_in_section=bool(data.get("only_in_section") and section_ids),
            extra=extra,
        )

    @staticmethod
    def build_base_query(session, model, query, section_ids=None, config=FULL_FORM):
        """Candidates: visible buyables narrowed by section, price and extra fields"""
        base_query = session.query(model).filter(model.show_in_search.is_(True))

        status_enum = getattr(model, "Status", None)
        if status_enum is not None and hasattr(status_enum, "ACTIVE"):
            base_query = base_query.filter(model.status == status_enum.ACTIVE)

        if query.only_in_section:
            base_query = base_query.filter(model.id.in_(list(section_ids)))

        if query.min_price:
            base_query = base_query.filter(model.price >= float(query.min_price))

        if query.max_price:
            base_query = base_query.filter(model.price <= float(query.max_price))

        columns = inspect(model).columns
        for additional in config.additional_fields:
            if additional.db_field not in query.extra:
                continue
            if additional.db_field not in columns:
                raise ConfigurationError(
                    f"Search field '{additional.name}' refers to unknown field "
                    f"'{additional.db_field}'"
                )
            base_query = base_query.filter(
                build_clause(
                    getattr(model, additional.db_field),
                    additional.lookup,
                    query.extra[additional.db_field],
                )
            )

        return base_query.order_by(model.name, model.id)

    @staticmethod
    def search(query, section_ids=None, config=FULL_FORM, evaluator=None):
        """
        Run the search cascade for a query.

        Returns:
            SingleMatch for a direct hit, otherwise a ResultList
        """
        model = ProductSearchService.resolve_buyable_model()
        evaluator = evaluator or CascadeEvaluator(
            synonyms=SearchReplacementService.get_replacements,
            history=SearchHistoryService.record,
        )
        try:
            with session_scope(read_only=True) as session:
                base_query = ProductSearchService.build_base_query(
                    session, model, query, section_ids, config
                )
                source = CatalogSource(
                    session,
                    model,
                    base_query,
                    extra_fields=settings.SEARCH_EXTRA_FIELDS,
                    use_boolean=settings.SEARCH_USE_BOOLEAN,
                    text_config=settings.SEARCH_TEXT_CONFIG,
                )
                return evaluator.evaluate(query, source, settings.SEARCH_MAX_RESULTS)
        except SQLAlchemyError as e:
            logger.error(f"Database error searching for '{query.keyword}': {str(e)}")
            raise APIError("Failed to search products", 500)

    @staticmethod
    def redirect_target(outcome, config=FULL_FORM):
        """URL to send the shopper to for a search outcome"""
        if isinstance(outcome, SingleMatch):
            if outcome.kind == MatchKind.CATEGORY:
                return url_for("categories.CategoryDetail", category_id=outcome.id)
            model = ProductSearchService.resolve_buyable_model()
            with session_scope(read_only=True) as session:
                item = session.get(model, outcome.id)
                if item is not None and hasattr(item, "link"):
                    return item.link()
            return url_for("products.ProductDetail", product_id=outcome.id)

        ids = outcome.ids if isinstance(outcome, ResultList) else []
        return url_for(config.results_endpoint, results=",".join(str(i) for i in ids))

    @staticmethod
    def parse_result_ids(results):
        """Ids from a `results=1,2,3` parameter, malformed entries dropped"""
        ids = []
        for part in (results or "").split(","):
            part = part.strip()
            if not part.isdecimal():
                continue
            try:
                value = int(part)
            except ValueError:
                continue
            if value not in ids:
                ids.append(value)
        return ids[: settings.SEARCH_MAX_RESULTS]

    @staticmethod
    def get_section(section_id):
        """(name, product ids) of the category a search can be restricted to"""
        from app.categories.services import CategoryService

        if not section_id:
            return None, []
        with session_scope(read_only=True) as session:
            category = session.get(Category, section_id)
            if not category or not category.is_active:
                return None, []
            name = category.name
        return name, CategoryService.get_product_ids(section_id)
