import logging

from flask import redirect, session
from flask_smorest import Blueprint
from flask.views import MethodView

from app.libs.pagination import paginate_items
from app.products.services import ProductService

from .forms import FormState, get_form_config
from .schemas import (
    PopularSearchQueryArgs,
    PopularSearchSchema,
    ProductSearchFormSchema,
    SearchFormQueryArgs,
    SearchFormSchema,
    SearchHistorySchema,
    SearchResultsQueryArgs,
    SearchResultsSchema,
)
from .services import ProductSearchService, SearchHistoryService

logger = logging.getLogger(__name__)


bp = Blueprint(
    "search",
    __name__,
    description="Tiered keyword search over the product catalog",
    url_prefix="/search",
)


@bp.route("/form")
class SearchForm(MethodView):
    @bp.arguments(SearchFormQueryArgs, location="query")
    @bp.response(200, SearchFormSchema)
    def get(self, args):
        """
        Describe a search form variant.

        Values are restored from the last submission in this session. The
        "only in section" checkbox is offered when `section_id` names a
        category that has products.
        """
        config = get_form_config(args.get("variant"))
        section_name, section_ids = ProductSearchService.get_section(
            args.get("section_id")
        )
        return config.describe(
            FormState(session, config.name).load(),
            section_name=section_name,
            section_size=len(section_ids),
        )


@bp.route("/")
class ProductSearch(MethodView):
    @bp.arguments(ProductSearchFormSchema)
    @bp.alt_response(302, description="Redirect to the match or the results listing")
    def post(self, data):
        """Run a search and redirect to its outcome"""
        config = get_form_config(data.get("variant"))
        FormState(session, config.name).save(data, config.state_fields)

        section_ids = None
        if data.get("section_id"):
            _, section_ids = ProductSearchService.get_section(data["section_id"])

        query = ProductSearchService.build_query(data, config, section_ids)
        outcome = ProductSearchService.search(query, section_ids, config)
        target = ProductSearchService.redirect_target(outcome, config)
        logger.info(f"Search '{query.keyword}' redirecting to {target}")
        return redirect(target)


@bp.route("/results")
class SearchResults(MethodView):
    @bp.arguments(SearchResultsQueryArgs, location="query")
    @bp.response(200, SearchResultsSchema)
    def get(self, args):
        """Products of a search result list, in result order"""
        ids = ProductSearchService.parse_result_ids(args.get("results"))
        products = ProductService.get_products_by_ids(
            ids, ProductSearchService.resolve_buyable_model()
        )

        page = paginate_items(products, args["page"], args["per_page"])
        return {"products": page.pop("items"), "pagination": page}


@bp.route("/popular")
class PopularSearches(MethodView):
    @bp.arguments(PopularSearchQueryArgs, location="query")
    @bp.response(200, PopularSearchSchema(many=True))
    def get(self, args):
        """Most searched keywords"""
        return SearchHistoryService.get_popular(args["limit"])


@bp.route("/history")
class RecentSearches(MethodView):
    @bp.arguments(PopularSearchQueryArgs, location="query")
    @bp.response(200, SearchHistorySchema(many=True))
    def get(self, args):
        """Most recently recorded keywords"""
        return SearchHistoryService.get_recent(args["limit"])
