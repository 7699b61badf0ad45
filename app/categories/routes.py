# package imports
from flask_smorest import Blueprint
from flask.views import MethodView

# project imports
from app.libs.schemas import PaginationQueryArgs

# app imports
from .services import CategoryService
from .schemas import CategorySchema, CategoryProductsSchema

bp = Blueprint(
    "categories", __name__, description="Category operations", url_prefix="/categories"
)


@bp.route("/<int:category_id>")
class CategoryDetail(MethodView):
    @bp.response(200, CategorySchema)
    def get(self, category_id):
        """Get category details"""
        return CategoryService.get_category(category_id)


@bp.route("/<int:category_id>/products")
class CategoryProducts(MethodView):
    @bp.arguments(PaginationQueryArgs, location="query")
    @bp.response(200, CategoryProductsSchema)
    def get(self, args, category_id):
        """Get products in category and its subcategories"""
        return CategoryService.get_category_products(category_id, args)
