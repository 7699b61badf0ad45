import logging

# package imports
from flask_smorest import Blueprint
from flask.views import MethodView

# app imports
from .services import ProductService
from .schemas import ProductSchema

logger = logging.getLogger(__name__)

bp = Blueprint(
    "products", __name__, description="Product operations", url_prefix="/products"
)


@bp.route("/<int:product_id>")
class ProductDetail(MethodView):
    @bp.response(200, ProductSchema)
    def get(self, product_id):
        """Get product details"""
        return ProductService.get_product(product_id)
