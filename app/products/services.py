# python imports
import logging

# package imports
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import joinedload

# project imports
from app.libs.session import session_scope
from app.libs.errors import NotFoundError, APIError
from app.categories.models import ProductCategory

# app imports
from .models import Product


logger = logging.getLogger(__name__)


class ProductService:
    @staticmethod
    def get_product(product_id):
        try:
            with session_scope(read_only=True) as session:
                product = (
                    session.query(Product)
                    .options(
                        joinedload(Product.categories).joinedload(
                            ProductCategory.category
                        ),
                    )
                    .filter(Product.id == product_id)
                    .first()
                )
                if not product:
                    raise NotFoundError("Product not found")
                return product
        except SQLAlchemyError as e:
            logger.error(f"Database error fetching product {product_id}: {str(e)}")
            raise APIError("Failed to fetch product", 500)

    @staticmethod
    def get_products_by_ids(product_ids, model=Product):
        """
        Listable items of `model` for the given ids, in the order the ids were
        given. Models with a `Status` enum only list their ACTIVE items.
        """
        if not product_ids:
            return []
        try:
            with session_scope(read_only=True) as session:
                query = session.query(model).filter(model.id.in_(product_ids))
                status_enum = getattr(model, "Status", None)
                if status_enum is not None and hasattr(status_enum, "ACTIVE"):
                    query = query.filter(model.status == status_enum.ACTIVE)
                products = query.all()
                by_id = {product.id: product for product in products}
                return [by_id[pid] for pid in product_ids if pid in by_id]
        except SQLAlchemyError as e:
            logger.error(f"Database error fetching products {product_ids}: {str(e)}")
            raise APIError("Failed to fetch products", 500)
