# python imports
import logging

# package imports
from sqlalchemy.exc import SQLAlchemyError

# project imports
from app.libs.session import session_scope
from app.libs.pagination import Paginator
from app.libs.errors import NotFoundError, APIError

# app imports
from .models import Category, ProductCategory

logger = logging.getLogger(__name__)


class CategoryService:
    @staticmethod
    def get_category(category_id):
        """Get single active category"""
        try:
            with session_scope(read_only=True) as session:
                category = session.get(Category, category_id)
                if not category or not category.is_active:
                    raise NotFoundError("Category not found")
                return category
        except SQLAlchemyError as e:
            logger.error(f"Database error fetching category {category_id}: {str(e)}")
            raise APIError("Failed to fetch category", 500)

    @staticmethod
    def get_descendant_ids(category_ids):
        """Ids of the given categories plus all of their active descendants"""
        with session_scope(read_only=True) as session:
            found = list(dict.fromkeys(category_ids))
            frontier = list(found)
            while frontier:
                rows = (
                    session.query(Category.id)
                    .filter(
                        Category.parent_id.in_(frontier),
                        Category.is_active.is_(True),
                    )
                    .all()
                )
                frontier = [row[0] for row in rows if row[0] not in found]
                found.extend(frontier)
            return found

    @staticmethod
    def get_product_ids(category_id):
        """Ids of every visible product in a category and its subcategories"""
        from app.products.models import Product

        category_ids = CategoryService.get_descendant_ids([category_id])
        with session_scope(read_only=True) as session:
            rows = (
                session.query(Product.id)
                .join(ProductCategory)
                .filter(
                    ProductCategory.category_id.in_(category_ids),
                    Product.status == Product.Status.ACTIVE,
                )
                .distinct()
                .all()
            )
            return [row[0] for row in rows]

    @staticmethod
    def get_category_products(category_id, args):
        """Get paginated products in category"""
        from app.products.models import Product

        category = CategoryService.get_category(category_id)
        product_ids = CategoryService.get_product_ids(category_id)

        with session_scope(read_only=True) as session:
            base_query = (
                session.query(Product)
                .filter(Product.id.in_(product_ids))
                .order_by(Product.name, Product.id)
            )

            paginator = Paginator(
                base_query, page=args.get("page", 1), per_page=args.get("per_page", 20)
            )
            result = paginator.paginate()

            return {
                "category": category,
                "products": result["items"],
                "pagination": {
                    key: result[key]
                    for key in ("page", "per_page", "total_items", "total_pages")
                },
            }
