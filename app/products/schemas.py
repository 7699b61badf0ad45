from marshmallow import Schema, fields
from .models import Product


class ProductSchema(Schema):
    id = fields.Int(dump_only=True)
    internal_item_id = fields.Int()
    name = fields.Str(required=True)
    menu_title = fields.Str()
    description = fields.Str()
    price = fields.Float(required=True)
    sku = fields.Str()
    stock = fields.Int()
    status = fields.Enum(Product.Status, by_value=True)
    created_at = fields.DateTime(dump_only=True)
    updated_at = fields.DateTime(dump_only=True)
    categories = fields.Method("get_categories", dump_only=True)

    def get_categories(self, obj):
        """Extract category data from ProductCategory objects"""
        if hasattr(obj, "categories") and obj.categories:
            from app.categories.schemas import CategorySchema

            category_schema = CategorySchema()
            return [
                category_schema.dump(product_category.category)
                for product_category in obj.categories
                if product_category.category
            ]
        return []
