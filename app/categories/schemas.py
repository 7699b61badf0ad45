from marshmallow import Schema, fields
from app.libs.schemas import PaginationSchema


class CategorySchema(Schema):
    id = fields.Int(dump_only=True)
    name = fields.Str(required=True)
    menu_title = fields.Str()
    description = fields.Str()
    slug = fields.Str()
    is_active = fields.Bool()
    parent_id = fields.Int()


class CategoryProductsSchema(Schema):
    category = fields.Nested(CategorySchema)
    products = fields.List(fields.Nested("ProductSchema"))
    pagination = fields.Nested(PaginationSchema)
