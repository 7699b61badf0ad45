from marshmallow import (
    INCLUDE,
    Schema,
    ValidationError,
    fields,
    validate,
    validates_schema,
)
from app.libs.schemas import PaginationQueryArgs, PaginationSchema
from app.products.schemas import ProductSchema


class ProductSearchFormSchema(Schema):
    """Submitted search form.

    Unknown keys are kept so additional form fields reach the service.
    """

    class Meta:
        unknown = INCLUDE

    keyword = fields.Str(required=False, load_default="")
    min_price = fields.Float(required=False, allow_none=True, validate=validate.Range(min=0))
    max_price = fields.Float(required=False, allow_none=True, validate=validate.Range(min=0))
    only_in_section = fields.Bool(required=False, load_default=False)
    section_id = fields.Int(required=False, allow_none=True)
    variant = fields.Str(required=False, load_default="full")

    @validates_schema
    def validate_price_range(self, data, **kwargs):
        low, high = data.get("min_price"), data.get("max_price")
        if low and high and low > high:
            raise ValidationError(
                "Minimum price cannot be above maximum price", "min_price"
            )


class SearchFormQueryArgs(Schema):
    variant = fields.Str(required=False, load_default="full")
    section_id = fields.Int(required=False)


class FormFieldSchema(Schema):
    name = fields.Str()
    label = fields.Str()
    type = fields.Str()
    value = fields.Raw(allow_none=True)


class SearchFormSchema(Schema):
    name = fields.Str()
    variant = fields.Str()
    action_label = fields.Str()
    form_fields = fields.List(
        fields.Nested(FormFieldSchema), attribute="fields", data_key="fields"
    )


class SearchResultsQueryArgs(PaginationQueryArgs):
    results = fields.Str(required=False, load_default="")


class SearchResultsSchema(Schema):
    products = fields.List(fields.Nested(ProductSchema))
    pagination = fields.Nested(PaginationSchema)


class PopularSearchQueryArgs(Schema):
    limit = fields.Int(required=False, load_default=10, validate=validate.Range(min=1, max=50))


class PopularSearchSchema(Schema):
    keyword = fields.Str()
    count = fields.Int()


class SearchHistorySchema(Schema):
    id = fields.Int(dump_only=True)
    title = fields.Str()
    created_at = fields.DateTime(dump_only=True)
