from enum import Enum

from flask import url_for

from external.database import db
from app.libs.models import BaseModel, BuyableMixin, StatusMixin


class Product(BaseModel, BuyableMixin, StatusMixin):
    """A buyable catalog item.

    `internal_item_id` is the shop's own numeric item code, which customers
    can type into the search box to jump straight to the product.
    """

    __tablename__ = "products"

    class Status(Enum):
        ACTIVE = "active"
        DRAFT = "draft"
        ARCHIVED = "archived"
        OUT_OF_STOCK = "out_of_stock"

    id = db.Column(db.Integer, primary_key=True)
    description = db.Column(db.Text)
    sku = db.Column(db.String(50), unique=True)
    stock = db.Column(db.Integer, default=0)

    # Relationships
    categories = db.relationship("ProductCategory", back_populates="product")

    def link(self):
        return url_for("products.ProductDetail", product_id=self.id)

    def __repr__(self):
        return f"<Product {self.id} {self.name}>"
