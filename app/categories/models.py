from flask import url_for

from external.database import db
from app.libs.models import BaseModel


class Category(BaseModel):
    """
    Product group used to organise the catalog.

    Categories form a tree through `parent_id`. The products of a category
    are the ones linked to it and to any of its active descendants.
    """
    __tablename__ = "categories"

    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(100), unique=True, nullable=False)
    menu_title = db.Column(db.String(100))
    description = db.Column(db.Text)
    slug = db.Column(db.String(120), unique=True)
    parent_id = db.Column(db.Integer, db.ForeignKey("categories.id"))
    is_active = db.Column(db.Boolean, default=True)

    # Relationships
    parent = db.relationship("Category", remote_side=[id], back_populates="children")
    children = db.relationship("Category", back_populates="parent")
    products = db.relationship("ProductCategory", back_populates="category")

    def link(self):
        return url_for("categories.CategoryDetail", category_id=self.id)

    def __repr__(self):
        return f"<Category {self.name}>"


class ProductCategory(BaseModel):
    """
    Junction table linking products to categories with primary category designation.
    """
    __tablename__ = "product_categories"

    product_id = db.Column(db.Integer, db.ForeignKey("products.id"), primary_key=True)
    category_id = db.Column(
        db.Integer, db.ForeignKey("categories.id"), primary_key=True
    )
    is_primary = db.Column(db.Boolean, default=False)

    product = db.relationship("Product", back_populates="categories")
    category = db.relationship("Category", back_populates="products")
