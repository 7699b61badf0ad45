from datetime import datetime
from sqlalchemy.orm import declared_attr
from external.database import db


class TimestampMixin:
    created_at = db.Column(db.DateTime, default=datetime.utcnow, nullable=False)
    updated_at = db.Column(
        db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False
    )


class StatusMixin:
    """Adds a status column that uses an Enum defined in the model class"""

    __abstract__ = True

    @declared_attr
    def status(cls):
        status_enum = cls.Status
        default_value = next(iter(status_enum))  # First enum member
        # Create a unique enum name based on the table name
        enum_name = f"{cls.__tablename__}_status"

        return db.Column(
            db.Enum(status_enum, name=enum_name), default=default_value, nullable=False
        )


class BuyableMixin:
    """
    Columns the product search reads from a buyable model.

    Any model used as `SEARCH_BUYABLE_MODEL` needs these. A direct search hit
    redirects to the item's `link()` when the model defines one, otherwise to
    the product detail route.
    """

    internal_item_id = db.Column(db.Integer, index=True)
    name = db.Column(db.String(255), nullable=False)
    menu_title = db.Column(db.String(255))
    price = db.Column(db.Float, nullable=False, default=0)
    show_in_search = db.Column(db.Boolean, default=True, nullable=False)


class BaseModel(db.Model, TimestampMixin):
    __abstract__ = True
