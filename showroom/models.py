# showroom/models.py
"""
Database models (tables).

Rule of thumb:
- models.py should NOT contain Flask routes
- models.py should NOT touch the uploads folder
- models.py just defines data structure + relationships + JSON shape
"""

from collections import namedtuple
from datetime import datetime

from .extensions import db


def _iso(value):
    return value.isoformat(sep=" ", timespec="seconds") if value else None


# An image belongs to exactly one owner: ImageOwner("product", 3) or ImageOwner("vignette", 7)
ImageOwner = namedtuple("ImageOwner", ["kind", "id"])


class Category(db.Model):
    __tablename__ = "categories"

    id = db.Column(db.Integer, primary_key=True)
    code = db.Column(db.String(20), nullable=False)
    name = db.Column(db.String(200), nullable=False)
    parent_id = db.Column(
        db.Integer, db.ForeignKey("categories.id", ondelete="CASCADE"), index=True
    )
    display_order = db.Column(db.Integer, default=0, nullable=False)
    is_active = db.Column(db.Boolean, default=True, nullable=False)

    subcategories = db.relationship(
        "Category",
        backref=db.backref("parent", remote_side=[id]),
        cascade="all, delete",
        passive_deletes=True,
    )

    @property
    def is_main(self) -> bool:
        return self.parent_id is None

    def to_dict(self):
        return {
            "id": self.id,
            "code": self.code,
            "name": self.name,
            "parent_id": self.parent_id,
            "display_order": self.display_order,
        }


class Product(db.Model):
    __tablename__ = "products"

    id = db.Column(db.Integer, primary_key=True)

    name = db.Column(db.String(200), nullable=False)
    # Legacy free-text category, kept in step with category_id on every write
    category = db.Column(db.String(200), index=True)
    category_id = db.Column(
        db.Integer, db.ForeignKey("categories.id", ondelete="SET NULL"), index=True
    )
    description = db.Column(db.Text)
    manufacturer = db.Column(db.String(200))
    model_number = db.Column(db.String(100))
    sku = db.Column(db.String(100))
    price = db.Column(db.Numeric(10, 2))
    dimensions = db.Column(db.String(200))
    material = db.Column(db.String(200))
    color = db.Column(db.String(100))

    date_added = db.Column(db.DateTime, default=datetime.utcnow)
    date_updated = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)
    is_active = db.Column(db.Boolean, default=True, nullable=False, index=True)

    category_ref = db.relationship("Category", lazy="joined")
    images = db.relationship(
        "Image",
        backref="product",
        cascade="all, delete",
        passive_deletes=True,
        foreign_keys="Image.product_id",
    )
    vignette_links = db.relationship(
        "VignetteProduct",
        backref="product",
        cascade="all, delete",
        passive_deletes=True,
    )

    @property
    def display_category(self):
        """Normalized category name when linked to an active category, else the legacy text."""
        if self.category_ref is not None and self.category_ref.is_active:
            return self.category_ref.name
        return self.category

    def to_dict(self):
        return {
            "id": self.id,
            "name": self.name,
            "category": self.display_category,
            "category_id": self.category_id,
            "description": self.description,
            "manufacturer": self.manufacturer,
            "model_number": self.model_number,
            "sku": self.sku,
            "price": float(self.price) if self.price is not None else None,
            "dimensions": self.dimensions,
            "material": self.material,
            "color": self.color,
            "date_added": _iso(self.date_added),
            "date_updated": _iso(self.date_updated),
            "is_active": 1 if self.is_active else 0,
        }


class Vignette(db.Model):
    __tablename__ = "vignettes"

    id = db.Column(db.Integer, primary_key=True)

    name = db.Column(db.String(200), nullable=False)
    description = db.Column(db.Text)
    location = db.Column(db.String(200))
    theme = db.Column(db.String(200))

    date_created = db.Column(db.DateTime, default=datetime.utcnow)
    date_updated = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)
    is_active = db.Column(db.Boolean, default=True, nullable=False, index=True)

    product_links = db.relationship(
        "VignetteProduct",
        backref="vignette",
        cascade="all, delete",
        passive_deletes=True,
        order_by="VignetteProduct.position",
    )
    images = db.relationship(
        "Image",
        backref="vignette",
        cascade="all, delete",
        passive_deletes=True,
        foreign_keys="Image.vignette_id",
    )

    def to_dict(self):
        return {
            "id": self.id,
            "name": self.name,
            "description": self.description,
            "location": self.location,
            "theme": self.theme,
            "date_created": _iso(self.date_created),
            "date_updated": _iso(self.date_updated),
            "is_active": 1 if self.is_active else 0,
        }


class VignetteProduct(db.Model):
    __tablename__ = "vignette_products"
    __table_args__ = (
        db.UniqueConstraint("vignette_id", "product_id", name="uq_vignette_product"),
    )

    id = db.Column(db.Integer, primary_key=True)
    vignette_id = db.Column(
        db.Integer, db.ForeignKey("vignettes.id", ondelete="CASCADE"), nullable=False
    )
    product_id = db.Column(
        db.Integer, db.ForeignKey("products.id", ondelete="CASCADE"), nullable=False
    )
    position = db.Column(db.Integer, default=0, nullable=False)
    notes = db.Column(db.Text)


class Image(db.Model):
    __tablename__ = "images"
    __table_args__ = (
        db.CheckConstraint(
            "(product_id IS NULL) != (vignette_id IS NULL)", name="ck_image_single_owner"
        ),
    )

    id = db.Column(db.Integer, primary_key=True)
    product_id = db.Column(db.Integer, db.ForeignKey("products.id", ondelete="CASCADE"))
    vignette_id = db.Column(db.Integer, db.ForeignKey("vignettes.id", ondelete="CASCADE"))
    image_path = db.Column(db.String(255), nullable=False)
    is_primary = db.Column(db.Boolean, default=False, nullable=False)
    caption = db.Column(db.Text)
    date_added = db.Column(db.DateTime, default=datetime.utcnow)

    @property
    def owner(self) -> ImageOwner:
        if self.product_id is not None:
            return ImageOwner("product", self.product_id)
        return ImageOwner("vignette", self.vignette_id)

    @owner.setter
    def owner(self, value: ImageOwner):
        self.product_id = value.id if value.kind == "product" else None
        self.vignette_id = value.id if value.kind == "vignette" else None

    def to_dict(self):
        return {
            "id": self.id,
            "product_id": self.product_id,
            "vignette_id": self.vignette_id,
            "image_path": self.image_path,
            "is_primary": 1 if self.is_primary else 0,
            "caption": self.caption,
            "date_added": _iso(self.date_added),
        }


class User(db.Model):
    __tablename__ = "users"

    id = db.Column(db.Integer, primary_key=True)
    username = db.Column(db.String(100), unique=True, nullable=False, index=True)
    password = db.Column(db.String(255), nullable=False)  # werkzeug hash
    email = db.Column(db.String(200))
    role = db.Column(db.String(50), default="admin", nullable=False)
    date_created = db.Column(db.DateTime, default=datetime.utcnow)
    is_active = db.Column(db.Boolean, default=True, nullable=False)

    def to_dict(self):
        return {"id": self.id, "username": self.username, "email": self.email}


class StoredSession(db.Model):
    """Server-side login session; the cookie only carries the signed sid."""

    __tablename__ = "sessions"

    sid = db.Column(db.String(64), primary_key=True)
    data = db.Column(db.Text, nullable=False, default="{}")
    expires_at = db.Column(db.DateTime, nullable=False, index=True)
