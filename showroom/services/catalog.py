# showroom/services/catalog.py
"""
Vignette / product queries and mutations.

Routes stay thin: they parse the request, call one function here,
and jsonify what comes back.

Conventions (same as the old JSON API):
- create_* returns the new id
- update_* / delete_* return the number of affected rows ("changes")
- delete_* is a soft delete (is_active = 0); nothing cascades
"""

from datetime import datetime
from typing import Any, Dict, List, Optional

from sqlalchemy import func, or_

from ..errors import NotFoundError, ValidationError
from ..extensions import db
from ..models import Category, Image, Product, Vignette, VignetteProduct

VIGNETTE_FIELDS = ("name", "description", "location", "theme")
PRODUCT_FIELDS = (
    "name",
    "description",
    "manufacturer",
    "model_number",
    "sku",
    "price",
    "dimensions",
    "material",
    "color",
)


def _clean(value):
    if isinstance(value, str):
        value = value.strip()
        return value or None
    return value


def _pick(data: Dict[str, Any], fields) -> Dict[str, Any]:
    return {f: _clean(data.get(f)) for f in fields}


def _require(values: Dict[str, Any], field: str, label: str):
    if not values.get(field):
        raise ValidationError(f"{label} is required")


def _images_for(**owner) -> List[Dict[str, Any]]:
    images = (
        Image.query.filter_by(**owner)
        .order_by(Image.is_primary.desc(), Image.id)
        .all()
    )
    return [i.to_dict() for i in images]


# ------------------------------------------------------------
# Vignettes
# ------------------------------------------------------------


def list_vignettes() -> List[Dict[str, Any]]:
    """Active vignettes, newest first, with product and image counts."""
    product_count = func.count(func.distinct(VignetteProduct.product_id))
    image_count = func.count(func.distinct(Image.id))

    rows = (
        db.session.query(Vignette, product_count, image_count)
        .outerjoin(VignetteProduct, VignetteProduct.vignette_id == Vignette.id)
        .outerjoin(Image, Image.vignette_id == Vignette.id)
        .filter(Vignette.is_active.is_(True))
        .group_by(Vignette.id)
        .order_by(Vignette.date_created.desc(), Vignette.id.desc())
        .all()
    )

    out = []
    for vignette, products, images in rows:
        d = vignette.to_dict()
        d["product_count"] = products
        d["image_count"] = images
        out.append(d)
    return out


def get_active_vignette(vignette_id) -> Vignette:
    vignette = Vignette.query.filter_by(id=vignette_id, is_active=True).first()
    if vignette is None:
        raise NotFoundError("Vignette not found")
    return vignette


def get_vignette_detail(vignette_id) -> Dict[str, Any]:
    """
    Vignette row + its products (by position) + its images (primary first).
    Soft-deleted products are left out of the list.
    """
    vignette = get_active_vignette(vignette_id)

    links = (
        db.session.query(Product, VignetteProduct)
        .join(VignetteProduct, VignetteProduct.product_id == Product.id)
        .filter(VignetteProduct.vignette_id == vignette.id, Product.is_active.is_(True))
        .order_by(VignetteProduct.position, VignetteProduct.id)
        .all()
    )

    products = []
    for product, link in links:
        d = product.to_dict()
        d["position"] = link.position
        d["notes"] = link.notes
        products.append(d)

    return {
        "vignette": vignette.to_dict(),
        "products": products,
        "images": _images_for(vignette_id=vignette.id),
    }


def create_vignette(data: Dict[str, Any]) -> int:
    values = _pick(data, VIGNETTE_FIELDS)
    _require(values, "name", "Vignette name")

    vignette = Vignette(**values)
    db.session.add(vignette)
    db.session.commit()
    return vignette.id


def update_vignette(vignette_id, data: Dict[str, Any]) -> int:
    values = _pick(data, VIGNETTE_FIELDS)
    _require(values, "name", "Vignette name")
    values["date_updated"] = datetime.utcnow()

    changes = Vignette.query.filter_by(id=vignette_id).update(values, synchronize_session=False)
    db.session.commit()
    return changes


def delete_vignette(vignette_id) -> int:
    changes = Vignette.query.filter_by(id=vignette_id).update(
        {"is_active": False, "date_updated": datetime.utcnow()}, synchronize_session=False
    )
    db.session.commit()
    return changes


# ------------------------------------------------------------
# Products
# ------------------------------------------------------------


def _resolve_category(values: Dict[str, Any], data: Dict[str, Any]) -> Dict[str, Any]:
    """
    Fill category_id + the legacy category text.

    The legacy column is a copy of the category name so older readers
    that only look at products.category keep working.
    """
    category_id = _clean(data.get("category_id"))
    if category_id in (None, 0, "0"):
        values["category_id"] = None
        values["category"] = None
        return values

    try:
        category_id = int(category_id)
    except (TypeError, ValueError):
        raise ValidationError("category_id must be a number")

    category = db.session.get(Category, category_id)
    if category is None:
        raise ValidationError(f"Unknown category {category_id}")
    values["category_id"] = category_id
    values["category"] = category.name
    return values


def _parse_price(values: Dict[str, Any]) -> Dict[str, Any]:
    price = values.get("price")
    if price is None:
        return values
    try:
        values["price"] = round(float(price), 2)
    except (TypeError, ValueError):
        raise ValidationError("price must be a number")
    return values


def _product_values(data: Dict[str, Any]) -> Dict[str, Any]:
    values = _pick(data, PRODUCT_FIELDS)
    _require(values, "name", "Product name")
    _parse_price(values)
    return _resolve_category(values, data)


def list_products(category: Optional[str] = None) -> List[Dict[str, Any]]:
    """
    Active products ordered by name.
    `category` matches either the legacy text or the category id.
    """
    q = Product.query.filter(Product.is_active.is_(True))

    category = _clean(category)
    if category is not None:
        conditions = [Product.category == category]
        if str(category).isdigit():
            conditions.append(Product.category_id == int(category))
        q = q.filter(or_(*conditions))

    return [p.to_dict() for p in q.order_by(Product.name, Product.id).all()]


def get_active_product(product_id) -> Product:
    product = Product.query.filter_by(id=product_id, is_active=True).first()
    if product is None:
        raise NotFoundError("Product not found")
    return product


def get_product_detail(product_id) -> Dict[str, Any]:
    product = get_active_product(product_id)
    return {"product": product.to_dict(), "images": _images_for(product_id=product.id)}


def create_product(data: Dict[str, Any]) -> int:
    product = Product(**_product_values(data))
    db.session.add(product)
    db.session.commit()
    return product.id


def update_product(product_id, data: Dict[str, Any]) -> int:
    values = _product_values(data)
    values["date_updated"] = datetime.utcnow()

    changes = Product.query.filter_by(id=product_id).update(values, synchronize_session=False)
    db.session.commit()
    return changes


def delete_product(product_id) -> int:
    changes = Product.query.filter_by(id=product_id).update(
        {"is_active": False, "date_updated": datetime.utcnow()}, synchronize_session=False
    )
    db.session.commit()
    return changes


# ------------------------------------------------------------
# Vignette <-> product links
# ------------------------------------------------------------


def add_product_to_vignette(vignette_id, product_id, position=None, notes=None) -> int:
    get_active_vignette(vignette_id)
    get_active_product(product_id)

    try:
        position = int(position or 0)
    except (TypeError, ValueError):
        raise ValidationError("position must be a number")

    link = VignetteProduct(
        vignette_id=vignette_id,
        product_id=product_id,
        position=position,
        notes=_clean(notes),
    )
    db.session.add(link)
    db.session.commit()
    return link.id


def remove_product_from_vignette(vignette_id, product_id) -> int:
    changes = VignetteProduct.query.filter_by(
        vignette_id=vignette_id, product_id=product_id
    ).delete(synchronize_session=False)
    db.session.commit()
    return changes
