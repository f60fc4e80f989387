# showroom/routes/categories.py
from flask import Blueprint, jsonify

from ..services.categories import category_tree, list_categories_flat

bp = Blueprint("categories", __name__, url_prefix="/api/categories")


@bp.route("")
def categories_tree():
    """Main categories, each with its subcategories."""
    return jsonify({"categories": category_tree()})


@bp.route("/flat")
def categories_flat():
    return jsonify({"categories": list_categories_flat()})
