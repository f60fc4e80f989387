# showroom/routes/products.py
"""
Product CRUD + listing (optionally filtered by category).
"""

from flask import Blueprint, jsonify, request

from ..services import catalog
from ..services.auth import login_required

bp = Blueprint("products", __name__, url_prefix="/api/products")


@bp.route("", methods=["GET"])
def product_list():
    """?category= matches the category name (legacy text) or its id."""
    return jsonify({"products": catalog.list_products(request.args.get("category"))})


@bp.route("/<int:product_id>", methods=["GET"])
def product_detail(product_id):
    return jsonify(catalog.get_product_detail(product_id))


@bp.route("", methods=["POST"])
@login_required
def create_product(identity):
    product_id = catalog.create_product(request.get_json(silent=True) or {})
    return jsonify({"id": product_id, "message": "Product created successfully"})


@bp.route("/<int:product_id>", methods=["PUT"])
@login_required
def update_product(product_id, identity):
    changes = catalog.update_product(product_id, request.get_json(silent=True) or {})
    return jsonify({"message": "Product updated successfully", "changes": changes})


@bp.route("/<int:product_id>", methods=["DELETE"])
@login_required
def delete_product(product_id, identity):
    changes = catalog.delete_product(product_id)
    return jsonify({"message": "Product deleted successfully", "changes": changes})
