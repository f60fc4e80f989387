# showroom/routes/vignettes.py
"""
Vignette CRUD + the vignette <-> product links.
Reads are open (the showroom screens use them), writes need a login.
"""

from flask import Blueprint, jsonify, request

from ..services import catalog
from ..services.auth import login_required

bp = Blueprint("vignettes", __name__, url_prefix="/api/vignettes")


@bp.route("", methods=["GET"])
def vignette_list():
    return jsonify({"vignettes": catalog.list_vignettes()})


@bp.route("/<int:vignette_id>", methods=["GET"])
def vignette_detail(vignette_id):
    return jsonify(catalog.get_vignette_detail(vignette_id))


@bp.route("", methods=["POST"])
@login_required
def create_vignette(identity):
    vignette_id = catalog.create_vignette(request.get_json(silent=True) or {})
    return jsonify({"id": vignette_id, "message": "Vignette created successfully"})


@bp.route("/<int:vignette_id>", methods=["PUT"])
@login_required
def update_vignette(vignette_id, identity):
    changes = catalog.update_vignette(vignette_id, request.get_json(silent=True) or {})
    return jsonify({"message": "Vignette updated successfully", "changes": changes})


@bp.route("/<int:vignette_id>", methods=["DELETE"])
@login_required
def delete_vignette(vignette_id, identity):
    changes = catalog.delete_vignette(vignette_id)
    return jsonify({"message": "Vignette deleted successfully", "changes": changes})


@bp.route("/<int:vignette_id>/products/<int:product_id>", methods=["POST"])
@login_required
def add_product(vignette_id, product_id, identity):
    data = request.get_json(silent=True) or {}
    link_id = catalog.add_product_to_vignette(
        vignette_id, product_id, position=data.get("position"), notes=data.get("notes")
    )
    return jsonify({"id": link_id, "message": "Product added to vignette successfully"})


@bp.route("/<int:vignette_id>/products/<int:product_id>", methods=["DELETE"])
@login_required
def remove_product(vignette_id, product_id, identity):
    changes = catalog.remove_product_from_vignette(vignette_id, product_id)
    return jsonify({"message": "Product removed from vignette successfully", "changes": changes})
