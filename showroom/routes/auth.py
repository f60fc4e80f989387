# showroom/routes/auth.py
"""
Login / logout / status for the admin screens.
"""

from flask import Blueprint, jsonify, request

from ..services.auth import authenticate, current_identity, login_user, logout_user

bp = Blueprint("auth", __name__, url_prefix="/api/auth")


@bp.route("/login", methods=["POST"])
def login():
    data = request.get_json(silent=True) or {}
    user = authenticate(data.get("username"), data.get("password"))
    login_user(user)
    return jsonify({"message": "Login successful", "user": user.to_dict()})


@bp.route("/logout", methods=["POST"])
def logout():
    logout_user()
    return jsonify({"message": "Logout successful"})


@bp.route("/status")
def status():
    identity = current_identity()
    if identity is None:
        return jsonify({"authenticated": False})
    return jsonify({"authenticated": True, "username": identity.username})
