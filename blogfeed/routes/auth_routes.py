from flask import Blueprint, jsonify

from blogfeed.routes.helpers import json_body
from blogfeed.services import credential_service


auth_bp = Blueprint("auth", __name__)


@auth_bp.route("/signup", methods=["POST"])
def signup():
    data = json_body()
    if data is None:
        return jsonify({"message": "Invalid JSON body"}), 400

    user_id = credential_service.register_user(
        data.get("email"),
        data.get("name"),
        data.get("password"),
    )
    return jsonify({"message": "User created", "user_id": user_id}), 201


@auth_bp.route("/login", methods=["POST"])
def login():
    data = json_body()
    if data is None:
        return jsonify({"message": "Invalid JSON body"}), 400

    result = credential_service.authenticate(
        data.get("email"),
        data.get("password"),
    )
    return jsonify(result), 200
