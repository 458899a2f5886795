from flask import Blueprint, jsonify

from blogfeed.routes.helpers import extract_bearer_token, json_body
from blogfeed.services import user_service
from blogfeed.services.credential_service import require_caller


user_bp = Blueprint("users", __name__)


@user_bp.route("/users/me", methods=["GET"])
def get_me():
    return jsonify(user_service.get_user(extract_bearer_token())), 200


@user_bp.route("/users/me/status", methods=["PUT"])
def update_my_status():
    token = extract_bearer_token()
    require_caller(token)
    data = json_body()
    if data is None:
        return jsonify({"message": "Invalid JSON body"}), 400

    user = user_service.update_status(token, data.get("status"))
    return jsonify(user), 200
