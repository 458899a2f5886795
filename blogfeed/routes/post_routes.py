from flask import Blueprint, jsonify, request

from blogfeed.routes.helpers import extract_bearer_token, json_body
from blogfeed.services.credential_service import require_caller
from blogfeed.services.post_service import get_post_service


post_bp = Blueprint("posts", __name__)


@post_bp.route("/posts", methods=["GET"])
def list_posts():
    require_caller(extract_bearer_token())
    page = request.args.get("page", default=1, type=int)

    return jsonify(get_post_service().list_posts(page)), 200


@post_bp.route("/posts", methods=["POST"])
def create_post():
    token = extract_bearer_token()
    require_caller(token)
    data = json_body()
    if data is None:
        return jsonify({"message": "Invalid JSON body"}), 400

    post = get_post_service().create_post(
        token,
        data.get("title"),
        data.get("content"),
        data.get("image_url") or "",
    )
    return jsonify({"message": "Post created", "post": post}), 201


@post_bp.route("/posts/<post_id>", methods=["GET"])
def get_post(post_id):
    require_caller(extract_bearer_token())
    return jsonify({"post": get_post_service().get_post(post_id)}), 200


@post_bp.route("/posts/<post_id>", methods=["PUT"])
def update_post(post_id):
    token = extract_bearer_token()
    require_caller(token)
    data = json_body()
    if data is None:
        return jsonify({"message": "Invalid JSON body"}), 400

    post = get_post_service().update_post(
        token,
        post_id,
        data.get("title"),
        data.get("content"),
        data.get("image_url"),
    )
    return jsonify({"message": "Post updated", "post": post}), 200


@post_bp.route("/posts/<post_id>", methods=["DELETE"])
def delete_post(post_id):
    deleted_id = get_post_service().delete_post(extract_bearer_token(), post_id)
    return jsonify({"message": "Post deleted", "post_id": deleted_id}), 200
