from flask import Blueprint, current_app, jsonify, request

from blogfeed.repositories import post_repository
from blogfeed.routes.helpers import extract_bearer_token
from blogfeed.services.credential_service import require_caller
from blogfeed.services.image_service import store_image


image_bp = Blueprint("images", __name__)


@image_bp.route("/post-image", methods=["PUT"])
def upload_post_image():
    require_caller(extract_bearer_token())

    image = request.files.get("image")
    if not image:
        return jsonify({"message": "No file provided"}), 200

    image_ref = store_image(image)

    # Images attached to a post are released by the post update/delete flow.
    old_path = request.form.get("oldPath") or request.form.get("old_path")
    if old_path and not post_repository.is_image_referenced(old_path):
        current_app.extensions["image_lifecycle"].replace(old_path, image_ref)

    return jsonify({"message": "File stored", "file_path": image_ref}), 201
