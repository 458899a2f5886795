import logging

from flask import current_app

from blogfeed.db import db
from blogfeed.errors import ForbiddenError, NotFoundError, ValidationError
from blogfeed.repositories import post_repository, user_repository
from blogfeed.schemas.post_schema import creator_schema, post_page_schema, post_schema
from blogfeed.services.credential_service import require_caller


logger = logging.getLogger(__name__)

MIN_FIELD_LENGTH = 5
# Clients that cannot omit a field send this literal to keep the current image.
KEEP_IMAGE_SENTINEL = "undefined"


def validate_post_input(title, content, image_url=None):
    errors = []
    if not isinstance(title, str) or len(title.strip()) < MIN_FIELD_LENGTH:
        errors.append({"field": "title", "message": "Title is invalid"})
    if not isinstance(content, str) or len(content.strip()) < MIN_FIELD_LENGTH:
        errors.append({"field": "content", "message": "Content is invalid"})
    if image_url is not None and not isinstance(image_url, str):
        errors.append({"field": "image_url", "message": "Image URL must be a string"})
    if errors:
        raise ValidationError("Invalid input", data=errors)
    return title.strip(), content.strip()


def _serialize_post(post, creator):
    payload = post_schema.dump(post)
    payload["creator"] = creator_schema.dump(creator)
    return payload


def _ensure_owner(post, caller_id):
    if str(post.creator_id) != str(caller_id):
        raise ForbiddenError("Not authorized")


class PostService:
    """Create, read, update and delete posts on behalf of a token holder.

    Store writes happen first; image cleanup and the change notification
    only follow a successful commit.
    """

    def __init__(self, broadcaster, images, per_page=2):
        self.broadcaster = broadcaster
        self.images = images
        self.per_page = per_page

    def create_post(self, token, title, content, image_url=""):
        caller_id, _ = require_caller(token)
        title, content = validate_post_input(title, content, image_url)

        user = user_repository.get_by_id(caller_id)
        if not user:
            raise ValidationError("Invalid user")

        post = post_repository.create_post(
            title=title,
            content=content,
            image_url=image_url or "",
            creator_id=user.id,
        )
        user_repository.add_post(user, post)
        user_repository.save(user)

        owner = user_repository.get_by_id(post.creator_id)
        payload = _serialize_post(post, owner)
        self.broadcaster.post_created(payload)
        logger.info("Post %s created by user %s", post.id, caller_id)
        return payload

    def update_post(self, token, post_id, title, content, image_url=None):
        caller_id, _ = require_caller(token)

        post = post_repository.get_by_id(post_id, populate=("creator",))
        if not post:
            raise NotFoundError("Post not found")
        _ensure_owner(post, caller_id)

        title, content = validate_post_input(title, content, image_url)

        old_image = post.image_url
        post.title = title
        post.content = content
        if image_url is not None and image_url != KEEP_IMAGE_SENTINEL:
            post.image_url = image_url

        try:
            post_repository.save(post)
        except Exception:
            db.session.rollback()
            raise

        self.images.replace(old_image, post.image_url)

        payload = _serialize_post(post, post.creator)
        self.broadcaster.post_updated(payload)
        logger.info("Post %s updated by user %s", post.id, caller_id)
        return payload

    def delete_post(self, token, post_id):
        caller_id, _ = require_caller(token)

        post = post_repository.get_by_id(post_id, populate=("creator",))
        if not post:
            raise NotFoundError("Post not found")
        _ensure_owner(post, caller_id)

        deleted_id = str(post.id)
        image_url = post.image_url
        owner = post.creator

        post_repository.remove(post)
        user_repository.remove_post(owner, post)
        try:
            user_repository.save(owner)
        except Exception:
            db.session.rollback()
            raise

        self.images.delete(image_url)

        self.broadcaster.post_deleted(deleted_id)
        logger.info("Post %s deleted by user %s", deleted_id, caller_id)
        return deleted_id

    def list_posts(self, page=None):
        if not page:
            page = 1
        if not isinstance(page, int) or page < 1:
            raise ValidationError(
                "Invalid input",
                data=[{"field": "page", "message": "Page must be a positive integer"}],
            )

        total_posts = post_repository.count()
        posts = post_repository.find(
            offset=(page - 1) * self.per_page,
            limit=self.per_page,
        )
        return post_page_schema.dump({"posts": posts, "total_posts": total_posts})

    def get_post(self, post_id):
        post = post_repository.get_by_id(post_id, populate=("creator",))
        if not post:
            raise NotFoundError("Post not found")
        return post_schema.dump(post)


def get_post_service() -> PostService:
    return current_app.extensions["post_service"]
