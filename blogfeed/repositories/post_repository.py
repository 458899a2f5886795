from sqlalchemy.orm import joinedload

from blogfeed.db import coerce_id, db
from blogfeed.models.post_model import Post


def create_post(title, content, image_url, creator_id):
    post = Post(
        title=title,
        content=content,
        image_url=image_url or "",
        creator_id=creator_id,
    )
    db.session.add(post)
    db.session.flush()

    return post


def get_by_id(post_id, populate=()):
    pk = coerce_id(post_id)
    if pk is None:
        return None

    query = Post.query.filter(Post.id == pk)
    if "creator" in populate:
        query = query.options(joinedload(Post.creator))
    return query.first()


def find(offset: int, limit: int):
    return (
        Post.query
        .options(joinedload(Post.creator))
        .order_by(Post.created_at.desc(), Post.id.desc())
        .offset(offset)
        .limit(limit)
        .all()
    )


def count() -> int:
    return Post.query.count()


def save(post):
    db.session.add(post)
    db.session.commit()
    return post


def remove(post):
    db.session.delete(post)


def is_image_referenced(image_url) -> bool:
    if not image_url:
        return False
    return db.session.query(Post.id).filter(Post.image_url == image_url).first() is not None
