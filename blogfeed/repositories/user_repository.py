from blogfeed.db import coerce_id, db
from blogfeed.models.user_model import User


def get_by_id(user_id):
    pk = coerce_id(user_id)
    if pk is None:
        return None
    return db.session.get(User, pk)


def get_by_email(email: str):
    return User.query.filter_by(email=email).first()


def create_user(email, name, password_hash):
    user = User(
        email=email,
        name=name,
        password_hash=password_hash,
        status="",
    )
    db.session.add(user)
    db.session.commit()
    return user


def add_post(user, post):
    user.posts.append(post)


def remove_post(user, post):
    if post in user.posts:
        user.posts.remove(post)


def save(user):
    db.session.add(user)
    db.session.commit()
    return user
