from blogfeed.db import db


class User(db.Model):
    __tablename__ = "users"

    id = db.Column(db.Integer, primary_key=True)
    email = db.Column(db.String(255), unique=True, nullable=False)
    name = db.Column(db.String(120), nullable=False)
    password_hash = db.Column(db.String(255), nullable=False)
    status = db.Column(db.String(255), nullable=False, default="")

    posts = db.relationship(
        "Post",
        back_populates="creator",
        order_by="Post.id",
        lazy="select",
        cascade="all, delete-orphan",
    )
