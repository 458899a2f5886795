from blogfeed.extensions.extensions import ma


class CreatorSchema(ma.Schema):
    id = ma.Function(lambda user: str(user.id))
    name = ma.Str()


class PostResponseSchema(ma.Schema):
    id = ma.Function(lambda post: str(post.id))
    title = ma.Str()
    content = ma.Str()
    image_url = ma.Str()
    creator = ma.Nested(CreatorSchema)
    created_at = ma.DateTime()
    updated_at = ma.DateTime()


class PostPageSchema(ma.Schema):
    posts = ma.List(ma.Nested(PostResponseSchema))
    total_posts = ma.Int()


post_schema = PostResponseSchema()
creator_schema = CreatorSchema()
post_page_schema = PostPageSchema()
