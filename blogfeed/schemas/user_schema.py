from blogfeed.extensions.extensions import ma


class UserResponseSchema(ma.Schema):
    id = ma.Function(lambda user: str(user.id))
    email = ma.Str()
    name = ma.Str()
    status = ma.Str()
    posts = ma.Function(lambda user: [str(post.id) for post in user.posts])


user_schema = UserResponseSchema()
