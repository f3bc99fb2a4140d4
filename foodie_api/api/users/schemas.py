# foodie_api/api/users/schemas.py
from marshmallow import EXCLUDE, Schema, fields, validate


class UserResponseSchema(Schema):
    """Full profile, only returned to its owner."""
    uid = fields.Str(required=True)
    email = fields.Str()
    first_name = fields.Str(data_key="firstName")
    following = fields.List(fields.Str(), dump_default=[])
    followers = fields.List(fields.Str(), dump_default=[])
    posts = fields.List(fields.Str(), dump_default=[])
    liked_posts = fields.List(fields.Str(), data_key="likedPosts", dump_default=[])
    bookmarks = fields.List(fields.Str(), dump_default=[])
    is_admin = fields.Bool(data_key="isAdmin", dump_default=False)


class UserPublicResponseSchema(Schema):
    """
    GET /user/{uid} for somebody else's profile.
    Follower/following lists are reduced to counts.
    """
    uid = fields.Str(required=True)
    first_name = fields.Str(data_key="firstName")
    email = fields.Str()
    followers_count = fields.Int(data_key="followersCount")
    following_count = fields.Int(data_key="followingCount")
    posts = fields.List(fields.Str())


class UserStatisticsSchema(Schema):
    following_count = fields.Int(data_key="followingCount")
    followers_count = fields.Int(data_key="followersCount")
    liked_posts_count = fields.Int(data_key="likedPostsCount")
    posts_count = fields.Int(data_key="postsCount")
    bookmarked_count = fields.Int(data_key="bookmarkedCount")


class UpdateNameSchema(Schema):
    """PUT /update-name body."""
    class Meta:
        unknown = EXCLUDE

    first_name = fields.Str(data_key="firstName", required=True,
                            validate=validate.Length(min=1, error="Invalid first name provided."))
