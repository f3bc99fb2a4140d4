# foodie_api/api/posts/schemas.py
from marshmallow import EXCLUDE, Schema, fields, validate

_non_empty = validate.Length(min=1)


# --- nested ---
class CommentResponseSchema(Schema):
    """One element of a post's ``comments`` array."""
    body = fields.Str(required=True)
    author = fields.Str(allow_none=True)
    created_at = fields.DateTime(data_key="createdAt")


# --- request bodies ---
class PostCreateSchema(Schema):
    """POST /create-post body. ``author`` defaults to the poster's first name."""
    class Meta:
        unknown = EXCLUDE

    title = fields.Str(required=True, validate=_non_empty)
    body = fields.Str(required=True, validate=_non_empty)
    author = fields.Str(load_default=None)


class PostUpdateSchema(Schema):
    """PUT /edit-post/{post_id} and POST /repost/{post_id} body."""
    class Meta:
        unknown = EXCLUDE

    title = fields.Str(required=True, validate=_non_empty)
    body = fields.Str(required=True, validate=_non_empty)


# --- responses ---
class PostResponseSchema(Schema):
    """Post document as clients see it: camelCase keys and the document id as ``id``."""
    id = fields.Str(attribute="post_id")
    kind = fields.Str()
    title = fields.Str()
    body = fields.Str()
    author = fields.Str(allow_none=True)
    uid = fields.Str(allow_none=True)
    created_at = fields.DateTime(data_key="createdAt")
    updated_at = fields.DateTime(data_key="updatedAt", allow_none=True)
    likes = fields.List(fields.Str(), dump_default=[])
    like_count = fields.Int(data_key="likeCount", dump_default=0)
    comments = fields.List(fields.Nested(CommentResponseSchema), dump_default=[])
    shared_posts = fields.List(fields.Str(), data_key="sharedPosts", dump_default=[])
    reposts = fields.List(fields.Str(), dump_default=[])
    original_post_id = fields.Str(data_key="originalPostId", allow_none=True)
    original_post_timestamp = fields.DateTime(data_key="originalPostTimestamp", allow_none=True)
    shared_by = fields.Str(data_key="sharedBy", allow_none=True)
    shared_by_uid = fields.Str(data_key="sharedByUid", allow_none=True)
    reposted_by = fields.Str(data_key="repostedBy", allow_none=True)
    reposted_by_uid = fields.Str(data_key="repostedByUid", allow_none=True)
