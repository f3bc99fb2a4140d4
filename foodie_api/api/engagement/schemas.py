# foodie_api/api/engagement/schemas.py
from marshmallow import EXCLUDE, Schema, fields, validate


class CommentCreateSchema(Schema):
    """POST /add-comment body."""
    class Meta:
        unknown = EXCLUDE

    post_id = fields.Str(data_key="postId", required=True, validate=validate.Length(min=1))
    body = fields.Str(required=True, validate=validate.Length(min=1, error="Comment body is required."))
