from marshmallow import Schema, fields, pre_load, EXCLUDE

from models.schemas.common import strip_strings, validate_not_blank
from models.schemas.user import OwnerSchema


class ContentSchema(Schema):
    """Input for tweets and comments: a single non-blank `content` field."""

    class Meta:
        unknown = EXCLUDE

    content = fields.String(required=True, validate=validate_not_blank)

    @pre_load
    def normalize(self, data, **kwargs):
        return strip_strings(data, ("content",))


class TweetOutSchema(Schema):
    id = fields.String()
    content = fields.String()
    owner = fields.Nested(OwnerSchema)
    created_at = fields.DateTime(data_key="createdAt")
    updated_at = fields.DateTime(data_key="updatedAt")


class CommentOutSchema(Schema):
    id = fields.String()
    content = fields.String()
    video_id = fields.String(data_key="videoId")
    owner = fields.Nested(OwnerSchema)
    created_at = fields.DateTime(data_key="createdAt")
    updated_at = fields.DateTime(data_key="updatedAt")


class VideoOutSchema(Schema):
    id = fields.String()
    title = fields.String()
    description = fields.String(allow_none=True)
    video_file = fields.String(data_key="videoFile")
    thumbnail = fields.String(allow_none=True)
    duration = fields.Float()
    views = fields.Integer()
    is_published = fields.Boolean(data_key="isPublished")
    owner = fields.Nested(OwnerSchema)
    created_at = fields.DateTime(data_key="createdAt")
