from marshmallow import Schema, fields, pre_load, validates_schema, ValidationError, EXCLUDE
from marshmallow.validate import Length

from models.schemas.common import strip_strings, validate_not_blank
from models.schemas.content import VideoOutSchema
from models.schemas.user import OwnerSchema


class PlaylistCreateSchema(Schema):
    class Meta:
        unknown = EXCLUDE

    name = fields.String(required=True, validate=[validate_not_blank, Length(max=255)])
    description = fields.String(load_default=None, allow_none=True)

    @pre_load
    def normalize(self, data, **kwargs):
        return strip_strings(data, ("name", "description"))


class PlaylistUpdateSchema(PlaylistCreateSchema):
    """Partial update: at least one of name / description."""

    name = fields.String(validate=[validate_not_blank, Length(max=255)])
    description = fields.String(allow_none=True)

    @validates_schema
    def require_a_field(self, data, **kwargs):
        if not data:
            raise ValidationError("name or description is required")


class PlaylistOutSchema(Schema):
    id = fields.String()
    name = fields.String()
    description = fields.String(allow_none=True)
    owner = fields.Nested(OwnerSchema)
    videos = fields.List(fields.Nested(VideoOutSchema))
    total_videos = fields.Method("get_total_videos", data_key="totalVideos")
    created_at = fields.DateTime(data_key="createdAt")
    updated_at = fields.DateTime(data_key="updatedAt")

    def get_total_videos(self, obj):
        return len(obj.videos)
