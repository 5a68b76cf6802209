from marshmallow import Schema, fields

from models.schemas.content import VideoOutSchema
from models.schemas.user import OwnerSchema


class LikeOutSchema(Schema):
    id = fields.String()
    liked_by_id = fields.String(data_key="likedBy")
    target_kind = fields.Method("get_target_kind", data_key="targetKind")
    target_id = fields.String(data_key="targetId")
    created_at = fields.DateTime(data_key="createdAt")

    def get_target_kind(self, obj):
        kind = obj.target_kind
        return getattr(kind, "value", kind)


class LikedVideoOutSchema(Schema):
    """A video like hydrated with the liking user and the video itself."""
    id = fields.String()
    liked_by = fields.Nested(OwnerSchema, data_key="likedBy")
    video = fields.Nested(VideoOutSchema)
    created_at = fields.DateTime(data_key="createdAt")
