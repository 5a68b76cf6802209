from marshmallow import Schema, fields, pre_load, EXCLUDE

from models.schemas.common import strip_strings, validate_not_blank


class UserRegisterSchema(Schema):
    class Meta:
        unknown = EXCLUDE

    username = fields.String(required=True, validate=validate_not_blank)
    email = fields.Email(required=True)
    full_name = fields.String(required=True, data_key="fullName", validate=validate_not_blank)
    password = fields.String(required=True, load_only=True, validate=validate_not_blank)

    @pre_load
    def normalize(self, data, **kwargs):
        data = strip_strings(data, ("username", "email", "fullName"))
        for key in ("username", "email"):
            if isinstance(data.get(key), str):
                data[key] = data[key].lower()
        return data


class UserLoginSchema(Schema):
    class Meta:
        unknown = EXCLUDE

    username = fields.String(load_default=None, allow_none=True)
    email = fields.String(load_default=None, allow_none=True)
    password = fields.String(required=True, load_only=True)

    @pre_load
    def normalize(self, data, **kwargs):
        data = strip_strings(data, ("username", "email"))
        for key in ("username", "email"):
            if isinstance(data.get(key), str):
                data[key] = data[key].lower() or None
        return data


class ChangePasswordSchema(Schema):
    class Meta:
        unknown = EXCLUDE

    old_password = fields.String(required=True, data_key="oldPassword", load_only=True)
    new_password = fields.String(required=True, data_key="newPassword", load_only=True, validate=validate_not_blank)


class UserOutSchema(Schema):
    """Public projection: never exposes password_hash or refresh_token."""
    id = fields.String()
    username = fields.String()
    email = fields.String()
    full_name = fields.String(data_key="fullName")
    avatar = fields.String()
    cover_image = fields.String(data_key="coverImage", allow_none=True)
    created_at = fields.DateTime(data_key="createdAt")
    updated_at = fields.DateTime(data_key="updatedAt")


class OwnerSchema(Schema):
    id = fields.String()
    username = fields.String()
    full_name = fields.String(data_key="fullName")
    avatar = fields.String()
