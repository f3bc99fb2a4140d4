# foodie_api/api/auth/schemas.py
from marshmallow import EXCLUDE, Schema, fields


class RegisterSchema(Schema):
    """POST /register body. Password strength and name presence are checked by AuthService."""
    class Meta:
        unknown = EXCLUDE

    email = fields.Email(required=True)
    password = fields.Str(required=True)
    first_name = fields.Str(data_key="firstName", load_default=None)


class LoginSchema(Schema):
    """POST /login body."""
    class Meta:
        unknown = EXCLUDE

    email = fields.Email(required=True)
    password = fields.Str(required=True)


class ChangePasswordSchema(Schema):
    """POST /change-password body."""
    class Meta:
        unknown = EXCLUDE

    new_password = fields.Str(data_key="newPassword", required=True,
                              error_messages={"required": "New password is required."})
