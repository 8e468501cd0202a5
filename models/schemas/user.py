from marshmallow import (
    EXCLUDE,
    Schema,
    ValidationError,
    fields,
    pre_load,
    validate,
    validates_schema,
)

from models.user import ROLES


def _norm_email(v):
    return v.strip().lower() if isinstance(v, str) else v


def first_error(err: ValidationError) -> str:
    """Flatten marshmallow's field->messages mapping into one readable line."""
    messages = err.messages
    if isinstance(messages, dict):
        for field, msgs in messages.items():
            msg = msgs[0] if isinstance(msgs, list) and msgs else msgs
            if isinstance(msg, dict):
                msg = next(iter(msg.values()), "Invalid value")
            return f"{field}: {msg}"
    if isinstance(messages, list) and messages:
        return str(messages[0])
    return str(messages)


class _EmailNormalizingSchema(Schema):
    class Meta:
        unknown = EXCLUDE

    @pre_load
    def normalize(self, data, **kwargs):
        if isinstance(data, dict) and "email" in data:
            data = dict(data)
            data["email"] = _norm_email(data["email"])
        return data


class UserRegisterSchema(_EmailNormalizingSchema):
    name = fields.String(required=True, validate=validate.Length(min=3, max=50))
    email = fields.Email(required=True)
    role = fields.String(required=True, validate=validate.OneOf(ROLES))
    password = fields.String(required=True, load_only=True, validate=validate.Length(min=8))


class UserLoginSchema(_EmailNormalizingSchema):
    email = fields.Email(required=True)
    password = fields.String(required=True, load_only=True, validate=validate.Length(min=8))


class UserEditSchema(_EmailNormalizingSchema):
    name = fields.String(validate=validate.Length(min=3, max=50))
    email = fields.Email()
    role = fields.String(validate=validate.OneOf(ROLES))


class ChangePasswordSchema(Schema):
    class Meta:
        unknown = EXCLUDE

    current_password = fields.String(required=True, data_key="currentPassword")
    new_password = fields.String(required=True, data_key="newPassword", validate=validate.Length(min=8))
    confirm_password = fields.String(required=True, data_key="confirmPassword")

    @validates_schema
    def passwords_match(self, data, **kwargs):
        if data.get("new_password") != data.get("confirm_password"):
            raise ValidationError("Passwords do not match.", field_name="confirmPassword")


class UserOutSchema(Schema):
    id = fields.String()
    name = fields.String()
    email = fields.String()
    role = fields.String()
