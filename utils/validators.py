from marshmallow import Schema, fields, validate, ValidationError
from typing import Dict, Any, List

from services.scoring.catalog import GENDERS, domain_values

GENDER_VALUES = [g.value for g in GENDERS]

class UserCreateSchema(Schema):
    """Schema for validating new user profiles"""
    email = fields.Email(required=True, validate=validate.Length(max=255))
    first_name = fields.String(allow_none=True, load_default=None, validate=validate.Length(max=100))
    last_name = fields.String(allow_none=True, load_default=None, validate=validate.Length(max=100))
    birthday = fields.String(allow_none=True, load_default=None, validate=validate.Length(max=40))
    gender = fields.String(allow_none=True, load_default=None, validate=validate.OneOf(GENDER_VALUES))

class UserUpdateSchema(Schema):
    """Schema for partial profile updates; only supplied keys are returned"""
    email = fields.Email(validate=validate.Length(max=255))
    first_name = fields.String(allow_none=True, validate=validate.Length(max=100))
    last_name = fields.String(allow_none=True, validate=validate.Length(max=100))
    birthday = fields.String(allow_none=True, validate=validate.Length(max=40))
    gender = fields.String(allow_none=True, validate=validate.OneOf(GENDER_VALUES))

class SubmissionCreateSchema(Schema):
    """Schema for validating new performance submissions"""
    user_id = fields.Integer(required=True, validate=validate.Range(min=1))
    event = fields.String(required=True, validate=validate.Length(min=1, max=100))
    raw_value = fields.String(required=True, validate=validate.Length(min=1, max=50))
    unit = fields.String(allow_none=True, load_default=None, validate=validate.Length(max=50))

class DomainScoresQuerySchema(Schema):
    """Schema for validating the requested domains of a score query"""
    domain = fields.List(
        fields.String(validate=validate.OneOf(domain_values())),
        load_default=list,
    )

def validate_user_create(data: Dict[str, Any]) -> Dict[str, Any]:
    """Validate new user payload"""
    try:
        return dict(UserCreateSchema().load(data or {}))
    except ValidationError as err:
        raise ValueError(f"Invalid user: {err.messages}")

def validate_user_update(data: Dict[str, Any]) -> Dict[str, Any]:
    """Validate profile update payload; an empty update is rejected"""
    try:
        result = dict(UserUpdateSchema().load(data or {}))
    except ValidationError as err:
        raise ValueError(f"Invalid user update: {err.messages}")
    if not result:
        raise ValueError("No profile fields to update")
    return result

def validate_submission(data: Dict[str, Any]) -> Dict[str, Any]:
    """Validate submission payload"""
    schema = SubmissionCreateSchema()
    try:
        result = schema.load(data or {})
        return dict(result)  # Ensure Dict type
    except ValidationError as err:
        raise ValueError(f"Invalid submission: {err.messages}")

def validate_domains(requested: List[str]) -> List[str]:
    """Validate requested domain values, defaulting to every catalog domain"""
    schema = DomainScoresQuerySchema()
    try:
        result = schema.load({'domain': list(requested)})
    except ValidationError as err:
        raise ValueError(f"Invalid domains: {err.messages}")
    return result['domain'] or domain_values()
