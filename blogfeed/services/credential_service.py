from datetime import timedelta

from flask_jwt_extended import create_access_token, decode_token
from flask_jwt_extended.exceptions import JWTExtendedException
from jwt.exceptions import PyJWTError
from marshmallow import ValidationError as MarshmallowValidationError
from marshmallow.validate import Email
from sqlalchemy.exc import IntegrityError
from werkzeug.security import check_password_hash, generate_password_hash

from blogfeed.db import db
from blogfeed.errors import AuthError, ConflictError, NotFoundError, ValidationError
from blogfeed.repositories import user_repository


TOKEN_LIFETIME = timedelta(hours=1)
MIN_PASSWORD_LENGTH = 8

_email_validator = Email(error="Email is invalid")


def _require_non_empty_string(value):
    return isinstance(value, str) and value.strip()


def _is_email(value):
    if not isinstance(value, str):
        return False
    try:
        _email_validator(value.strip())
    except MarshmallowValidationError:
        return False
    return True


def _validate_signup(email, name, password):
    errors = []

    if not _is_email(email):
        errors.append({"field": "email", "message": "Email is invalid"})

    if not _require_non_empty_string(name):
        errors.append({"field": "name", "message": "Name is required"})

    if not isinstance(password, str) or len(password) < MIN_PASSWORD_LENGTH:
        errors.append({
            "field": "password",
            "message": f"Password must be at least {MIN_PASSWORD_LENGTH} characters",
        })

    return errors


def register_user(email, name, password):
    errors = _validate_signup(email, name, password)
    if errors:
        raise ValidationError("Invalid input", data=errors)

    email = email.strip()
    if user_repository.get_by_email(email):
        raise ConflictError("User exists already")

    password_hash = generate_password_hash(password)
    try:
        user = user_repository.create_user(
            email=email,
            name=name.strip(),
            password_hash=password_hash,
        )
    except IntegrityError as e:
        db.session.rollback()
        raise ConflictError("User exists already") from e

    return str(user.id)


def authenticate(email, password):
    if not _require_non_empty_string(email) or not isinstance(password, str):
        raise ValidationError("Email and password are required")

    user = user_repository.get_by_email(email.strip())
    if not user:
        raise NotFoundError("User not found")
    if not check_password_hash(user.password_hash, password):
        raise AuthError("Wrong password")

    user_id = str(user.id)
    token = create_access_token(
        identity=user_id,
        additional_claims={"email": user.email},
        expires_delta=TOKEN_LIFETIME,
    )
    return {"token": token, "user_id": user_id}


def verify_token(token):
    """Return ``(user_id, email)`` for a valid access token, else None.

    Every failure collapses to None so callers cannot tell a bad signature
    from an expired or truncated token.
    """
    if not _require_non_empty_string(token):
        return None

    try:
        claims = decode_token(token.strip())
    except (JWTExtendedException, PyJWTError):
        return None

    if claims.get("type") != "access":
        return None

    user_id = claims.get("sub")
    if not user_id:
        return None

    return str(user_id), claims.get("email")


def require_caller(token):
    identity = verify_token(token)
    if identity is None:
        raise AuthError("Not authenticated")
    return identity
