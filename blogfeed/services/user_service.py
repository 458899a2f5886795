from blogfeed.errors import NotFoundError, ValidationError
from blogfeed.repositories import user_repository
from blogfeed.schemas.user_schema import user_schema
from blogfeed.services.credential_service import require_caller


MAX_STATUS_LENGTH = 255


def _load_caller(token):
    caller_id, _ = require_caller(token)
    user = user_repository.get_by_id(caller_id)
    if not user:
        raise NotFoundError("User not found")
    return user


def get_user(token):
    return user_schema.dump(_load_caller(token))


def update_status(token, status):
    user = _load_caller(token)

    if not isinstance(status, str):
        raise ValidationError("Status must be a string")
    status = status.strip()
    if len(status) > MAX_STATUS_LENGTH:
        raise ValidationError(f"Status must be at most {MAX_STATUS_LENGTH} characters")

    user.status = status
    user_repository.save(user)
    return user_schema.dump(user)
