class ServiceError(Exception):
    status_code = 500

    def __init__(self, message, data=None):
        super().__init__(message)
        self.message = message
        self.data = data

    def to_dict(self):
        payload = {"message": self.message}
        if self.data:
            payload["data"] = self.data
        return payload


class AuthError(ServiceError):
    status_code = 401


class ForbiddenError(ServiceError):
    status_code = 403


class NotFoundError(ServiceError):
    status_code = 404


class ConflictError(ServiceError):
    status_code = 409


class ValidationError(ServiceError):
    status_code = 422


class MediaStorageError(ServiceError):
    status_code = 503
