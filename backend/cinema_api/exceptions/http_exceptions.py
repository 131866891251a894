from fastapi import status

from .base import AppError


class NotAcceptableError(AppError):
    status_code = status.HTTP_406_NOT_ACCEPTABLE
    detail = "Not Acceptable"


class UnsupportedMediaTypeError(AppError):
    status_code = status.HTTP_415_UNSUPPORTED_MEDIA_TYPE
    detail = "Request must be application/json"


class MalformedBodyError(AppError):
    status_code = status.HTTP_400_BAD_REQUEST
    detail = "body must be valid JSON"
