from fastapi import status

from .base import AppError


class InvalidScreeningInputError(AppError):
    status_code = status.HTTP_400_BAD_REQUEST
    openapi_description = "Returned when the id or the body of a request is invalid."
    openapi_example = {"detail": "movieId must be an integer"}

    def __init__(self, message: str, status_code: int | None = None):
        if status_code is not None:
            self.status_code = status_code
        super().__init__(message)


class ScreeningNotFoundError(AppError):
    status_code = status.HTTP_404_NOT_FOUND
    openapi_description = "Returned when the requested screening does not exist."
    openapi_example = {"detail": "Screening with ID 123 not found."}

    def __init__(self, screening_id: int):
        self.screening_id = screening_id
        detail = f"Screening with ID {screening_id} not found."
        super().__init__(detail)


class ScreeningReferenceError(AppError):
    status_code = status.HTTP_400_BAD_REQUEST
    openapi_description = "Returned when a screening points at a movie or hall that does not exist."
    openapi_example = {
        "detail": "movieId or hallId does not reference an existing movie or hall"
    }

    def __init__(self, movie_id: int, hall_id: int):
        self.movie_id = movie_id
        self.hall_id = hall_id
        super().__init__(
            "movieId or hallId does not reference an existing movie or hall"
        )


class StoreError(AppError):
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    detail = "An unexpected error occurred."
