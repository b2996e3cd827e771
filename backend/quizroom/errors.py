"""Error taxonomy shared by the quiz services and the HTTP layer.

Services raise these; the app factory renders any of them as
``{"error": message}`` with the matching status code.
"""


class QuizError(Exception):
    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(QuizError):
    status_code = 400


class Unauthorized(QuizError):
    status_code = 401


class Forbidden(QuizError):
    status_code = 403


class NotFound(QuizError):
    status_code = 404


class Conflict(QuizError):
    status_code = 409


class RoomCodeUnavailable(QuizError):
    """Every generated room code collided with an existing room."""
    status_code = 503
