"""Domain errors raised by the services and translated to responses in `wordbook.main`."""


class WordbookError(Exception):
    """Base class for every error the API reports to the caller as a plain message."""

    status_code = 400

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class NotFoundError(WordbookError):
    """A referenced user, word, chapter, level or language does not exist."""

    status_code = 404


class UnauthorizedError(WordbookError):
    """A content mutation was attempted by a user without the admin flag."""

    status_code = 403


class ValidationError(WordbookError):
    status_code = 422


class ConstraintViolationError(WordbookError):
    """A unique key would be duplicated."""

    status_code = 409
