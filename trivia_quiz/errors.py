"""
Error taxonomy shared by every quiz command.
"""
import logging
from typing import Dict, Optional

from .quiz_store import QuizNotFoundError, QuizStoreError, QuizValidationError

logger = logging.getLogger(__name__)


class QuizError(Exception):
    """Base exception for recoverable command errors."""

    def __init__(self, message: str):
        self.user_message = message
        super().__init__(message)


class MissingArgument(QuizError):
    """Raised when a command needs an id and none was given."""

    def __init__(self, name: str = "id"):
        self.name = name
        super().__init__(f"Missing the {name} parameter.")


class NotANumber(QuizError):
    """Raised when an id token cannot be parsed as an integer."""

    def __init__(self, token: str):
        self.token = token
        super().__init__(f"The id parameter '{token}' is not a number.")


class NotFound(QuizError):
    """Raised when a well-formed id has no matching quiz."""

    def __init__(self, quiz_id: int):
        self.quiz_id = quiz_id
        super().__init__(f"There is no quiz with id {quiz_id}.")


class ValidationFailed(QuizError):
    """Raised when the store rejects a question or answer."""

    def __init__(self, messages: Dict[str, str]):
        self.messages = dict(messages)
        super().__init__("The quiz is not valid:")


class StoreUnavailable(QuizError):
    """Raised for any other store failure."""

    def __init__(self, detail: Optional[str] = None):
        self.detail = detail
        message = "The quiz store is unavailable."
        if detail:
            message = f"{message} {detail}"
        super().__init__(message)


class UnexpectedError(QuizError):
    """Wraps a defect outside the taxonomy so it can still be reported."""

    def __init__(self, operation: str):
        self.operation = operation
        super().__init__(f"An unexpected error occurred during {operation}. Please try again.")


def classify_error(error: Exception, operation: str) -> QuizError:
    """
    Map any exception raised by a command to the error taxonomy.

    Args:
        error: The exception that occurred
        operation: Name of the command that failed, for logging

    Returns:
        A QuizError carrying the message to show the user
    """
    if isinstance(error, QuizError):
        logger.debug(f"{operation} failed: {error.user_message}")
        return error

    if isinstance(error, QuizValidationError):
        logger.info(f"{operation} rejected by store validation: {error.messages}")
        return ValidationFailed(error.messages)

    if isinstance(error, QuizNotFoundError):
        return NotFound(error.quiz_id)

    if isinstance(error, (QuizStoreError, OSError)):
        logger.error(
            f"Store failure during {operation}: {error}",
            extra={'event_type': 'store_unavailable', 'operation': operation}
        )
        return StoreUnavailable(str(error))

    logger.error(
        f"Unexpected error during {operation}: {error}",
        exc_info=error,
        extra={'event_type': 'unexpected_error', 'operation': operation}
    )
    return UnexpectedError(operation)
