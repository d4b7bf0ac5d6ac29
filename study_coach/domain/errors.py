"""Domain exceptions raised by study coach services."""


class StudyCoachError(Exception):
    """Base class for study coach errors."""


class InvalidRequestError(StudyCoachError):
    """The caller sent input that cannot be processed."""


class AnswerRequiredError(InvalidRequestError):
    """Raised when advancing a quiz without selecting an option."""

    def __init__(self, message: str = "Please select an answer before proceeding."):
        super().__init__(message)


class ConfigurationError(StudyCoachError):
    """A required setting or secret is missing."""


class CompletionError(StudyCoachError):
    """The hosted completion API could not be reached or returned an error."""
