"""
Errors Module
Exception hierarchy for the quiz helper.
"""


class QuizHelperError(Exception):
    """Base class for all quiz helper errors."""


class ConfigError(QuizHelperError):
    """Required configuration is missing or invalid."""


class SessionError(QuizHelperError):
    """Browser session is not usable (not started, already closed)."""


class LoginError(SessionError):
    """Canvas login did not succeed."""


class ElementNotFound(QuizHelperError):
    """A required page element could not be located."""

    def __init__(self, selector: str, message: str = ''):
        self.selector = selector
        super().__init__(message or f"Element not found: {selector}")


class AutoFillError(QuizHelperError):
    """Applying an answer to the page failed."""


class AnswerServiceError(QuizHelperError):
    """The language-model provider behind the answer service failed."""
