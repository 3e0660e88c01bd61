"""Domain errors raised by survey logic and mapped to HTTP by `http/errors.py`."""

from __future__ import annotations


class SurveyError(Exception):
    """Base class for errors the caller can act on."""

    status_code = 400

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class DuplicateEmailError(SurveyError):
    """A respondent with this email has already submitted answers."""

    def __init__(self, email: str) -> None:
        super().__init__("email already exists")
        self.email = email


__all__ = ["DuplicateEmailError", "SurveyError"]
