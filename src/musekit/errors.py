"""Error hierarchy for musekit.

Every failure that can reach a user is a ``MuseError`` whose message is
already human-readable. Operation boundaries catch ``MuseError`` and render
``str(error)``; anything else is a bug and propagates.
"""


class MuseError(Exception):
    """Base class for all errors surfaced to the user."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    def __str__(self) -> str:
        return self.message


class InputValidationError(MuseError):
    """A required form field is missing or invalid.

    Raised before any service call is made.
    """


class ServiceError(MuseError):
    """The generative AI service call failed (network, auth, model error)."""


class InvalidFormatError(MuseError):
    """A structured response could not be parsed against its schema.

    Kept separate from ``ServiceError``: the call succeeded but the service
    broke its output contract.
    """

    def __init__(self, message: str, raw_text: str = ""):
        super().__init__(message)
        self.raw_text = raw_text


class JobFailedError(MuseError):
    """A long-running job reached a failed terminal state."""


class JobNoResultError(JobFailedError):
    """A long-running job reported completion but carried no result."""


class PromptStoreError(MuseError):
    """The prompt library backend could not be read or written."""
