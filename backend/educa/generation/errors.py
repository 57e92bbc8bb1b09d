"""Failure taxonomy for a single generation attempt.

Every subclass of GenerationError is absorbed by the generator (retry, then the
default resource). Anything else is a defect and is allowed to propagate.
"""


class GenerationError(Exception):
    """Base class for recoverable generation failures."""


class UpstreamUnavailable(GenerationError):
    """Network, timeout or HTTP-status failure talking to the model endpoint."""

    def __init__(self, message: str, *, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class MalformedContentError(GenerationError):
    """The model text did not contain a usable JSON object."""


class EmptyChoicesError(GenerationError):
    """The completion response carried no choices."""


class EmptyContentError(GenerationError):
    """The first choice had no message text."""
