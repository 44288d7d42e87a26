"""Error types surfaced by trend analysis and script generation."""


class TrendScoutError(Exception):
    """Base class for errors shown to the user."""

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class MissingCredential(TrendScoutError):
    """No model credential was supplied, or none has been captured yet."""


class ModelRequestError(TrendScoutError):
    """The generative model could not be reached or rejected the request."""


class ResponseParseError(TrendScoutError):
    """The model answered, but no JSON object could be extracted."""


class GenerationError(TrendScoutError):
    """Script generation failed while talking to the model."""
