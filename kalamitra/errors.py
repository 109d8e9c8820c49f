class KalaMitraError(Exception):
    """Base class for errors surfaced to the artisan."""


class ValidationError(KalaMitraError):
    pass


class ViewLockedError(ValidationError):
    pass


class ActionInProgressError(ValidationError):
    pass


class WorkspaceNotFoundError(KalaMitraError):
    pass


class PolicyBlockedError(KalaMitraError):
    """The model declined to produce images and explained why."""

    def __init__(self, explanation: str):
        self.explanation = explanation
        super().__init__(
            f'Request blocked. The AI responded: "{explanation}". '
            "This may be due to a safety policy violation. Please adjust your prompt."
        )


class EmptyResultError(KalaMitraError):
    pass


class InvalidResponseFormatError(KalaMitraError):
    pass


class TransportError(KalaMitraError):
    """Network or service failure while talking to an external API."""
