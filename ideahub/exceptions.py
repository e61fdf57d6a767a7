"""Domain errors raised by services and mapped to HTTP responses in ``ideahub.main``."""


class IdeaHubError(Exception):
    """Base class for errors the API layer translates into a client response."""

    status_code = 400

    def __init__(self, detail: str):
        super().__init__(detail)
        self.detail = detail


class NotFoundError(IdeaHubError):
    status_code = 404


class InvalidStateError(IdeaHubError):
    status_code = 400
