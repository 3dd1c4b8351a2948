"""Exceptions raised while handling intercepted requests."""


class MalformedRequestError(ValueError):
    """An indirection request lacks a required parameter."""

    def __init__(self, url: str, reason: str):
        self.url = url
        self.reason = reason
        super().__init__(f"{reason}: {url}")
