from __future__ import annotations


class TriviaError(Exception):
    """Base class for failures that end a request with a client error."""


class NotFound(TriviaError):
    pass


class StoreError(TriviaError):
    pass


class ConflictError(TriviaError):
    """Revision token no longer matches the stored document."""


class InvalidRequest(TriviaError):
    pass
