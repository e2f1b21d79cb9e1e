# core/errors.py
"""
Error taxonomy for debate rooms.

It is deliberately flat: either the store failed or the AI call failed.
The two guard errors cover calls made without a logged-in user or before a
room has been loaded.
"""


class DebateError(Exception):
    """Base class for everything the debate-room layer raises."""


class StoreError(DebateError):
    """A read or write against the database failed."""


class AIResponseError(DebateError):
    """The argument generator (LLM call) failed or returned nothing."""


class NotAuthenticatedError(DebateError):
    def __init__(self, message: str = "User not authenticated"):
        super().__init__(message)


class RoomNotLoadedError(DebateError):
    def __init__(self, message: str = "No debate room loaded"):
        super().__init__(message)
