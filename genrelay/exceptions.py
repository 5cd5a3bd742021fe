"""Error taxonomy shared by the router, builder and generation client.

Every error carries a message that is surfaced verbatim to the client in
the ``{"error": ...}`` envelope, and the HTTP status it maps to.
"""
from __future__ import annotations


class RelayError(Exception):
    """Base class for errors converted into a JSON error envelope."""

    status_code: int = 500

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class InvalidInput(RelayError):
    """The caller omitted a required prompt or file."""

    status_code = 400


class RemoteError(RelayError):
    """The generative API upload or generation call failed."""

    status_code = 500


class ProcessingError(RelayError):
    """Reading, writing or encoding the scratch file failed locally."""

    status_code = 500
