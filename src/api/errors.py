"""Typed failures raised by debate services and mapped to HTTP responses."""

from fastapi import HTTPException


class DebateError(Exception):
    """Base class for expected, user-explainable debate failures."""

    status_code = 400

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class NotFoundError(DebateError):
    """Room, participant, motion or speech does not exist."""

    status_code = 404


class ForbiddenError(DebateError):
    """Caller is not allowed to perform the operation."""

    status_code = 403


class PreconditionFailedError(DebateError):
    """A gating condition (motion, roster, readiness...) is not met."""

    status_code = 400


class InvalidStateError(DebateError):
    """Operation is not valid for the room's current status or phase."""

    status_code = 409


class GenerationFailedError(DebateError):
    """The language model could not produce a usable result."""

    status_code = 502


def to_http_exception(error: DebateError) -> HTTPException:
    """Translate a debate failure into the HTTPException routers raise."""
    return HTTPException(status_code=error.status_code, detail=error.message)
