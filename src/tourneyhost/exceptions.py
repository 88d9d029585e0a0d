"""Exceptions for use in Tourney Host"""

# Tourney Host
# Copyright (C) 2025  Tourney Host developers
#
# This program is free software: you can redistribute it and/or modify
# it under the terms of the GNU General Public License as published by
# the Free Software Foundation, either version 3 of the License, or
# (at your option) any later version.
#
# This program is distributed in the hope that it will be useful,
# but WITHOUT ANY WARRANTY; without even the implied warranty of
# MERCHANTABILITY or FITNESS FOR A PARTICULAR PURPOSE.  See the
# GNU General Public License for more details.
#
# You should have received a copy of the GNU General Public License
# along with this program.  If not, see <http://www.gnu.org/licenses/>.


# ========== Base Application Exception ==========


class TourneyHostException(Exception):
    """Base exception for all Tourney Host errors.

    All custom exceptions in the engine inherit from this class.
    This enables catching all engine-specific errors with a single except clause.
    """

    pass


# ========== Validation Exceptions ==========


class ValidationError(TourneyHostException):
    """Raised when caller input is malformed (bad seed map, bad scores, ...)."""

    pass


class InvalidParticipantError(ValidationError):
    """Raised when a participant is not part of the match or event."""

    pass


class InvalidConfigurationError(ValidationError):
    """Raised when a configuration object carries inconsistent values."""

    pass


# ========== State Exceptions ==========


class InvalidStateError(TourneyHostException):
    """Raised when an operation is not allowed in the entity's current state."""

    pass


class AlreadyCompletedError(InvalidStateError):
    """Raised when recording a result for a match that is already completed."""

    pass


class MatchNotReadyError(InvalidStateError):
    """Raised when recording a result for a match that still misses a participant."""

    pass


class EventAlreadyInitializedError(InvalidStateError):
    """Raised when changing participants, seeds or format of an initialized event."""

    pass


class EventNotInitializedError(InvalidStateError):
    """Raised when an operation needs a bracket or schedule that was not built yet."""

    pass


class DuplicateRegistrationError(InvalidStateError):
    """Raised when a player already holds a live registration for an event."""

    pass


class NoScoredEventsError(InvalidStateError):
    """Raised when a tournament has no event with points and a played match."""

    pass


# ========== Lookup / Capability Exceptions ==========


class NotFoundError(TourneyHostException):
    """Raised when a referenced entity does not exist."""

    pass


class UnsupportedOperationError(TourneyHostException):
    """Raised when an operation is requested for an event variant that cannot do it."""

    pass


class PermissionDeniedError(TourneyHostException):
    """Raised when a user may not edit a tournament or league."""

    pass
