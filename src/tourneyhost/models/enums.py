"""Enumerations shared by the Tourney Host models."""

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

from enum import Enum

from tourneyhost.constants import (
    MATCH_TYPE_DOUBLES,
    MATCH_TYPE_SINGLES,
    REGISTRATION_APPROVED,
    REGISTRATION_PENDING,
    REGISTRATION_REJECTED,
    VARIANT_DOUBLE_ELIM,
    VARIANT_ROUND_ROBIN,
    VARIANT_SINGLE_ELIM,
)


class EventVariant(Enum):
    """Closed set of event formats."""

    SINGLE_ELIM = VARIANT_SINGLE_ELIM
    DOUBLE_ELIM = VARIANT_DOUBLE_ELIM
    ROUND_ROBIN = VARIANT_ROUND_ROBIN

    @property
    def is_elimination(self) -> bool:
        return self is not EventVariant.ROUND_ROBIN


class MatchType(Enum):
    """Whether matches are contested by single players or by two-player teams."""

    SINGLES = MATCH_TYPE_SINGLES
    DOUBLES = MATCH_TYPE_DOUBLES


class BracketType(Enum):
    """Side of an elimination bracket a round belongs to."""

    WINNERS = "WINNERS"
    LOSERS = "LOSERS"
    THIRD_PLACE = "THIRD_PLACE"


class MatchStatus(Enum):
    PENDING = "PENDING"
    COMPLETED = "COMPLETED"


class RegistrationStatus(Enum):
    """Registration lifecycle: PENDING moves to APPROVED or REJECTED exactly once."""

    PENDING = REGISTRATION_PENDING
    APPROVED = REGISTRATION_APPROVED
    REJECTED = REGISTRATION_REJECTED
