"""MatchFormat and TournamentConfig data classes."""

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

from dataclasses import dataclass
from datetime import date, datetime
from typing import Any, Dict, Optional, Union

from dateutil import parser as date_parser

from tourneyhost.constants import DEFAULT_GAMES_PER_MATCH
from tourneyhost.exceptions import InvalidConfigurationError
from tourneyhost.models.enums import MatchType
from tourneyhost.utils.validation import (
    require,
    validate_non_empty,
    validate_positive_integer,
)

DateInput = Union[None, str, date, datetime]


@dataclass
class MatchFormat:
    """How matches of an event are contested.

    Attributes
    ----------
    match_type : MatchType
        Singles (players meet) or doubles (teams meet).
    games_per_match : int
        Best-of-N length of a match.
    games_required_to_win : int
        Game wins that complete a match; ``games_per_match // 2 + 1`` unless
        given explicitly.
    """

    match_type: MatchType = MatchType.SINGLES
    games_per_match: int = DEFAULT_GAMES_PER_MATCH
    games_required_to_win: Optional[int] = None

    def __post_init__(self) -> None:
        if not isinstance(self.match_type, MatchType):
            self.match_type = MatchType(self.match_type)
        require(
            validate_positive_integer(self.games_per_match, "Games per match"),
            InvalidConfigurationError,
        )
        if self.games_required_to_win is None:
            self.games_required_to_win = self.games_per_match // 2 + 1
        require(
            validate_positive_integer(
                self.games_required_to_win, "Games required to win"
            ),
            InvalidConfigurationError,
        )
        if self.games_required_to_win > self.games_per_match:
            raise InvalidConfigurationError(
                f"Games required to win ({self.games_required_to_win}) exceeds "
                f"games per match ({self.games_per_match})"
            )

    @property
    def is_doubles(self) -> bool:
        return self.match_type is MatchType.DOUBLES

    def to_dict(self) -> Dict[str, Any]:
        """Serialize format to dictionary."""
        return {
            "match_type": self.match_type.value,
            "games_per_match": self.games_per_match,
            "games_required_to_win": self.games_required_to_win,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "MatchFormat":
        """Deserialize format from dictionary."""
        return cls(
            match_type=MatchType(data.get("match_type", MatchType.SINGLES.value)),
            games_per_match=data.get("games_per_match", DEFAULT_GAMES_PER_MATCH),
            games_required_to_win=data.get("games_required_to_win"),
        )


def parse_date(value: DateInput) -> Optional[datetime]:
    """Parse an ISO-8601 string (or pass through a date/datetime).

    Raises:
        InvalidConfigurationError: If the string is not a valid ISO date
    """
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        return value
    if isinstance(value, date):
        return datetime(value.year, value.month, value.day)
    try:
        return date_parser.isoparse(value)
    except (ValueError, TypeError) as e:
        raise InvalidConfigurationError(f"Invalid date: {value!r}") from e


@dataclass
class TournamentConfig:
    """Tournament descriptive settings.

    Attributes
    ----------
    name : str
        Tournament name; unique per manager, ignoring case and whitespace.
    location : str, optional
        Venue.
    message : str, optional
        Free text shown to entrants.
    begin, end : datetime, optional
        Schedule of the tournament; ``end`` may not precede ``begin``.
    """

    name: str
    location: Optional[str] = None
    message: Optional[str] = None
    begin: Optional[datetime] = None
    end: Optional[datetime] = None

    def __post_init__(self) -> None:
        self.name = require(
            validate_non_empty(self.name, "Tournament name"),
            InvalidConfigurationError,
        )
        self.begin = parse_date(self.begin)
        self.end = parse_date(self.end)
        if self.begin and self.end:
            try:
                reversed_dates = self.end < self.begin
            except TypeError as e:
                raise InvalidConfigurationError(
                    "Begin and end must both be timezone-aware or both naive"
                ) from e
            if reversed_dates:
                raise InvalidConfigurationError(
                    f"Tournament ends ({self.end}) before it begins ({self.begin})"
                )

    def to_dict(self) -> Dict[str, Any]:
        """Serialize configuration to dictionary."""
        return {
            "name": self.name,
            "location": self.location,
            "message": self.message,
            "begin": self.begin.isoformat() if self.begin else None,
            "end": self.end.isoformat() if self.end else None,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "TournamentConfig":
        """Deserialize configuration from dictionary."""
        return cls(
            name=data.get("name", "Untitled Tournament"),
            location=data.get("location"),
            message=data.get("message"),
            begin=parse_date(data.get("begin")),
            end=parse_date(data.get("end")),
        )
