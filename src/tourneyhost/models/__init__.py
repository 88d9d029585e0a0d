"""Entity model for Tourney Host."""

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

from tourneyhost.models.config import MatchFormat, TournamentConfig
from tourneyhost.models.enums import (
    BracketType,
    EventVariant,
    MatchStatus,
    MatchType,
    RegistrationStatus,
)
from tourneyhost.models.event import (
    BracketRound,
    DoubleElimEvent,
    Event,
    Round,
    RoundRobinEvent,
    Schedule,
    SingleElimEvent,
    create_event,
)
from tourneyhost.models.match import FeederLink, Game, Match
from tourneyhost.models.player import Player, Team
from tourneyhost.models.points import PointsDistribution
from tourneyhost.models.registration import Registration
from tourneyhost.models.tournament import League, LeaguePlayerRanking, Tournament

__all__ = [
    "BracketRound",
    "BracketType",
    "DoubleElimEvent",
    "Event",
    "EventVariant",
    "FeederLink",
    "Game",
    "League",
    "LeaguePlayerRanking",
    "Match",
    "MatchFormat",
    "MatchStatus",
    "MatchType",
    "Player",
    "PointsDistribution",
    "Registration",
    "RegistrationStatus",
    "Round",
    "RoundRobinEvent",
    "Schedule",
    "SingleElimEvent",
    "Team",
    "Tournament",
    "TournamentConfig",
    "create_event",
]
