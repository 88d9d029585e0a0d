"""Event models: a closed set of bracket variants sharing one entrant model.

Controllers dispatch on ``Event.variant`` rather than on subclass hooks.
"""

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

from dataclasses import dataclass, field
from typing import Any, ClassVar, Dict, List, Optional, Type, Union

from tourneyhost.constants import BYE_NAME
from tourneyhost.exceptions import (
    EventAlreadyInitializedError,
    EventNotInitializedError,
    InvalidParticipantError,
    NotFoundError,
    UnsupportedOperationError,
    ValidationError,
)
from tourneyhost.models.config import MatchFormat
from tourneyhost.models.enums import BracketType, EventVariant
from tourneyhost.models.match import Match
from tourneyhost.models.player import Player, Team
from tourneyhost.models.points import PointsDistribution
from tourneyhost.models.registration import Registration
from tourneyhost.type_hints import ParticipantId, SeedMap
from tourneyhost.utils import generate_id
from tourneyhost.utils.validation import require, validate_positive_integer


def _round_view(
    bracket: Optional[BracketType], index: int, match_ids: List[str]
) -> Dict[str, Any]:
    return {
        "bracket": bracket.value if bracket else None,
        "index": index,
        "matches": list(match_ids),
    }


@dataclass
class Round:
    """Matches of one elimination depth, ordered by position."""

    index: int
    match_ids: List[str] = field(default_factory=list)

    def __len__(self) -> int:
        return len(self.match_ids)


@dataclass
class BracketRound(Round):
    """A double-elimination round, tagged with its bracket side.

    ``feeds_from_winners_round`` names the winners round whose losers drop
    into this losers round, if any.
    """

    bracket_type: BracketType = BracketType.WINNERS
    feeds_from_winners_round: Optional[int] = None


@dataclass
class Schedule:
    """All round-robin matches one participant plays."""

    participant_id: ParticipantId
    match_ids: List[str] = field(default_factory=list)


@dataclass
class Event:
    """Base event: entrants, seeds, format, registrations and the match arena."""

    variant: ClassVar[EventVariant]

    name: str
    tournament_id: Optional[str] = None
    match_format: MatchFormat = field(default_factory=MatchFormat)
    id: str = field(default_factory=lambda: generate_id("Event"))
    players: List[Player] = field(default_factory=list)
    teams: List[Team] = field(default_factory=list)
    player_seeds: Dict[str, int] = field(default_factory=dict)
    team_seeds: Dict[str, int] = field(default_factory=dict)
    registrations: List[Registration] = field(default_factory=list)
    points_distribution: Optional[PointsDistribution] = None
    matches: Dict[str, Match] = field(default_factory=dict)
    initialized: bool = False

    # ========== Guards ==========

    def ensure_not_initialized(self, action: str) -> None:
        if self.initialized:
            raise EventAlreadyInitializedError(
                f"Cannot {action}: event '{self.name}' is already initialized"
            )

    def ensure_initialized(self, action: str) -> None:
        if not self.initialized:
            raise EventNotInitializedError(
                f"Cannot {action}: event '{self.name}' is not initialized"
            )

    # ========== Entrants ==========

    @property
    def is_doubles(self) -> bool:
        return self.match_format.is_doubles

    def participants(self) -> List[Union[Player, Team]]:
        """Entrants that meet in matches: teams for doubles, players otherwise."""
        return list(self.teams) if self.is_doubles else list(self.players)

    def participant_ids(self) -> List[ParticipantId]:
        return [p.id for p in self.participants()]

    def seeds(self) -> SeedMap:
        return dict(self.team_seeds if self.is_doubles else self.player_seeds)

    def find_player(self, player_id: str) -> Optional[Player]:
        return next((p for p in self.players if p.id == player_id), None)

    def get_player(self, player_id: str) -> Player:
        player = self.find_player(player_id)
        if player is None:
            raise NotFoundError(f"Player {player_id} is not entered in '{self.name}'")
        return player

    def find_team(self, team_id: str) -> Optional[Team]:
        return next((t for t in self.teams if t.id == team_id), None)

    def get_team(self, team_id: str) -> Team:
        team = self.find_team(team_id)
        if team is None:
            raise NotFoundError(f"Team {team_id} does not exist in '{self.name}'")
        return team

    def team_for_player(self, player_id: str) -> Optional[Team]:
        return next((t for t in self.teams if t.has_player(player_id)), None)

    def get_participant(self, participant_id: ParticipantId) -> Union[Player, Team]:
        if self.is_doubles:
            return self.get_team(participant_id)
        return self.get_player(participant_id)

    def participant_name(self, participant_id: Optional[ParticipantId]) -> str:
        if participant_id is None:
            return BYE_NAME
        return self.get_participant(participant_id).display_name

    def player_ids_for(self, participant_id: ParticipantId) -> List[str]:
        """Players behind a participant id (both members for a team)."""
        if self.is_doubles:
            return [p.id for p in self.get_team(participant_id).players]
        return [participant_id]

    def add_player(self, player: Player) -> None:
        self.ensure_not_initialized("add a player")
        if self.find_player(player.id) is not None:
            raise ValidationError(
                f"Player {player.display_name} is already entered in '{self.name}'"
            )
        self.players.append(player)

    def remove_player(self, player_id: str) -> Player:
        self.ensure_not_initialized("remove a player")
        player = self.get_player(player_id)
        self.players.remove(player)
        self.player_seeds.pop(player_id, None)
        team = self.team_for_player(player_id)
        if team is not None:
            self.remove_team(team.id)
        return player

    def add_team(self, team: Team) -> None:
        self.ensure_not_initialized("add a team")
        for player in team.players:
            if self.find_player(player.id) is None:
                raise InvalidParticipantError(
                    f"Player {player.display_name} is not entered in '{self.name}'"
                )
            if self.team_for_player(player.id) is not None:
                raise ValidationError(
                    f"Player {player.display_name} already belongs to a team"
                )
        self.teams.append(team)

    def remove_team(self, team_id: str) -> Team:
        self.ensure_not_initialized("remove a team")
        team = self.get_team(team_id)
        self.teams.remove(team)
        self.team_seeds.pop(team_id, None)
        return team

    # ========== Seeds / Format ==========

    def set_player_seed(self, player_id: str, seed: int) -> None:
        self.ensure_not_initialized("set seeds")
        if self.find_player(player_id) is None:
            raise InvalidParticipantError(
                f"Player {player_id} is not entered in '{self.name}'"
            )
        self.player_seeds[player_id] = require(validate_positive_integer(seed, "Seed"))

    def set_team_seed(self, team_id: str, seed: int) -> None:
        self.ensure_not_initialized("set seeds")
        if self.find_team(team_id) is None:
            raise InvalidParticipantError(
                f"Team {team_id} does not exist in '{self.name}'"
            )
        self.team_seeds[team_id] = require(validate_positive_integer(seed, "Seed"))

    def clear_seeds(self) -> None:
        self.ensure_not_initialized("clear seeds")
        self.player_seeds.clear()
        self.team_seeds.clear()

    def set_match_format(self, match_format: MatchFormat) -> None:
        self.ensure_not_initialized("change the match format")
        self.match_format = match_format

    # ========== Match Arena ==========

    def add_match(self, match: Match) -> Match:
        self.matches[match.id] = match
        return match

    def match(self, match_id: str) -> Match:
        try:
            return self.matches[match_id]
        except KeyError:
            raise NotFoundError(
                f"Match {match_id} does not exist in '{self.name}'"
            ) from None

    def all_matches(self) -> List[Match]:
        return list(self.matches.values())

    def played_matches(self) -> List[Match]:
        """Completed matches that were actually contested (no walkovers)."""
        return [m for m in self.matches.values() if m.is_played]

    def has_played_match(self) -> bool:
        return any(m.is_played for m in self.matches.values())

    def reset_structure(self) -> None:
        """Drop every generated match; entrants and seeds stay."""
        self.matches.clear()

    def round_views(self) -> List[Dict[str, Any]]:
        """Rounds of match ids for display; overridden per variant."""
        return []

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "variant": self.variant.value,
            "tournament_id": self.tournament_id,
            "initialized": self.initialized,
            "match_format": self.match_format.to_dict(),
            "players": [p.to_dict() for p in self.players],
            "teams": [t.to_dict() for t in self.teams],
            "player_seeds": dict(self.player_seeds),
            "team_seeds": dict(self.team_seeds),
            "rounds": self.round_views(),
            "matches": [m.to_dict() for m in self.matches.values()],
            "points_distribution": (
                self.points_distribution.to_dict() if self.points_distribution else None
            ),
        }


@dataclass
class SingleElimEvent(Event):
    """Single elimination, with an optional third-place (bronze) match."""

    variant: ClassVar[EventVariant] = EventVariant.SINGLE_ELIM

    rounds: List[Round] = field(default_factory=list)
    third_place_match: bool = False
    bronze_match_id: Optional[str] = None

    @property
    def final_match(self) -> Optional[Match]:
        if not self.rounds:
            return None
        return self.match(self.rounds[-1].match_ids[0])

    def reset_structure(self) -> None:
        super().reset_structure()
        self.rounds = []
        self.bronze_match_id = None

    def round_views(self) -> List[Dict[str, Any]]:
        views = [
            _round_view(BracketType.WINNERS, r.index, r.match_ids) for r in self.rounds
        ]
        if self.bronze_match_id:
            views.append(
                _round_view(BracketType.THIRD_PLACE, 0, [self.bronze_match_id])
            )
        return views


@dataclass
class DoubleElimEvent(Event):
    """Double elimination with feed-in losers bracket.

    Winners rounds with index below ``feed_in_cutoff_round`` drop their
    losers into the losers bracket; later winners-round losers are out (the
    semifinal losers may still meet in the bronze match).
    """

    variant: ClassVar[EventVariant] = EventVariant.DOUBLE_ELIM

    winners_bracket: List[BracketRound] = field(default_factory=list)
    losers_bracket: List[BracketRound] = field(default_factory=list)
    feed_in_cutoff_round: int = -1
    third_place_match: bool = False
    bronze_match_id: Optional[str] = None

    def calculate_feed_in_cutoff(self) -> int:
        return max(0, len(self.winners_bracket) - 2)

    def should_feed_into_losers_bracket(self, winners_round_index: int) -> bool:
        return winners_round_index < self.feed_in_cutoff_round

    @property
    def winners_final(self) -> Optional[Match]:
        if not self.winners_bracket:
            return None
        return self.match(self.winners_bracket[-1].match_ids[0])

    @property
    def losers_final(self) -> Optional[Match]:
        if not self.losers_bracket:
            return None
        return self.match(self.losers_bracket[-1].match_ids[0])

    def bracket_structure_description(self) -> str:
        return (
            f"Winners bracket: {len(self.winners_bracket)} rounds, "
            f"losers bracket: {len(self.losers_bracket)} rounds, "
            f"feed-in cutoff: round {self.feed_in_cutoff_round}"
        )

    def reset_structure(self) -> None:
        super().reset_structure()
        self.winners_bracket = []
        self.losers_bracket = []
        self.feed_in_cutoff_round = -1
        self.bronze_match_id = None

    def round_views(self) -> List[Dict[str, Any]]:
        views = []
        for bracket_round in self.winners_bracket + self.losers_bracket:
            view = _round_view(
                bracket_round.bracket_type, bracket_round.index, bracket_round.match_ids
            )
            view["feeds_from_winners_round"] = bracket_round.feeds_from_winners_round
            views.append(view)
        if self.bronze_match_id:
            views.append(
                _round_view(BracketType.THIRD_PLACE, 0, [self.bronze_match_id])
            )
        return views


@dataclass
class RoundRobinEvent(Event):
    """Every participant meets every other participant once."""

    variant: ClassVar[EventVariant] = EventVariant.ROUND_ROBIN

    schedules: Dict[str, Schedule] = field(default_factory=dict)

    def schedule_for(self, participant_id: ParticipantId) -> Schedule:
        try:
            return self.schedules[participant_id]
        except KeyError:
            raise NotFoundError(
                f"No schedule for {participant_id} in '{self.name}'"
            ) from None

    def reset_structure(self) -> None:
        super().reset_structure()
        self.schedules = {}

    def round_views(self) -> List[Dict[str, Any]]:
        by_round: Dict[int, List[str]] = {}
        for match in self.matches.values():
            by_round.setdefault(match.round_index or 0, []).append(match.id)
        return [
            _round_view(None, index, ids) for index, ids in sorted(by_round.items())
        ]


EVENT_CLASSES: Dict[EventVariant, Type[Event]] = {
    EventVariant.SINGLE_ELIM: SingleElimEvent,
    EventVariant.DOUBLE_ELIM: DoubleElimEvent,
    EventVariant.ROUND_ROBIN: RoundRobinEvent,
}


def create_event(variant: Union[EventVariant, str], name: str, **kwargs: Any) -> Event:
    """Instantiate the event class for ``variant``.

    Raises:
        UnsupportedOperationError: If ``variant`` names no known format
    """
    try:
        event_class = EVENT_CLASSES[EventVariant(variant)]
    except ValueError:
        raise UnsupportedOperationError(f"Unknown event variant: {variant!r}") from None
    return event_class(name=name, **kwargs)
