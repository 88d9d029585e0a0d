"""Tournament and League models."""

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
from datetime import datetime
from typing import Any, Dict, List, Optional

from tourneyhost.exceptions import NotFoundError, ValidationError
from tourneyhost.models.config import TournamentConfig
from tourneyhost.models.event import Event
from tourneyhost.models.player import Player
from tourneyhost.utils import generate_id, normalize_name


class EditableMixin:
    """Owner plus authorized editors, shared by tournaments and leagues."""

    owner: Optional[str]
    authorized_editors: List[str]

    def can_user_edit(self, user: Optional[str]) -> bool:
        if user is None:
            return False
        return user == self.owner or user in self.authorized_editors

    def add_editor(self, editor: str) -> None:
        if editor != self.owner and editor not in self.authorized_editors:
            self.authorized_editors.append(editor)

    def remove_editor(self, editor: str) -> None:
        if editor not in self.authorized_editors:
            raise NotFoundError(f"{editor} is not an editor")
        self.authorized_editors.remove(editor)


class Tournament(EditableMixin):
    """A competition made of ordered events.

    The descriptive settings live in :class:`TournamentConfig`; the
    tournament itself owns its events.
    """

    def __init__(
        self,
        config: TournamentConfig,
        owner: Optional[str] = None,
        tournament_id: Optional[str] = None,
    ) -> None:
        self.config = config
        self.owner = owner
        self.id = tournament_id or generate_id("Tournament")
        self.authorized_editors: List[str] = []
        self.events: List[Event] = []

    # ========== Properties ==========

    @property
    def name(self) -> str:
        return self.config.name

    @name.setter
    def name(self, value: str) -> None:
        self.config = TournamentConfig(
            name=value,
            location=self.config.location,
            message=self.config.message,
            begin=self.config.begin,
            end=self.config.end,
        )

    @property
    def location(self) -> Optional[str]:
        return self.config.location

    @property
    def message(self) -> Optional[str]:
        return self.config.message

    @property
    def begin(self) -> Optional[datetime]:
        return self.config.begin

    @property
    def end(self) -> Optional[datetime]:
        return self.config.end

    # ========== Events ==========

    def add_event(self, event: Event) -> Event:
        key = normalize_name(event.name)
        if any(normalize_name(e.name) == key for e in self.events):
            raise ValidationError(
                f"Tournament '{self.name}' already has an event named '{event.name}'"
            )
        event.tournament_id = self.id
        self.events.append(event)
        return event

    def event(self, index: int) -> Event:
        """Event by its position in the tournament (0-based)."""
        if not 0 <= index < len(self.events):
            raise NotFoundError(
                f"Tournament '{self.name}' has no event at index {index}"
            )
        return self.events[index]

    def find_event(self, event_id: str) -> Event:
        for event in self.events:
            if event.id == event_id:
                return event
        raise NotFoundError(f"Event {event_id} is not part of '{self.name}'")

    def remove_event(self, event_id: str) -> Event:
        event = self.find_event(event_id)
        self.events.remove(event)
        return event

    def all_players(self) -> List[Player]:
        """Distinct players over all events, in order of first appearance."""
        seen: Dict[str, Player] = {}
        for event in self.events:
            for player in event.players:
                seen.setdefault(player.id, player)
        return list(seen.values())

    def to_dict(self) -> Dict[str, Any]:
        data = self.config.to_dict()
        data.update(
            {
                "id": self.id,
                "owner": self.owner,
                "authorized_editors": list(self.authorized_editors),
                "events": [event.to_dict() for event in self.events],
            }
        )
        return data


@dataclass
class LeaguePlayerRanking:
    """One row of a league table; recomputed wholesale, never edited."""

    player: Player
    rank: int
    points: int = 0
    matches_played: int = 0
    matches_won: int = 0
    matches_lost: int = 0

    @property
    def player_id(self) -> str:
        return self.player.id

    def to_dict(self) -> Dict[str, Any]:
        return {
            "player": self.player.to_dict(),
            "rank": self.rank,
            "points": self.points,
            "matches_played": self.matches_played,
            "matches_won": self.matches_won,
            "matches_lost": self.matches_lost,
        }


class League(EditableMixin):
    """A series of tournaments whose points roll up into one ranking list."""

    def __init__(
        self, name: str, owner: Optional[str] = None, league_id: Optional[str] = None
    ) -> None:
        self.name = name
        self.owner = owner
        self.id = league_id or generate_id("League")
        self.authorized_editors: List[str] = []
        self.tournaments: List[Tournament] = []
        self.player_rankings: List[LeaguePlayerRanking] = []

    def add_tournament(self, tournament: Tournament) -> None:
        if any(t.id == tournament.id for t in self.tournaments):
            raise ValidationError(
                f"Tournament '{tournament.name}' is already part of '{self.name}'"
            )
        self.tournaments.append(tournament)

    def remove_tournament(self, tournament_id: str) -> Tournament:
        for tournament in self.tournaments:
            if tournament.id == tournament_id:
                self.tournaments.remove(tournament)
                return tournament
        raise NotFoundError(
            f"Tournament {tournament_id} is not part of league '{self.name}'"
        )

    def ranking_for(self, player_id: str) -> Optional[LeaguePlayerRanking]:
        return next(
            (r for r in self.player_rankings if r.player_id == player_id), None
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "owner": self.owner,
            "authorized_editors": list(self.authorized_editors),
            "tournament_ids": [t.id for t in self.tournaments],
            "player_rankings": [r.to_dict() for r in self.player_rankings],
        }
