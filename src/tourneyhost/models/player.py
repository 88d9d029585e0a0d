"""Player and Team models."""

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
from typing import Any, Dict, List, Optional

from tourneyhost.constants import TEAM_NAME_SEPARATOR
from tourneyhost.utils import generate_id


@dataclass(frozen=True)
class Player:
    """A competitor. Brackets reference players, they never own them.

    Attributes
    ----------
    name : str
        Full name of the player.
    username : str, optional
        Account handle; preferred over ``name`` for display.
    id : str
        Opaque identifier.
    """

    name: str
    username: Optional[str] = None
    id: str = field(default_factory=lambda: generate_id("Player"))

    @property
    def display_name(self) -> str:
        return self.username or self.name

    def matches_name(self, text: Optional[str]) -> bool:
        """Case-insensitive match of ``text`` against the username or name."""
        if not text:
            return False
        wanted = text.strip().lower()
        candidates = [self.name, self.username or ""]
        return any(candidate.strip().lower() == wanted for candidate in candidates)

    def to_dict(self) -> Dict[str, Any]:
        return {"id": self.id, "name": self.name, "username": self.username}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Player":
        return cls(name=data["name"], username=data.get("username"), id=data["id"])


@dataclass
class Team:
    """One or two players entered together in a single event.

    A singles team has only ``player1``; a doubles team has both players.
    """

    event_id: str
    player1: Player
    player2: Optional[Player] = None
    id: str = field(default_factory=lambda: generate_id("Team"))

    @property
    def players(self) -> List[Player]:
        return [p for p in (self.player1, self.player2) if p is not None]

    @property
    def team_name(self) -> str:
        return TEAM_NAME_SEPARATOR.join(p.display_name for p in self.players)

    @property
    def display_name(self) -> str:
        return self.team_name

    def has_player(self, player_id: str) -> bool:
        return any(p.id == player_id for p in self.players)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "event_id": self.event_id,
            "player1": self.player1.to_dict(),
            "player2": self.player2.to_dict() if self.player2 else None,
            "team_name": self.team_name,
        }
