"""Match and Game models.

A Match lives in its event's match arena and refers to neighbouring matches by
id only; the bracket graph is walked through ``Event.matches``.
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
from typing import Any, Dict, List, Optional

from tourneyhost.models.enums import BracketType, MatchStatus
from tourneyhost.type_hints import A, B, Outcome, ParticipantId, Slot
from tourneyhost.utils import generate_id

WINNER: Outcome = "winner"
LOSER: Outcome = "loser"


def slot_for_position(position: int) -> Slot:
    """Even positions feed slot A of the next match, odd positions slot B."""
    return A if position % 2 == 0 else B


@dataclass
class Game:
    """A single game of a match, scores in slot order.

    Attributes
    ----------
    match_id : str
        Match the game belongs to.
    game_number : int
        1-based sequence number inside the match.
    score_a, score_b : int
        Scores of the participants in slot A and slot B.
    """

    match_id: str
    game_number: int
    score_a: int
    score_b: int
    id: str = field(default_factory=lambda: generate_id("Game"))

    @property
    def winning_slot(self) -> Optional[Slot]:
        """Slot with the higher score; ``None`` for a tied game."""
        if self.score_a > self.score_b:
            return A
        if self.score_b > self.score_a:
            return B
        return None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "match_id": self.match_id,
            "game_number": self.game_number,
            "score_a": self.score_a,
            "score_b": self.score_b,
        }


@dataclass(frozen=True)
class FeederLink:
    """Where a slot's occupant comes from: the winner or loser of another match."""

    match_id: str
    outcome: Outcome = WINNER


@dataclass
class Match:
    """A contest between the occupants of slot A and slot B.

    Slots hold player ids in singles events and team ids in doubles events.
    A match is completed once ``winner_id`` is set: either one side won
    ``games_required_to_win`` games, or the match was a walkover (one side
    present, the other slot can never be filled) which has no games and no
    loser.
    """

    event_id: str
    games_required_to_win: int = 1
    participant_a: Optional[ParticipantId] = None
    participant_b: Optional[ParticipantId] = None
    bracket: Optional[BracketType] = None
    round_index: Optional[int] = None
    position: int = 0
    id: str = field(default_factory=lambda: generate_id("Match"))
    games: List[Game] = field(default_factory=list)
    winner_id: Optional[ParticipantId] = None
    walkover: bool = False
    next_match_id: Optional[str] = None
    next_slot: Optional[Slot] = None
    loser_next_match_id: Optional[str] = None
    loser_next_slot: Optional[Slot] = None
    feeders: Dict[Slot, FeederLink] = field(default_factory=dict)

    # ========== State ==========

    @property
    def completed(self) -> bool:
        return self.winner_id is not None

    @property
    def status(self) -> MatchStatus:
        return MatchStatus.COMPLETED if self.completed else MatchStatus.PENDING

    @property
    def is_played(self) -> bool:
        """Completed on the board, i.e. not a walkover."""
        return self.completed and not self.walkover

    @property
    def is_ready(self) -> bool:
        return self.participant_a is not None and self.participant_b is not None

    @property
    def loser_id(self) -> Optional[ParticipantId]:
        if not self.is_played:
            return None
        return self.opponent_of(self.winner_id)

    @property
    def previous_match_ids(self) -> List[str]:
        """Same-bracket feeder matches whose winners fill this match."""
        return [
            link.match_id
            for slot, link in sorted(self.feeders.items())
            if link.outcome == WINNER
        ]

    # ========== Slots ==========

    def participant(self, slot: Slot) -> Optional[ParticipantId]:
        return self.participant_a if slot == A else self.participant_b

    def set_participant(self, slot: Slot, participant_id: ParticipantId) -> None:
        if slot == A:
            self.participant_a = participant_id
        else:
            self.participant_b = participant_id

    def participants(self) -> List[ParticipantId]:
        return [p for p in (self.participant_a, self.participant_b) if p is not None]

    def has_participant(self, participant_id: ParticipantId) -> bool:
        return participant_id is not None and participant_id in self.participants()

    def slot_of(self, participant_id: ParticipantId) -> Optional[Slot]:
        if participant_id is None:
            return None
        if self.participant_a == participant_id:
            return A
        if self.participant_b == participant_id:
            return B
        return None

    def opponent_of(self, participant_id: ParticipantId) -> Optional[ParticipantId]:
        slot = self.slot_of(participant_id)
        if slot is None:
            return None
        return self.participant_b if slot == A else self.participant_a

    # ========== Games ==========

    def wins(self, slot: Slot) -> int:
        return sum(1 for game in self.games if game.winning_slot == slot)

    def slot_reaching_required_wins(self) -> Optional[Slot]:
        for slot in (A, B):
            if self.wins(slot) >= self.games_required_to_win:
                return slot
        return None

    def next_game_number(self) -> int:
        return len(self.games) + 1

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "event_id": self.event_id,
            "bracket": self.bracket.value if self.bracket else None,
            "round_index": self.round_index,
            "position": self.position,
            "participant_a": self.participant_a,
            "participant_b": self.participant_b,
            "games_required_to_win": self.games_required_to_win,
            "games": [game.to_dict() for game in self.games],
            "winner_id": self.winner_id,
            "walkover": self.walkover,
            "completed": self.completed,
            "next_match_id": self.next_match_id,
            "loser_next_match_id": self.loser_next_match_id,
        }
