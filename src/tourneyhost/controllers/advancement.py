"""Result recording and bracket advancement.

This module handles recording match and game results with proper validation,
moving winners (and double-elimination losers) along the bracket graph, and
completing matches whose opponent slot can never be filled.
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

from typing import List, Optional

from tourneyhost.exceptions import (
    AlreadyCompletedError,
    InvalidParticipantError,
    InvalidStateError,
    MatchNotReadyError,
    ValidationError,
)
from tourneyhost.models.enums import EventVariant
from tourneyhost.models.event import Event
from tourneyhost.models.match import WINNER, Game, Match
from tourneyhost.type_hints import A, B, GameScores, ParticipantId, Slot
from tourneyhost.utils import setup_logger
from tourneyhost.utils.validation import require, validate_game_score

logger = setup_logger(__name__)


class AdvancementEngine:
    """Drives matches from PENDING to COMPLETED.

    This class is responsible for:
    - Recording declared results and individual games (best-of-N)
    - Rejecting results for completed, unready or foreign matches
    - Placing winners and dropped losers into their next matches
    - Resolving walkovers after every state change
    """

    # ========== Recording ==========

    def record_result(
        self,
        event: Event,
        match_id: str,
        winner_id: ParticipantId,
        scores: Optional[GameScores] = None,
    ) -> Match:
        """Record the outcome of a whole match.

        Games recorded earlier through :meth:`record_game` are replaced.

        Args:
            event: Event owning the match
            match_id: Match to complete
            winner_id: Declared winner, must occupy one of the slots
            scores: Game scores in slot order; when omitted the winner is
                credited with straight 1-0 games

        Returns:
            The completed match

        Raises:
            AlreadyCompletedError: If the match already has a winner
            MatchNotReadyError: If a slot is still empty
            InvalidParticipantError: If ``winner_id`` is not in the match
            ValidationError: If the scores do not produce ``winner_id``
        """
        match = self._playable_match(event, match_id)
        winner_slot = match.slot_of(winner_id)
        if winner_slot is None:
            raise InvalidParticipantError(
                f"{winner_id} is not a participant of match {match.id}"
            )

        if scores is None:
            winning_score = (1, 0) if winner_slot == A else (0, 1)
            scores = [winning_score] * match.games_required_to_win
        games = self._games_from_scores(match, scores, winner_slot)

        match.games = games
        self._complete(event, match, winner_id)
        return match

    def record_game(
        self, event: Event, match_id: str, score_a: int, score_b: int
    ) -> Game:
        """Append one game to a match; completes it once a side has enough wins.

        Raises:
            AlreadyCompletedError: If the match is already decided
            MatchNotReadyError: If a slot is still empty
            ValidationError: If a score is not a non-negative integer
        """
        match = self._playable_match(event, match_id)
        score_a, score_b = require(validate_game_score(score_a, score_b))
        game = Game(
            match_id=match.id,
            game_number=match.next_game_number(),
            score_a=score_a,
            score_b=score_b,
        )
        match.games.append(game)
        logger.debug(
            f"Match {match.id} game {game.game_number}: {score_a}-{score_b}"
        )

        decided = match.slot_reaching_required_wins()
        if decided is not None:
            self._complete(event, match, match.participant(decided))
        return game

    def _playable_match(self, event: Event, match_id: str) -> Match:
        event.ensure_initialized("record a result")
        match = event.match(match_id)
        if match.completed:
            raise AlreadyCompletedError(f"Match {match.id} is already completed")
        if not match.is_ready:
            raise MatchNotReadyError(
                f"Match {match.id} is still waiting for a participant"
            )
        return match

    @staticmethod
    def _games_from_scores(
        match: Match, scores: GameScores, winner_slot: Slot
    ) -> List[Game]:
        games: List[Game] = []
        wins = {A: 0, B: 0}
        for number, score in enumerate(scores, start=1):
            if max(wins.values()) >= match.games_required_to_win:
                raise ValidationError(
                    f"Match {match.id} was decided before game {number}"
                )
            score_a, score_b = require(validate_game_score(*score))
            game = Game(match.id, number, score_a, score_b)
            if game.winning_slot is not None:
                wins[game.winning_slot] += 1
            games.append(game)

        if wins[winner_slot] < match.games_required_to_win:
            raise ValidationError(
                f"Scores give {wins[winner_slot]} game wins to the declared winner, "
                f"{match.games_required_to_win} are required"
            )
        return games

    # ========== Advancement ==========

    def _complete(self, event: Event, match: Match, winner_id: ParticipantId) -> None:
        match.winner_id = winner_id
        logger.info(
            f"Match {match.id} completed in '{event.name}': "
            f"{event.participant_name(winner_id)} won"
        )
        self._advance(event, match)
        self.resolve_walkovers(event)

    def _advance(self, event: Event, match: Match) -> None:
        if match.next_match_id is not None:
            self._place(event, match.next_match_id, match.next_slot, match.winner_id)
        loser_id = match.loser_id
        if loser_id is not None and match.loser_next_match_id is not None:
            self._place(
                event, match.loser_next_match_id, match.loser_next_slot, loser_id
            )

    @staticmethod
    def _place(
        event: Event, match_id: str, slot: Slot, participant_id: ParticipantId
    ) -> None:
        target = event.match(match_id)
        occupant = target.participant(slot)
        if occupant is not None and occupant != participant_id:
            raise InvalidStateError(
                f"Slot {slot} of match {target.id} is already taken by {occupant}"
            )
        target.set_participant(slot, participant_id)

    # ========== Walkovers ==========

    def slot_is_dead(self, event: Event, match: Match, slot: Slot) -> bool:
        """True when the empty ``slot`` of ``match`` can never be filled.

        That is the case for a bye in the draw, for the winner of a match that
        itself can never be played, and for the loser of a walkover.
        """
        if match.participant(slot) is not None:
            return False
        link = match.feeders.get(slot)
        if link is None:
            return True
        feeder = event.match(link.match_id)
        if link.outcome == WINNER:
            return self.is_void(event, feeder)
        if feeder.completed:
            return feeder.walkover
        return self.slot_is_dead(event, feeder, A) or self.slot_is_dead(
            event, feeder, B
        )

    def is_void(self, event: Event, match: Match) -> bool:
        """A match both of whose slots are dead is never played."""
        return (
            not match.completed
            and self.slot_is_dead(event, match, A)
            and self.slot_is_dead(event, match, B)
        )

    def resolve_walkovers(self, event: Event) -> List[Match]:
        """Complete every match with one participant facing a dead slot.

        Repeats until nothing changes, since each walkover can unlock the
        next one downstream.

        Returns:
            Matches completed as walkovers, in completion order
        """
        resolved: List[Match] = []
        changed = True
        while changed:
            changed = False
            for match in event.matches.values():
                if match.completed or len(match.participants()) != 1:
                    continue
                empty_slot = B if match.participant_a is not None else A
                if not self.slot_is_dead(event, match, empty_slot):
                    continue
                match.winner_id = match.participants()[0]
                match.walkover = True
                logger.debug(
                    f"Walkover in match {match.id}: "
                    f"{event.participant_name(match.winner_id)} advances"
                )
                self._advance(event, match)
                resolved.append(match)
                changed = True
        return resolved

    # ========== Queries ==========

    def is_finished(self, event: Event) -> bool:
        """Every match is either completed or can never be played."""
        return event.initialized and all(
            match.completed or self.is_void(event, match)
            for match in event.matches.values()
        )

    def open_matches(self, event: Event) -> List[Match]:
        """Matches ready to be played right now."""
        return [m for m in event.matches.values() if not m.completed and m.is_ready]

    def champion(self, event: Event) -> Optional[ParticipantId]:
        if event.variant is EventVariant.SINGLE_ELIM:
            final = event.final_match
        elif event.variant is EventVariant.DOUBLE_ELIM:
            final = event.winners_final
        else:
            return None
        return final.winner_id if final is not None else None
